"""ECS client backed by boto3."""

import asyncio

import boto3
import structlog

from ..models import RunSpecification, ServiceState
from .base import ClusterControlPlane, ServiceDescription

logger = structlog.get_logger()


class EcsClient(ClusterControlPlane):
    """Cluster control plane implemented with the boto3 ECS client."""

    def __init__(self, session: boto3.session.Session):
        """Initialize ECS client.

        Args:
            session: boto3 session bound to the deployment region
        """
        self.client = session.client("ecs")
        logger.debug("ecs.client_initialized", region=session.region_name)

    async def describe_service(self, cluster: str, service: str) -> ServiceDescription:
        response = await asyncio.to_thread(
            self.client.describe_services,
            cluster=cluster,
            services=[service],
        )

        failures = response.get("failures", [])
        services = response.get("services", [])
        if failures or not services:
            return ServiceDescription(failures=failures)

        payload = services[0]
        return ServiceDescription(
            service=ServiceState(
                cluster=cluster,
                service=payload.get("serviceName", service),
                task_definition_arn=payload["taskDefinition"],
                status=payload.get("status"),
                desired_count=payload.get("desiredCount"),
                running_count=payload.get("runningCount"),
            )
        )

    async def describe_task_definition(self, task_definition_arn: str) -> RunSpecification:
        response = await asyncio.to_thread(
            self.client.describe_task_definition,
            taskDefinition=task_definition_arn,
        )
        return RunSpecification.from_api(response["taskDefinition"])

    async def register_task_definition(self, spec: RunSpecification) -> RunSpecification:
        response = await asyncio.to_thread(
            self.client.register_task_definition,
            **spec.to_register_kwargs(),
        )
        return RunSpecification.from_api(response["taskDefinition"])

    async def update_service(self, cluster: str, service: str, task_definition_arn: str):
        await asyncio.to_thread(
            self.client.update_service,
            cluster=cluster,
            service=service,
            taskDefinition=task_definition_arn,
        )

    async def wait_until_stable(
        self,
        cluster: str,
        service: str,
        delay: int,
        max_attempts: int,
    ):
        waiter = self.client.get_waiter("services_stable")
        await asyncio.to_thread(
            waiter.wait,
            cluster=cluster,
            services=[service],
            WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts},
        )
