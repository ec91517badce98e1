"""ECS service discovery, update and stabilization."""

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..client.base import ClusterControlPlane
from ..errors import DiscoveryError, StabilizationError
from ..models import ServiceState

logger = structlog.get_logger()


class ServiceUpdater:
    """Repoints an ECS service and waits for it to stabilize."""

    def __init__(
        self,
        ecs: ClusterControlPlane,
        cluster: str,
        service: str,
        stabilize_delay: int = 15,
        stabilize_max_attempts: int = 40,
    ):
        """Initialize service updater.

        Args:
            ecs: Cluster control plane
            cluster: Cluster name or ARN
            service: Service name
            stabilize_delay: Seconds between stability polls
            stabilize_max_attempts: Stability polls before giving up
        """
        self.ecs = ecs
        self.cluster = cluster
        self.service = service
        self.stabilize_delay = stabilize_delay
        self.stabilize_max_attempts = stabilize_max_attempts

    async def discover(self) -> ServiceState:
        """Describe the service and return its current state.

        Raises:
            DiscoveryError: If the service cannot be described
        """
        logger.info("service.describing", cluster=self.cluster, service=self.service)

        try:
            description = await self.ecs.describe_service(self.cluster, self.service)
        except (BotoCoreError, ClientError) as e:
            logger.error("service.describe_failed", error=str(e))
            raise DiscoveryError(f"Failed to describe service {self.service}: {e}") from e

        if description.failures or description.service is None:
            logger.error("service.describe_failures", failures=description.failures)
            raise DiscoveryError(
                f"Failed to describe service {self.service} in {self.cluster}: "
                f"{description.failures}"
            )

        state = description.service
        logger.info(
            "service.discovered",
            task_definition=state.task_definition_arn,
            status=state.status,
            desired=state.desired_count,
            running=state.running_count,
        )
        return state

    async def update_and_wait(self, state: ServiceState, target_arn: str) -> bool:
        """Point the service at ``target_arn`` and wait until it is stable.

        Args:
            state: State returned by ``discover``
            target_arn: Task definition to run

        Returns:
            True if the service was updated, False if it already ran
            ``target_arn``

        Raises:
            StabilizationError: If the update is rejected or the service does
                not stabilize within the waiter bounds. The service may
                already reference ``target_arn``; no revert is attempted.
        """
        if target_arn == state.task_definition_arn:
            logger.info("service.unchanged", task_definition=target_arn)
            return False

        logger.info(
            "service.updating",
            previous=state.task_definition_arn,
            task_definition=target_arn,
        )
        try:
            await self.ecs.update_service(self.cluster, self.service, target_arn)
        except (BotoCoreError, ClientError) as e:
            logger.error("service.update_failed", error=str(e))
            raise StabilizationError(f"Failed to update service {self.service}: {e}") from e

        logger.info(
            "service.waiting_for_stability",
            delay=self.stabilize_delay,
            max_attempts=self.stabilize_max_attempts,
        )
        try:
            await self.ecs.wait_until_stable(
                self.cluster,
                self.service,
                delay=self.stabilize_delay,
                max_attempts=self.stabilize_max_attempts,
            )
        except (BotoCoreError, ClientError) as e:
            # TODO: optionally repoint to state.task_definition_arn here
            logger.error(
                "service.unstable",
                task_definition=target_arn,
                error=str(e),
            )
            raise StabilizationError(
                f"Service {self.service} did not stabilize on {target_arn}: {e}"
            ) from e

        logger.info("service.stable", task_definition=target_arn)
        return True
