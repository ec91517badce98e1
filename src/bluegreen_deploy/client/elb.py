"""ELBv2 client backed by boto3."""

import asyncio
from typing import Sequence, Tuple

import boto3
import structlog
from botocore.exceptions import ClientError

from .base import LoadBalancerControlPlane

logger = structlog.get_logger()


class ElbClient(LoadBalancerControlPlane):
    """Load balancer control plane implemented with the boto3 ELBv2 client."""

    def __init__(self, session: boto3.session.Session):
        """Initialize ELBv2 client.

        Args:
            session: boto3 session bound to the deployment region
        """
        self.client = session.client("elbv2")
        logger.debug("elb.client_initialized", region=session.region_name)

    async def listener_exists(self, listener_arn: str) -> bool:
        try:
            response = await asyncio.to_thread(
                self.client.describe_listeners,
                ListenerArns=[listener_arn],
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ListenerNotFound":
                return False
            raise
        return bool(response.get("Listeners"))

    async def set_forwarding_weights(
        self,
        listener_arn: str,
        weights: Sequence[Tuple[str, int]],
    ):
        await asyncio.to_thread(
            self.client.modify_listener,
            ListenerArn=listener_arn,
            DefaultActions=[
                {
                    "Type": "forward",
                    "ForwardConfig": {
                        "TargetGroups": [
                            {"TargetGroupArn": arn, "Weight": weight}
                            for arn, weight in weights
                        ]
                    },
                }
            ],
        )
