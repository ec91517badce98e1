"""AWS control plane clients."""

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ConfigurationError
from .base import ClusterControlPlane, LoadBalancerControlPlane, ServiceDescription
from .ecs import EcsClient
from .elb import ElbClient

logger = structlog.get_logger()


def create_session(region: str) -> boto3.session.Session:
    """Create a boto3 session and verify credentials resolve.

    Args:
        region: AWS region

    Returns:
        boto3 session bound to ``region``

    Raises:
        ConfigurationError: If no usable credentials are available
    """
    session = boto3.session.Session(region_name=region)
    try:
        identity = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        raise ConfigurationError(f"AWS credentials not configured or invalid: {e}") from e

    logger.info(
        "aws.credentials_verified",
        account=identity.get("Account"),
        arn=identity.get("Arn"),
        region=region,
    )
    return session


__all__ = [
    "ClusterControlPlane",
    "LoadBalancerControlPlane",
    "ServiceDescription",
    "EcsClient",
    "ElbClient",
    "create_session",
]
