"""Control plane interfaces consumed by the deployment stages."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from ..models import RunSpecification, ServiceState


class ServiceDescription(BaseModel):
    """Result of describing a single service."""

    service: Optional[ServiceState] = None
    failures: List[Dict[str, Any]] = []


class ClusterControlPlane(ABC):
    """Cluster orchestration service (ECS)."""

    @abstractmethod
    async def describe_service(self, cluster: str, service: str) -> ServiceDescription:
        """Describe a service.

        Args:
            cluster: Cluster name or ARN
            service: Service name

        Returns:
            ServiceDescription; ``failures`` is non-empty when the
            service could not be resolved
        """
        pass

    @abstractmethod
    async def describe_task_definition(self, task_definition_arn: str) -> RunSpecification:
        """Fetch the full task definition for a revision ARN."""
        pass

    @abstractmethod
    async def register_task_definition(self, spec: RunSpecification) -> RunSpecification:
        """Register ``spec`` as a new revision.

        Returns:
            The registered revision, including its new ARN
        """
        pass

    @abstractmethod
    async def update_service(self, cluster: str, service: str, task_definition_arn: str):
        """Point a service at a task definition revision."""
        pass

    @abstractmethod
    async def wait_until_stable(
        self,
        cluster: str,
        service: str,
        delay: int,
        max_attempts: int,
    ):
        """Block until the service is stable.

        Polls every ``delay`` seconds at most ``max_attempts`` times and
        raises if the service is not stable by then.
        """
        pass


class LoadBalancerControlPlane(ABC):
    """Load balancer control plane (ELBv2)."""

    @abstractmethod
    async def listener_exists(self, listener_arn: str) -> bool:
        """Check that a listener exists and is readable."""
        pass

    @abstractmethod
    async def set_forwarding_weights(
        self,
        listener_arn: str,
        weights: Sequence[Tuple[str, int]],
    ):
        """Replace the listener's forward action in one call.

        Args:
            listener_arn: Listener ARN
            weights: (target group ARN, weight) pairs
        """
        pass
