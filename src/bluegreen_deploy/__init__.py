"""Blue/green deployments for ECS services behind an Application Load Balancer."""

from .config import DeployConfig
from .orchestrator import DeploymentOrchestrator, DeploymentOutcome, DeploymentStatus

__version__ = "1.0.0"

__all__ = [
    "DeployConfig",
    "DeploymentOrchestrator",
    "DeploymentOutcome",
    "DeploymentStatus",
]
