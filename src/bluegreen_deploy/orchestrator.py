"""Blue/green deployment orchestration."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import structlog

from .client.base import ClusterControlPlane, LoadBalancerControlPlane
from .config import DeployConfig
from .errors import DeploymentCancelledError, DeploymentError, ShiftStepError, Stage
from .models import TrafficWeights
from .stages import RevisionPublisher, ServiceUpdater, TrafficShifter
from .utils.cancel import CancellationToken

logger = structlog.get_logger()


class DeploymentStatus(str, Enum):
    """Terminal deployment status."""

    COMPLETED = "completed"
    COMPLETED_NO_SHIFT = "completed_no_shift"
    FAILED = "failed"


@dataclass
class DeploymentOutcome:
    """Result of a deployment run."""

    status: DeploymentStatus
    stage: Optional[Stage] = None  # Failed stage
    cause: Optional[str] = None
    previous_task_definition: Optional[str] = None
    task_definition: Optional[str] = None
    service_updated: bool = False
    weights: List[TrafficWeights] = field(default_factory=list)
    last_applied: Optional[TrafficWeights] = None  # Split left behind by a failed shift

    @property
    def succeeded(self) -> bool:
        return self.status != DeploymentStatus.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class DeploymentOrchestrator:
    """Runs discovery, revision publishing, service update and traffic shift in order."""

    def __init__(
        self,
        config: DeployConfig,
        ecs: ClusterControlPlane,
        elb: LoadBalancerControlPlane,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """Initialize orchestrator.

        Args:
            config: Deployment configuration
            ecs: Cluster control plane
            elb: Load balancer control plane
            cancel_token: Token used to abort the deployment before a
                mutating stage or between shift steps
        """
        self.config = config
        self.cancel_token = cancel_token or CancellationToken()

        self.publisher = RevisionPublisher(ecs)
        self.updater = ServiceUpdater(
            ecs,
            cluster=config.cluster,
            service=config.service,
            stabilize_delay=config.stabilize_delay,
            stabilize_max_attempts=config.stabilize_max_attempts,
        )
        self.shifter = TrafficShifter(elb, cancel_token=self.cancel_token)

        logger.info(
            "deploy.initialized",
            region=config.region,
            cluster=config.cluster,
            service=config.service,
            image=config.image or "<none>",
            container=config.container_name or "<none>",
            listener=config.listener_arn,
            shift_steps=config.shift_steps,
            shift_interval=config.shift_interval,
        )

    async def deploy(self) -> DeploymentOutcome:
        """Run the deployment.

        The first fatal error stops the pipeline; later stages never run.

        Returns:
            DeploymentOutcome
        """
        outcome = DeploymentOutcome(status=DeploymentStatus.FAILED)

        try:
            # 1. Discover current task definition
            state = await self.updater.discover()
            outcome.previous_task_definition = state.task_definition_arn

            # 2. Register new revision if an image override is given
            self._check_cancelled(Stage.REGISTRATION)
            target = await self.publisher.publish(
                state.task_definition_arn,
                image=self.config.image,
                container_name=self.config.container_name,
            )
            outcome.task_definition = target

            # 3. Point the service at it and wait for stability
            self._check_cancelled(Stage.STABILIZATION)
            outcome.service_updated = await self.updater.update_and_wait(state, target)

            # 4. Shift traffic blue -> green
            if not self.config.traffic_shift_enabled:
                logger.warning(
                    "deploy.traffic_shift_skipped",
                    detail="BLUE_TG_ARN or GREEN_TG_ARN not set",
                )
                outcome.status = DeploymentStatus.COMPLETED_NO_SHIFT
                logger.info("deploy.completed", status=outcome.status.value)
                return outcome

            outcome.weights = await self.shifter.shift(
                self.config.listener_arn,
                blue_tg_arn=self.config.blue_tg_arn,
                green_tg_arn=self.config.green_tg_arn,
                steps=self.config.shift_steps,
                interval=self.config.shift_interval,
            )
            outcome.last_applied = outcome.weights[-1]

        except DeploymentError as e:
            outcome.stage = e.stage
            outcome.cause = e.message
            if isinstance(e, ShiftStepError):
                outcome.last_applied = e.last_applied
                outcome.weights = e.applied
            logger.error(
                "deploy.failed",
                stage=e.stage.value,
                error=e.message,
                task_definition=outcome.task_definition,
            )
            return outcome

        outcome.status = DeploymentStatus.COMPLETED
        logger.info(
            "deploy.completed",
            status=outcome.status.value,
            task_definition=outcome.task_definition,
            green=self.config.green_tg_arn,
        )
        return outcome

    def _check_cancelled(self, stage: Stage):
        if self.cancel_token.cancelled:
            raise DeploymentCancelledError(
                f"Deployment cancelled ({self.cancel_token.reason}) before {stage.value}",
                stage=stage,
            )
