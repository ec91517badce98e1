"""Deployment error taxonomy."""

from enum import Enum
from typing import List, Optional

from .models import TrafficWeights


class Stage(str, Enum):
    """Pipeline stage an error originated from."""

    CONFIGURATION = "configuration"
    DISCOVERY = "discovery"
    REGISTRATION = "registration"
    STABILIZATION = "stabilization"
    SHIFT_PRECHECK = "shift_precheck"
    SHIFT_STEP = "shift_step"


class DeploymentError(Exception):
    """Fatal error that aborts the deployment."""

    stage: Stage = Stage.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(DeploymentError):
    """Missing or invalid configuration, detected before any remote call."""

    stage = Stage.CONFIGURATION


class DiscoveryError(DeploymentError):
    """The service could not be described."""

    stage = Stage.DISCOVERY


class RegistrationError(DeploymentError):
    """The new task definition revision was rejected."""

    stage = Stage.REGISTRATION


class StabilizationError(DeploymentError):
    """The service was not repointed or never became stable.

    The service may already reference the new revision.
    """

    stage = Stage.STABILIZATION


class ShiftPrecheckError(DeploymentError):
    """The listener is unreachable. Traffic is untouched."""

    stage = Stage.SHIFT_PRECHECK


class ShiftStepError(DeploymentError):
    """A weight write failed mid-shift.

    Traffic stays split at ``last_applied`` (None when no step was written)
    and needs manual remediation.
    """

    stage = Stage.SHIFT_STEP

    def __init__(
        self,
        message: str,
        step: int,
        last_applied: Optional[TrafficWeights] = None,
        applied: Optional[List[TrafficWeights]] = None,
    ):
        super().__init__(message)
        self.step = step
        self.last_applied = last_applied
        self.applied = list(applied or [])


class ShiftAbortedError(ShiftStepError):
    """The shift was cancelled between steps."""


class DeploymentCancelledError(DeploymentError):
    """Cancellation was requested before a stage that changes the service.

    ``stage`` is the stage that was about to run and was skipped.
    """

    def __init__(self, message: str, stage: Stage):
        super().__init__(message)
        self.stage = stage
