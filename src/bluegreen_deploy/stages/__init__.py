"""Deployment pipeline stages."""

from .revision import RevisionPublisher
from .service import ServiceUpdater
from .traffic import TrafficShifter, weight_plan

__all__ = [
    "RevisionPublisher",
    "ServiceUpdater",
    "TrafficShifter",
    "weight_plan",
]
