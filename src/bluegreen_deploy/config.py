"""Configuration module for bluegreen-deploy."""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class DeployConfig(BaseSettings):
    """Deployment configuration from CLI arguments and environment variables.

    Instances are immutable and are handed to every stage explicitly.
    """

    # Target
    region: str = Field(
        min_length=1,
        description="AWS region of the cluster and load balancer"
    )
    cluster: str = Field(
        min_length=1,
        description="ECS cluster name or ARN"
    )
    service: str = Field(
        min_length=1,
        description="ECS service name"
    )

    # Image override (both must be set to register a new revision)
    image: Optional[str] = Field(
        default=None,
        description="Container image to deploy"
    )
    container_name: Optional[str] = Field(
        default=None,
        description="Container in the task definition that receives the image"
    )

    # Traffic shifting
    listener_arn: str = Field(
        min_length=1,
        description="ALB listener whose default action is reweighted"
    )
    shift_steps: int = Field(
        default=10,
        ge=1,
        description="Number of weight changes from blue to green"
    )
    shift_interval: int = Field(
        default=15,
        ge=0,
        description="Seconds to wait between weight changes"
    )
    blue_tg_arn: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("blue_tg_arn", "BLUE_TG_ARN"),
        description="Target group currently receiving traffic"
    )
    green_tg_arn: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("green_tg_arn", "GREEN_TG_ARN"),
        description="Target group receiving the new deployment"
    )

    # Stabilization waiter bounds (defaults match `aws ecs wait services-stable`)
    stabilize_delay: int = Field(
        default=15,
        ge=1,
        description="Seconds between service stability polls"
    )
    stabilize_max_attempts: int = Field(
        default=40,
        ge=1,
        description="Stability polls before giving up"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    class Config:
        """Pydantic config."""
        env_prefix = "BLUEGREEN_"
        case_sensitive = False
        frozen = True

    @field_validator("image", "container_name", "blue_tg_arn", "green_tg_arn", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _distinct_target_groups(self):
        if self.blue_tg_arn and self.blue_tg_arn == self.green_tg_arn:
            raise ValueError("blue and green target groups must differ")
        return self

    @property
    def image_override(self) -> bool:
        """Whether a new task definition revision should be registered."""
        return bool(self.image and self.container_name)

    @property
    def traffic_shift_enabled(self) -> bool:
        """Whether both target groups are configured."""
        return bool(self.blue_tg_arn and self.green_tg_arn)
