"""Pydantic models for ECS resources and traffic weights."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ContainerSpec(BaseModel):
    """Container definition inside a task definition.

    Only ``name`` and ``image`` are modelled; every other key of the
    definition is kept as an extra and sent back unchanged.
    """

    name: str
    image: str

    class Config:
        extra = "allow"
        frozen = True


class RunSpecification(BaseModel):
    """ECS task definition revision."""

    task_definition_arn: Optional[str] = None
    family: str
    network_mode: Optional[str] = None
    requires_compatibilities: List[str] = []
    cpu: Optional[str] = None
    memory: Optional[str] = None
    container_definitions: List[ContainerSpec]
    volumes: List[Dict[str, Any]] = []
    placement_constraints: List[Dict[str, Any]] = []
    execution_role_arn: Optional[str] = None
    task_role_arn: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"
        frozen = True

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RunSpecification":
        """Build from a DescribeTaskDefinition ``taskDefinition`` payload."""
        return cls.model_validate(payload)

    def with_image(self, container_name: str, image: str) -> Tuple["RunSpecification", bool]:
        """Return a copy with ``image`` applied to ``container_name``.

        Args:
            container_name: Exact, case-sensitive container name
            image: Image reference to set

        Returns:
            (new specification, whether a container matched). The copy has no
            revision ARN; it only gets one when registered.
        """
        matched = False
        containers = []
        for container in self.container_definitions:
            if container.name == container_name:
                containers.append(container.model_copy(update={"image": image}))
                matched = True
            else:
                containers.append(container)

        spec = self.model_copy(
            update={"container_definitions": containers, "task_definition_arn": None}
        )
        return spec, matched

    def images(self) -> Dict[str, str]:
        """Map of container name -> image."""
        return {c.name: c.image for c in self.container_definitions}

    def to_register_kwargs(self) -> Dict[str, Any]:
        """Build RegisterTaskDefinition keyword arguments.

        Optional attributes absent on this revision are left out entirely so
        they are not sent as explicit values.
        """
        kwargs: Dict[str, Any] = {
            "family": self.family,
            "containerDefinitions": [
                c.model_dump(by_alias=True) for c in self.container_definitions
            ],
            "volumes": list(self.volumes),
            "placementConstraints": list(self.placement_constraints),
        }
        if self.requires_compatibilities:
            kwargs["requiresCompatibilities"] = list(self.requires_compatibilities)

        optional = {
            "networkMode": self.network_mode,
            "cpu": self.cpu,
            "memory": self.memory,
            "executionRoleArn": self.execution_role_arn,
            "taskRoleArn": self.task_role_arn,
        }
        kwargs.update({key: value for key, value in optional.items() if value})
        return kwargs


class ServiceState(BaseModel):
    """Current state of an ECS service."""

    cluster: str
    service: str
    task_definition_arn: str
    status: Optional[str] = None
    desired_count: Optional[int] = None
    running_count: Optional[int] = None

    class Config:
        frozen = True


@dataclass(frozen=True)
class TrafficWeights:
    """Listener weights for one shift step. Always sums to 100."""

    green: int
    blue: int
