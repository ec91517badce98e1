"""Task definition revision publishing."""

from typing import Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from ..client.base import ClusterControlPlane
from ..errors import RegistrationError

logger = structlog.get_logger()


class RevisionPublisher:
    """Registers a new task definition revision carrying an image override."""

    def __init__(self, ecs: ClusterControlPlane):
        """Initialize publisher.

        Args:
            ecs: Cluster control plane
        """
        self.ecs = ecs

    async def publish(
        self,
        current_arn: str,
        image: Optional[str] = None,
        container_name: Optional[str] = None,
    ) -> str:
        """Publish a revision with ``image`` applied to ``container_name``.

        When either value is missing nothing is registered and
        ``current_arn`` is returned as is.

        If no container is called ``container_name`` the revision is still
        registered, with the original images, and a warning is logged.

        Args:
            current_arn: Task definition the service runs now
            image: Image reference to deploy
            container_name: Container that receives the image

        Returns:
            ARN of the task definition the service should run

        Raises:
            RegistrationError: If the source revision cannot be read or the
                new revision is rejected
        """
        if not image or not container_name:
            logger.info("revision.reusing_current", task_definition=current_arn)
            return current_arn

        logger.info(
            "revision.creating",
            source=current_arn,
            container=container_name,
            image=image,
        )

        try:
            source = await self.ecs.describe_task_definition(current_arn)
        except (BotoCoreError, ClientError) as e:
            logger.error("revision.describe_failed", source=current_arn, error=str(e))
            raise RegistrationError(
                f"Failed to describe task definition {current_arn}: {e}"
            ) from e

        spec, matched = source.with_image(container_name, image)
        if not matched:
            # TODO: decide whether an unknown container should fail the deployment
            logger.warning(
                "revision.container_not_found",
                container=container_name,
                family=source.family,
                containers=list(source.images()),
                detail="Using original image(s)",
            )

        try:
            registered = await self.ecs.register_task_definition(spec)
        except (BotoCoreError, ClientError) as e:
            logger.error("revision.register_failed", family=spec.family, error=str(e))
            raise RegistrationError(
                f"Failed to register task definition for {spec.family}: {e}"
            ) from e

        if not registered.task_definition_arn:
            raise RegistrationError(
                f"Registration of {spec.family} returned no task definition ARN"
            )

        logger.info(
            "revision.registered",
            task_definition=registered.task_definition_arn,
            images=registered.images(),
        )
        return registered.task_definition_arn
