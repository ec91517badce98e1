import pytest
from structlog.testing import capture_logs

from bluegreen_deploy.errors import RegistrationError
from bluegreen_deploy.stages.revision import RevisionPublisher

from mock_aws import client_error

NEW_IMAGE = "registry.example.com/web/app:2.0.0"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "image,container",
    [(None, None), (NEW_IMAGE, None), (None, "app"), ("", "app")],
)
async def test_without_override_returns_current_revision(ecs, image, container):
    current = ecs.current_arn

    result = await RevisionPublisher(ecs).publish(current, image=image, container_name=container)

    assert result == current
    assert ecs.calls == []


@pytest.mark.asyncio
async def test_override_registers_new_revision_with_image(ecs):
    current = ecs.current_arn

    result = await RevisionPublisher(ecs).publish(current, image=NEW_IMAGE, container_name="app")

    assert result.endswith("task-definition/web:8")
    assert len(ecs.calls_to("register_task_definition")) == 1
    registered = ecs.registered[0]
    assert registered.images() == {
        "app": NEW_IMAGE,
        "envoy": "registry.example.com/mesh/envoy:1.29",
    }


@pytest.mark.asyncio
async def test_override_carries_every_other_field_through(ecs):
    source = ecs.task_definitions[ecs.current_arn]

    await RevisionPublisher(ecs).publish(ecs.current_arn, image=NEW_IMAGE, container_name="app")

    before = source.to_register_kwargs()
    after = ecs.registered[0].to_register_kwargs()
    before["containerDefinitions"][0]["image"] = NEW_IMAGE
    assert after == before
    # the source revision is never modified
    assert source.images()["app"] == "registry.example.com/web/app:1.0.0"


@pytest.mark.asyncio
async def test_container_name_match_is_case_sensitive(ecs):
    with capture_logs() as logs:
        await RevisionPublisher(ecs).publish(ecs.current_arn, image=NEW_IMAGE, container_name="App")

    assert ecs.registered[0].images()["app"] == "registry.example.com/web/app:1.0.0"
    assert [e["event"] for e in logs if e["log_level"] == "warning"] == [
        "revision.container_not_found"
    ]


@pytest.mark.asyncio
async def test_unknown_container_registers_original_images_with_one_warning(ecs):
    source = ecs.task_definitions[ecs.current_arn]

    with capture_logs() as logs:
        result = await RevisionPublisher(ecs).publish(
            ecs.current_arn, image=NEW_IMAGE, container_name="worker"
        )

    assert result != source.task_definition_arn
    assert ecs.registered[0].images() == source.images()
    warnings = [e for e in logs if e["log_level"] == "warning"]
    assert len(warnings) == 1
    assert warnings[0]["container"] == "worker"


@pytest.mark.asyncio
async def test_registration_failure_is_fatal(ecs):
    ecs.errors["register_task_definition"] = client_error(
        "RegisterTaskDefinition", code="AccessDeniedException"
    )

    with pytest.raises(RegistrationError):
        await RevisionPublisher(ecs).publish(ecs.current_arn, image=NEW_IMAGE, container_name="app")

    assert ecs.registered == []


@pytest.mark.asyncio
async def test_describe_failure_is_a_registration_error(ecs):
    ecs.errors["describe_task_definition"] = client_error("DescribeTaskDefinition")

    with pytest.raises(RegistrationError):
        await RevisionPublisher(ecs).publish(ecs.current_arn, image=NEW_IMAGE, container_name="app")

    assert ecs.calls_to("register_task_definition") == []
