import pytest
from botocore.exceptions import WaiterError

from bluegreen_deploy.errors import DiscoveryError, StabilizationError
from bluegreen_deploy.stages.service import ServiceUpdater

from mock_aws import client_error

NEW_ARN = "arn:aws:ecs:us-east-1:123456789012:task-definition/web:8"


@pytest.fixture
def updater(ecs):
    return ServiceUpdater(ecs, cluster="prod", service="web", stabilize_delay=5, stabilize_max_attempts=3)


@pytest.mark.asyncio
async def test_discover_returns_current_task_definition(ecs, updater):
    state = await updater.discover()

    assert state.task_definition_arn == ecs.current_arn
    assert ecs.calls_to("describe_service") == [("prod", "web")]


@pytest.mark.asyncio
async def test_discover_failures_raise(ecs, updater):
    ecs.failures = [{"arn": "arn:aws:ecs:us-east-1:123456789012:service/prod/web", "reason": "MISSING"}]

    with pytest.raises(DiscoveryError) as exc_info:
        await updater.discover()

    assert "MISSING" in str(exc_info.value)


@pytest.mark.asyncio
async def test_discover_client_error_raises(ecs, updater):
    ecs.errors["describe_service"] = client_error("DescribeServices", code="ClusterNotFoundException")

    with pytest.raises(DiscoveryError):
        await updater.discover()


@pytest.mark.asyncio
async def test_same_task_definition_skips_update_and_wait(ecs, updater):
    state = await updater.discover()

    updated = await updater.update_and_wait(state, state.task_definition_arn)

    assert updated is False
    assert ecs.calls_to("update_service") == []
    assert ecs.calls_to("wait_until_stable") == []


@pytest.mark.asyncio
async def test_update_then_wait_with_bounded_waiter(ecs, updater):
    state = await updater.discover()

    updated = await updater.update_and_wait(state, NEW_ARN)

    assert updated is True
    assert ecs.calls_to("update_service") == [("prod", "web", NEW_ARN)]
    assert ecs.calls_to("wait_until_stable") == [("prod", "web", 5, 3)]
    names = [name for name, _ in ecs.calls]
    assert names.index("update_service") < names.index("wait_until_stable")


@pytest.mark.asyncio
async def test_waiter_timeout_is_a_stabilization_error(ecs, updater):
    state = await updater.discover()
    ecs.errors["wait_until_stable"] = WaiterError(
        name="ServicesStable",
        reason="Max attempts exceeded",
        last_response={"services": []},
    )

    with pytest.raises(StabilizationError):
        await updater.update_and_wait(state, NEW_ARN)

    # the repoint already happened and is not reverted
    assert ecs.current_arn == NEW_ARN
    assert len(ecs.calls_to("update_service")) == 1


@pytest.mark.asyncio
async def test_rejected_update_does_not_wait(ecs, updater):
    state = await updater.discover()
    ecs.errors["update_service"] = client_error("UpdateService", code="InvalidParameterException")

    with pytest.raises(StabilizationError):
        await updater.update_and_wait(state, NEW_ARN)

    assert ecs.calls_to("wait_until_stable") == []
