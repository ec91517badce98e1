import pytest

from bluegreen_deploy.config import DeployConfig

from mock_aws import BLUE_TG, GREEN_TG, LISTENER_ARN, REGION, MockEcs, MockElb


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("BLUE_TG_ARN", "GREEN_TG_ARN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ecs():
    return MockEcs()


@pytest.fixture
def elb():
    return MockElb()


@pytest.fixture
def make_config():
    def _make(**overrides) -> DeployConfig:
        values = {
            "region": REGION,
            "cluster": "prod",
            "service": "web",
            "image": "registry.example.com/web/app:2.0.0",
            "container_name": "app",
            "listener_arn": LISTENER_ARN,
            "shift_steps": 4,
            "shift_interval": 0,
            "blue_tg_arn": BLUE_TG,
            "green_tg_arn": GREEN_TG,
        }
        values.update(overrides)
        return DeployConfig(**values)

    return _make
