from bluegreen_deploy.models import RunSpecification

from mock_aws import task_definition_payload


def test_with_image_returns_new_specification():
    spec = RunSpecification.from_api(task_definition_payload())

    updated, matched = spec.with_image("envoy", "registry.example.com/mesh/envoy:1.30")

    assert matched is True
    assert updated is not spec
    assert updated.task_definition_arn is None
    assert updated.images()["envoy"] == "registry.example.com/mesh/envoy:1.30"
    assert spec.images()["envoy"] == "registry.example.com/mesh/envoy:1.29"


def test_with_image_keeps_extra_container_keys():
    spec = RunSpecification.from_api(task_definition_payload())

    updated, _ = spec.with_image("app", "registry.example.com/web/app:2.0.0")
    app = updated.to_register_kwargs()["containerDefinitions"][0]

    assert app["portMappings"] == [{"containerPort": 8080, "protocol": "tcp"}]
    assert app["environment"] == [{"name": "LOG_LEVEL", "value": "info"}]
    assert app["essential"] is True


def test_register_kwargs_pass_roles_only_when_present():
    payload = task_definition_payload(taskRoleArn="arn:aws:iam::123456789012:role/web-task")
    with_roles = RunSpecification.from_api(payload).to_register_kwargs()

    payload.pop("executionRoleArn")
    payload.pop("taskRoleArn")
    without_roles = RunSpecification.from_api(payload).to_register_kwargs()

    assert with_roles["taskRoleArn"] == "arn:aws:iam::123456789012:role/web-task"
    assert "executionRoleArn" in with_roles
    assert "executionRoleArn" not in without_roles
    assert "taskRoleArn" not in without_roles


def test_register_kwargs_for_ec2_task_definition_without_sizing():
    payload = task_definition_payload(networkMode="bridge", requiresCompatibilities=["EC2"])
    payload.pop("cpu")
    payload.pop("memory")

    kwargs = RunSpecification.from_api(payload).to_register_kwargs()

    assert "cpu" not in kwargs
    assert "memory" not in kwargs
    assert kwargs["networkMode"] == "bridge"
    assert kwargs["requiresCompatibilities"] == ["EC2"]
