import pytest

from apicdn.app import CdnApp
from apicdn.component import Component
from apicdn.config import AppConfig, AwsConfig


class RecordingComponent(Component[str]):
    created: list[str] = []

    def _create_resources(self) -> str:
        RecordingComponent.created.append(self.name)
        return f"{self.name}-resources"


@pytest.fixture(autouse=True)
def reset_created():
    RecordingComponent.created = []


def test_single_instance():
    app = CdnApp("my-cdn")

    assert CdnApp.get_instance() is app
    assert app.name == "my-cdn"
    with pytest.raises(RuntimeError, match="already been instantiated"):
        CdnApp("another")


def test_get_instance_without_app():
    with pytest.raises(RuntimeError, match="has not been instantiated"):
        CdnApp.get_instance()


def test_execute_config_passes_env():
    app = CdnApp("my-cdn")

    @app.config
    def configuration(env: str) -> AppConfig:
        return AppConfig(aws=AwsConfig(profile=f"{env}-profile"))

    assert app.execute_config("prod").aws.profile == "prod-profile"


def test_config_registered_twice():
    app = CdnApp("my-cdn")
    app.config(lambda _env: AppConfig())

    with pytest.raises(RuntimeError, match="Config function already registered"):
        app.config(lambda _env: AppConfig())


def test_run_registered_twice():
    app = CdnApp("my-cdn")
    app.run(lambda: None)

    with pytest.raises(RuntimeError, match="Run function already registered"):
        app.run(lambda: None)


def test_execute_config_without_function():
    app = CdnApp("my-cdn")

    with pytest.raises(RuntimeError, match="No @CdnApp.config function defined"):
        app.execute_config("dev")


def test_execute_config_must_return_app_config():
    app = CdnApp("my-cdn")
    app.config(lambda _env: {"aws": {}})

    with pytest.raises(ValueError, match="must return an instance of AppConfig"):
        app.execute_config("dev")


def test_program_without_run_function():
    app = CdnApp("my-cdn")

    with pytest.raises(RuntimeError, match="No @CdnApp.run function defined"):
        app.program()


def test_program_runs_user_function_then_creates_resources():
    app = CdnApp("my-cdn")
    calls = []

    @app.run
    def run() -> None:
        calls.append("run")
        RecordingComponent("first")
        RecordingComponent("second")

    program = app.program()
    assert calls == []
    assert RecordingComponent.created == []

    program()

    assert calls == ["run"]
    assert RecordingComponent.created == ["first", "second"]


def test_drive_skips_already_created_resources():
    component = RecordingComponent("only")
    _ = component.resources

    CdnApp.drive()

    assert RecordingComponent.created == ["only"]


def test_any_environment_without_list():
    assert AppConfig().is_valid_environment("anything", "alice")


def test_listed_or_personal_environment():
    config = AppConfig(environments=["staging", "production"])

    assert config.is_valid_environment("staging", "alice")
    assert config.is_valid_environment("alice", "alice")
    assert not config.is_valid_environment("dev", "alice")
