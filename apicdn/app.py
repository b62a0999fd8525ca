import logging
from collections.abc import Callable
from typing import ClassVar, TypeAlias, final

from apicdn.component import ComponentRegistry
from apicdn.config import AppConfig

logger = logging.getLogger(__name__)


ConfigFn: TypeAlias = Callable[[str], AppConfig]


@final
class CdnApp:
    __instance: ClassVar["CdnApp | None"] = None

    def __init__(self, name: str):
        if CdnApp.__instance is not None:
            raise RuntimeError("CdnApp has already been instantiated.")

        self._name = name
        self._config_func: ConfigFn | None = None
        self._run_func: Callable[[], None] | None = None
        CdnApp.__instance = self

    @property
    def name(self) -> str:
        return self._name

    @classmethod
    def get_instance(cls) -> "CdnApp":
        if cls.__instance is None:
            raise RuntimeError(
                "CdnApp has not been instantiated. Ensure 'app = CdnApp(...)' is called "
                "in your cdn_app.py."
            )
        return cls.__instance

    @classmethod
    def _reset(cls) -> None:
        """Forget the current instance. Only used for testing."""
        cls.__instance = None

    def config(self, func: ConfigFn) -> ConfigFn:
        if self._config_func:
            raise RuntimeError("Config function already registered.")
        self._config_func = func
        logger.debug("Config function '%s' registered for app '%s'.", func.__name__, self._name)
        return func

    def run(self, func: Callable[[], None]) -> Callable[[], None]:
        if self._run_func:
            raise RuntimeError("Run function already registered.")
        self._run_func = func
        logger.debug("Run function '%s' registered for app '%s'.", func.__name__, self._name)
        return func

    def execute_config(self, env: str) -> AppConfig:
        if not self._config_func:
            raise RuntimeError("No @CdnApp.config function defined.")
        app_config = self._config_func(env)
        if app_config is None or not isinstance(app_config, AppConfig):
            raise ValueError("@app.config function must return an instance of AppConfig.")
        return app_config

    def program(self) -> Callable[[], None]:
        """Return the Pulumi program: the user's run function followed by drive()."""
        if not self._run_func:
            raise RuntimeError("No @CdnApp.run function defined.")

        def run() -> None:
            self._run_func()
            self.drive()

        return run

    @staticmethod
    def drive() -> None:
        for component in ComponentRegistry.all_instances():
            logger.debug("Creating resources for component '%s'", component.name)
            _ = component.resources
