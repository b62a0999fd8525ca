from dataclasses import dataclass
from typing import ClassVar

from apicdn.config import AwsConfig


@dataclass(frozen=True)
class AppContext:
    """Context information available while an apicdn program runs."""

    name: str
    env: str
    aws: AwsConfig

    def prefix(self, name: str | None = None) -> str:
        """Get resource name prefix or prefixed name.

        Args:
            name: Optional name to prefix. If None, returns just the prefix with trailing dash.

        Returns:
            If name is None: "{app}-{env}-"
            If name provided: "{app}-{env}-{name}"
        """
        base = f"{self.name.lower()}-{self.env.lower()}-"
        return base if name is None else f"{base}{name}"


class _ContextStore:
    """Internal storage for the global app context."""

    _instance: ClassVar[AppContext | None] = None

    @classmethod
    def set(cls, context: AppContext) -> None:
        """Set the global context. Can only be called once."""
        if cls._instance is not None:
            raise RuntimeError("Context has already been initialized")
        cls._instance = context

    @classmethod
    def get(cls) -> AppContext:
        if cls._instance is None:
            raise RuntimeError(
                "apicdn context not initialized. This usually means you're trying to access "
                "context() outside of an apicdn deployment operation."
            )
        return cls._instance

    @classmethod
    def clear(cls) -> None:
        """Clear the context. Only used for testing."""
        cls._instance = None


def context() -> AppContext:
    """Get the current app context.

    Returns:
        AppContext with app name, environment, and AWS configuration.

    Raises:
        RuntimeError: If called before context is initialized.
    """
    return _ContextStore.get()
