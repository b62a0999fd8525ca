class ApiCdnProjectError(Exception):
    """Raised when no apicdn project is found in the current or parent directories."""


class DuplicateBehaviorError(ValueError):
    """Raised when a path pattern is registered twice on the same distribution."""

    def __init__(self, distribution: str, path_pattern: str):
        self.distribution = distribution
        self.path_pattern = path_pattern
        super().__init__(
            f"Behavior for path pattern '{path_pattern}' already exists "
            f"on distribution '{distribution}'."
        )


class DistributionSealedError(RuntimeError):
    """Raised when a distribution is changed after its resources were created."""

    def __init__(self, distribution: str):
        self.distribution = distribution
        super().__init__(
            f"Distribution '{distribution}' has already been created; "
            "add behaviors before the app is driven."
        )


class InvalidEnvironmentError(ValueError):
    """Raised when the requested environment is neither personal nor listed in AppConfig."""

    def __init__(self, env: str, username: str, environments: list[str]):
        self.env = env
        super().__init__(
            f"Invalid environment '{env}'. Use your username '{username}' for personal "
            f"environments or one of: {environments}"
        )
