from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class AwsConfig:
    """AWS configuration for an apicdn app.

    Both profile and region are optional overrides. When not specified, Pulumi follows
    the standard AWS credential and region resolution chain (environment variables,
    SSO, shared credentials/config files, instance roles).

    The web ACL is always created in us-east-1 regardless of ``region``: CloudFront
    scoped WAF resources only exist there.

    ## Examples

    Use environment variables (CI/CD):
    ```python
    AwsConfig()
    ```

    Use different profiles per environment:
    ```python
    @app.config
    def config(env: str) -> AppConfig:
        if env == "prod":
            return AppConfig(aws=AwsConfig(profile="prod-profile"))
        return AppConfig(aws=AwsConfig())
    ```
    """

    profile: str | None = None
    region: str | None = None


@dataclass(frozen=True, kw_only=True)
class AppConfig:
    """apicdn app configuration.

    Attributes:
        aws: AWS credentials and region configuration.
        environments: Shared environment names (e.g., ["staging", "production"]).
            The personal environment named after the current user is always valid.
            An empty list accepts any environment name.
    """

    aws: AwsConfig = field(default_factory=AwsConfig)
    environments: list[str] = field(default_factory=list)

    def is_valid_environment(self, env: str, username: str) -> bool:
        return env == username or not self.environments or env in self.environments
