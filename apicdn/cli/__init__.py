import logging
import os
import sys
from importlib import metadata
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import click
from appdirs import user_log_dir
from rich.logging import RichHandler

from apicdn.aws.cloudfront import ApiCdn
from apicdn.cli.commands import console, render_plan, run_deploy, run_destroy, run_diff
from apicdn.exceptions import ApiCdnProjectError, InvalidEnvironmentError
from apicdn.project import get_user_env

app_name = "apicdn"
app_logger = logging.getLogger(app_name)
app_logger.setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)

# Suppress gRPC and absl logging
os.environ["GRPC_VERBOSITY"] = "ERROR"
os.environ["GRPC_TRACE"] = ""
logging.getLogger("grpc").setLevel(logging.ERROR)
logging.getLogger("absl").setLevel(logging.ERROR)


def _configure_file_logging() -> Path:
    log_dir = Path(user_log_dir(app_name))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = log_dir / f"{app_name}.log"
    if not any(isinstance(h, TimedRotatingFileHandler) for h in app_logger.handlers):
        file_handler = TimedRotatingFileHandler(
            filename=str(log_file_path), when="D", interval=1, backupCount=7, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        app_logger.addHandler(file_handler)
    return log_file_path


def _configure_console_logging(verbose: int, log_file_path: Path) -> None:
    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_level=True,
        markup=True,
        tracebacks_suppress=[click],
        rich_tracebacks=True,
    )
    if verbose == 0:
        console_handler.setLevel(logging.WARNING)
    elif verbose == 1:
        console_handler.setLevel(logging.INFO)
        console.print("[italic blue]Console verbosity: INFO[/]")
    else:
        console_handler.setLevel(logging.DEBUG)
        console.print("[italic green]Console verbosity: DEBUG[/]")
    if verbose:
        console.print(f"[italic dim]Logs saved to: {log_file_path}[/]")
    app_logger.addHandler(console_handler)


def _version() -> None:
    console.print(f"apicdn version: {metadata.version('apicdn')}", highlight=False)
    console.print(f"Pulumi version: {metadata.version('pulumi')}", highlight=False)
    sys.exit(0)


def determine_env(environment: str | None) -> str:
    if environment:
        return environment
    return os.environ.get("APICDN_ENV") or get_user_env()


@click.group(invoke_without_command=True)
@click.option(
    "--verbose", "-v", count=True, help="Increase verbosity. -v for INFO, -vv for DEBUG logs."
)
@click.option("--version", is_flag=True, help="Show apicdn and Pulumi versions.")
@click.pass_context
def cli(ctx: click.Context, verbose: int, version: bool) -> None:
    if version:
        _version()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit(0)

    log_file_path = _configure_file_logging()
    _configure_console_logging(verbose, log_file_path)


def _parse_extra_paths(values: tuple[str, ...]) -> list[tuple[str, str]]:
    extra = []
    for value in values:
        pattern, sep, origin = value.partition("=")
        if not sep or not pattern or not origin:
            raise click.BadParameter(
                f"expected PATTERN=ORIGIN, got '{value}'", param_hint="--path"
            )
        extra.append((pattern, origin))
    return extra


@cli.command()
@click.argument("origin")
@click.option(
    "--rate-limit",
    "-r",
    type=int,
    required=True,
    help="Requests per client IP per 5 minutes before blocking.",
)
@click.option(
    "--path",
    "paths",
    multiple=True,
    metavar="PATTERN=ORIGIN",
    help="Extra behavior routed to another host. Can be repeated.",
)
def plan(origin: str, rate_limit: int, paths: tuple[str, ...]) -> None:
    """Shows the rules and behaviors a distribution for ORIGIN would get.

    Nothing is deployed and no AWS credentials are needed.
    """
    extra_paths = _parse_extra_paths(paths)
    try:
        cdn = ApiCdn("plan", origin, rate_limit)
        for pattern, path_origin in extra_paths:
            cdn.add_behavior(pattern, path_origin)
    except (TypeError, ValueError) as e:
        raise click.UsageError(str(e)) from e
    logger.debug("Rendering plan for %s", origin)
    render_plan(cdn)


@cli.command()
@click.argument("env", default=None, required=False)
def diff(env: str | None) -> None:
    """Shows the changes that will be made when you deploy."""
    env = determine_env(env)
    try:
        run_diff(env)
    except (ApiCdnProjectError, InvalidEnvironmentError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("env", default=None, required=False)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
def deploy(env: str | None, yes: bool) -> None:
    """Deploys the distribution and its web ACL."""
    if not yes and env is not None:
        console.print(f"About to deploy to [bold red]{env}[/bold red] environment.")
        if not click.confirm(f"Deploy to {env}?"):
            console.print("Deployment cancelled.")
            return
    env = determine_env(env)
    try:
        run_deploy(env)
    except (ApiCdnProjectError, InvalidEnvironmentError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("env", default=None, required=False)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompts")
def destroy(env: str | None, yes: bool) -> None:
    """Destroys all resources of the environment."""
    env = determine_env(env)
    if not yes and not click.confirm(f"Destroy all resources in {env}?"):
        console.print("Destroy cancelled.")
        return
    try:
        run_destroy(env)
    except (ApiCdnProjectError, InvalidEnvironmentError) as e:
        raise click.ClickException(str(e)) from e


@cli.command()
def version() -> None:
    """Shows version and exit."""
    _version()
