"""Loading an apicdn project and running it as a Pulumi stack.

A project is a directory holding ``cdn_app.py``. The app module is imported, its
``@app.config`` function is evaluated for the requested environment and the
result becomes the global :class:`AppContext`. The stack itself uses the Pulumi
Automation API with a local file backend under ``.apicdn/state``.
"""

import logging
import os
import sys
from importlib import import_module

from pulumi.automation import (
    LocalWorkspaceOptions,
    ProjectBackend,
    ProjectSettings,
    Stack,
    create_or_select_stack,
    fully_qualified_stack_name,
)

from apicdn.app import CdnApp
from apicdn.context import AppContext, _ContextStore
from apicdn.exceptions import ApiCdnProjectError, InvalidEnvironmentError
from apicdn.project import APP_FILE_NAME, get_project_root, get_state_dir, get_user_env

logger = logging.getLogger(__name__)

PASSPHRASE_ENV = "PULUMI_CONFIG_PASSPHRASE"  # noqa: S105


def load_app(env: str) -> tuple[CdnApp, AppContext]:
    original_sys_path = list(sys.path)
    try:
        project_root = get_project_root()
    except ValueError as e:
        logger.exception("Failed to find apicdn project")
        raise ApiCdnProjectError(
            f"No apicdn project found. Create {APP_FILE_NAME} in your project directory."
        ) from e

    logger.debug("PROJECT ROOT: %s", project_root)
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))
    try:
        import_module(APP_FILE_NAME.removesuffix(".py"))
    finally:
        sys.path = original_sys_path

    app = CdnApp.get_instance()
    logger.debug("Getting project configuration for environment: %s", env)
    config = app.execute_config(env)
    username = get_user_env()
    if not config.is_valid_environment(env, username):
        raise InvalidEnvironmentError(env, username, config.environments)

    ctx = AppContext(name=app.name, env=env, aws=config.aws)
    _ContextStore.set(ctx)
    return app, ctx


def create_stack(app: CdnApp, ctx: AppContext) -> Stack:
    stack_name = fully_qualified_stack_name("organization", ctx.name, ctx.env)
    logger.debug("Fully qualified stack name: %s", stack_name)
    backend = ProjectBackend(f"file://{get_state_dir()}")
    project_settings = ProjectSettings(name=ctx.name, runtime="python", backend=backend)

    env_vars = {PASSPHRASE_ENV: os.environ.get(PASSPHRASE_ENV, "")}
    if region := ctx.aws.region:
        env_vars["AWS_REGION"] = region
    if profile := ctx.aws.profile:
        env_vars["AWS_PROFILE"] = profile

    opts = LocalWorkspaceOptions(env_vars=env_vars, project_settings=project_settings)
    logger.debug("Creating stack")
    stack = create_or_select_stack(
        stack_name=stack_name,
        project_name=ctx.name,
        program=app.program(),
        opts=opts,
    )
    logger.debug("Successfully initialized stack")
    return stack


def open_stack(env: str) -> Stack:
    app, ctx = load_app(env)
    return create_stack(app, ctx)
