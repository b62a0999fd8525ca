import getpass
import logging
from functools import cache
from pathlib import Path

logger = logging.getLogger(__name__)

APP_FILE_NAME = "cdn_app.py"


@cache
def get_project_root() -> Path:
    """Find and cache the project root by looking for cdn_app.py.
    Raises ValueError if not found.
    """
    start_path = Path.cwd().resolve()

    current = start_path
    while current != current.parent:
        if (current / APP_FILE_NAME).exists():
            return current
        current = current.parent

    raise ValueError(f"Could not find project root: no {APP_FILE_NAME} found in parent directories")


def get_user_env() -> str:
    """Name of the personal environment of the current user."""
    return getpass.getuser()


def get_dot_apicdn_dir() -> Path:
    return get_project_root() / ".apicdn"


def get_state_dir() -> Path:
    state_dir = get_dot_apicdn_dir() / "state"
    state_dir.mkdir(parents=True, exist_ok=True)
    logger.debug("Using state directory %s", state_dir)
    return state_dir
