"""
Runtime configuration for the course player.

Settings come from a `.env` file (if present) and the process environment:
- COURSEPLAYER_API_URL: REST API base URL
- COURSEPLAYER_SESSION_PATH: where the auth token and user are stored
- COURSEPLAYER_TIMEOUT: HTTP timeout in seconds
- COURSEPLAYER_LOG_LEVEL: logging level name
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_SESSION_DIR = Path.home() / ".courseplayer"
DEFAULT_SESSION_PATH = DEFAULT_SESSION_DIR / "session.json"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    session_path: Path = DEFAULT_SESSION_PATH
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"


def _parse_timeout(value: Optional[str]) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid COURSEPLAYER_TIMEOUT {value!r}; using {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning(f"Ignoring non-positive COURSEPLAYER_TIMEOUT {value!r}; using {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    return timeout


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional .env path (default: search from the working directory)

    Returns:
        Settings with defaults for anything unset
    """
    load_dotenv(env_file)

    timeout = os.environ.get("COURSEPLAYER_TIMEOUT")
    session_path = os.environ.get("COURSEPLAYER_SESSION_PATH")

    return Settings(
        api_url=os.environ.get("COURSEPLAYER_API_URL", DEFAULT_API_URL).rstrip("/"),
        session_path=Path(session_path).expanduser() if session_path else DEFAULT_SESSION_PATH,
        timeout=_parse_timeout(timeout),
        log_level=os.environ.get("COURSEPLAYER_LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO"):
    """Configure root logging with the project format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
