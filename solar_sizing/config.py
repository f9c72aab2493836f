from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

DEFAULT_ADVISOR_MODEL = "gemini-3-flash-preview"
DEFAULT_ADVISOR_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_ADVISOR_TIMEOUT_S = 30.0
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _load_dotenv(path: str = ".env") -> Dict[str, str]:
    """
    Basic .env loader to populate os.environ without overriding existing values.
    Returns a mapping of parsed key/value pairs.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    parsed: Dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)
        parsed[key] = value
    return parsed


_load_dotenv()


@dataclass(frozen=True)
class AdvisorSettings:
    """
    Connection settings for the advisory text service.

    Attributes:
        api_key: Credential for the text-generation API; None when unset.
        model: Model identifier used in the request URL.
        timeout_s: HTTP timeout in seconds.
        endpoint: Base URL of the models collection.
    """
    api_key: str | None
    model: str = DEFAULT_ADVISOR_MODEL
    timeout_s: float = DEFAULT_ADVISOR_TIMEOUT_S
    endpoint: str = DEFAULT_ADVISOR_ENDPOINT


def get_database_url() -> str:
    """
    Determine the SQLAlchemy database URL, preferring PostgreSQL if configured.

    Returns:
        Database connection string compatible with SQLAlchemy.
    """
    dsn = os.getenv("POSTGRES_DSN")
    if dsn:
        return dsn

    db_path = Path(os.getenv("SOLAR_SIZING_DB_PATH", "solar_sizing.db")).expanduser()
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{db_path}"


def get_advisor_settings() -> AdvisorSettings:
    """
    Read advisory service settings from the environment.

    The API key is looked up in ``SOLAR_SIZING_API_KEY``, then
    ``GEMINI_API_KEY``, then ``API_KEY``. Blank values count as missing.

    Returns:
        AdvisorSettings instance.
    """
    api_key = None
    for name in ("SOLAR_SIZING_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        value = os.getenv(name, "").strip()
        if value:
            api_key = value
            break

    timeout_raw = os.getenv("SOLAR_SIZING_ADVISOR_TIMEOUT")
    try:
        timeout_s = float(timeout_raw) if timeout_raw else DEFAULT_ADVISOR_TIMEOUT_S
    except ValueError:
        timeout_s = DEFAULT_ADVISOR_TIMEOUT_S

    return AdvisorSettings(
        api_key=api_key,
        model=os.getenv("SOLAR_SIZING_ADVISOR_MODEL") or DEFAULT_ADVISOR_MODEL,
        timeout_s=timeout_s,
        endpoint=os.getenv("SOLAR_SIZING_ADVISOR_ENDPOINT") or DEFAULT_ADVISOR_ENDPOINT,
    )


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure root logging for CLI and server entry points.

    Args:
        level: Explicit level; defaults to ``SOLAR_SIZING_LOG_LEVEL`` or INFO.
    """
    if level is None:
        level = os.getenv("SOLAR_SIZING_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
