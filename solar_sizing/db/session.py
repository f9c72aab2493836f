from __future__ import annotations

from typing import Any

try:
    from sqlalchemy import create_engine
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import declarative_base, sessionmaker
except ImportError as exc:  # pragma: no cover - dependency guard
    raise RuntimeError(
        "SQLAlchemy must be installed to store inverters, sessions and calculations "
        "(pip install sqlalchemy)."
    ) from exc

from ..config import get_database_url

Base = declarative_base()


def build_engine(url: str, **engine_kwargs: Any) -> Engine:
    """
    Create an engine for ``url``.

    SQLite connections are shared between the API worker threads, so the
    same-thread check is disabled for them.
    """
    connect_args = dict(engine_kwargs.pop("connect_args", {}))
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    return create_engine(url, echo=False, future=True, connect_args=connect_args, **engine_kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    """Session factory whose objects stay readable after commit."""
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


DATABASE_URL = get_database_url()
engine = build_engine(DATABASE_URL)
SessionLocal = build_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    """
    Create the inverter, session and calculation tables when missing.

    Args:
        bind: Engine to create them on (defaults to the configured database).
    """
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
