"""
Database persistence layer for sizing sessions, inverter catalog and results.

Provides CRUD operations for the inverter catalog, named household sessions
(what the user selected) and calculation records (what the engine returned).
Handles serialization of dataclasses and Pydantic models to JSON for storage.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, Mapping

from sqlalchemy import asc, desc, select
from sqlalchemy.orm import Session

from .db.models import CalculationRecord, InverterModel, SavedSessionModel
from .db.session import SessionLocal
from .sizing.inverter import InverterOption, PhaseType

logger = logging.getLogger(__name__)


def _asdict_safe(obj: Any) -> Dict[str, Any]:
    """
    Convert Python objects to plain dictionaries for JSON storage.

    Handles dataclasses (through their ``to_dict`` when available so enums are
    stored as plain values), Pydantic models, mappings and None.

    Args:
        obj: Object to convert.

    Returns:
        Dictionary representation of the object, empty if obj is None.

    Raises:
        TypeError: If obj type is not supported.
    """
    if obj is None:
        return {}
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    raise TypeError(f"Unsupported object type for serialization: {type(obj)!r}")


class PersistenceService:
    """
    Database persistence service for the sizing calculator.

    Provides high-level operations for:
    - Inverter catalog entries (upsert by label)
    - Saved household sessions (upsert by name)
    - Calculation records

    All database operations use transactional sessions with automatic
    commit/rollback handling.

    Attributes:
        _session_factory: SQLAlchemy session factory for creating database connections.

    Example:
        ```python
        service = PersistenceService()

        service.upsert_inverter({
            "label": "Solis 6kW 1P",
            "brand": "Solis",
            "capacity_kw": 6.0,
            "phase_type": "single-phase",
        })

        session = service.save_session("Nguyen family", {"mode": "bill", "monthly_bill_amount": 1_000_000})
        service.record_calculation("Nguyen family", {"result": {...}}, session=session)
        ```

    Notes:
        - Each operation uses an independent session
        - Transactional: auto-commit on success, auto-rollback on error
    """

    def __init__(self, session_factory: type[Session] | None = None) -> None:
        """
        Args:
            session_factory: SQLAlchemy session factory. If None, uses the
                default SessionLocal from db.session (tests pass an in-memory one).
        """
        self._session_factory = session_factory or SessionLocal

    @contextmanager
    def session(self) -> Iterable[Session]:
        """
        Context manager providing a transactional database session.

        Commits on success, rolls back and re-raises on exception, and always
        closes the session.

        Yields:
            Session: Active SQLAlchemy session.
        """
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Inverter catalog ---

    def upsert_inverter(self, inverter_data: Any) -> InverterModel | None:
        """
        Insert or update an inverter record based on its label.

        Args:
            inverter_data: InverterOption, Pydantic model or mapping with
                ``label``, ``capacity_kw`` and optional ``brand``/``phase_type``.

        Returns:
            Persisted InverterModel or None if data is missing.
        """
        if inverter_data is None:
            return None
        payload = _asdict_safe(inverter_data)
        phase_type = PhaseType.parse(payload.get("phase_type") or PhaseType.SINGLE_PHASE).value
        with self.session() as session:
            stmt = select(InverterModel).where(InverterModel.label == payload.get("label"))
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = InverterModel(
                    label=payload.get("label"),
                    brand=payload.get("brand"),
                    capacity_kw=float(payload["capacity_kw"]),
                    phase_type=phase_type,
                )
                session.add(record)
            else:
                record.brand = payload.get("brand")
                record.capacity_kw = float(payload["capacity_kw"])
                record.phase_type = phase_type
            session.flush()
            session.refresh(record)
            logger.debug("Stored inverter %s (%.1f kW)", record.label, record.capacity_kw)
            return record

    def list_inverters(self) -> list[InverterModel]:
        """List catalog inverters by ascending capacity (ties by insertion order)."""
        with self.session() as session:
            stmt = select(InverterModel).order_by(asc(InverterModel.capacity_kw), asc(InverterModel.id))
            return list(session.execute(stmt).scalars().all())

    def load_inverter_catalog(self) -> list[InverterOption]:
        """
        Build engine-ready inverter options from the stored catalog.

        Returns:
            InverterOption list ordered by ascending capacity (empty when the
            table holds no rows).
        """
        return [
            InverterOption(
                capacity_kw=record.capacity_kw,
                label=record.label,
                brand=record.brand or "",
                phase_type=PhaseType.parse(record.phase_type),
            )
            for record in self.list_inverters()
        ]

    # --- Saved sessions ---

    def save_session(self, name: str, data: Any) -> SavedSessionModel:
        """
        Insert or update a named session.

        Args:
            name: Unique session name.
            data: SizingSession, mapping or Pydantic model with the session payload.

        Returns:
            Stored SavedSessionModel.
        """
        payload = _asdict_safe(data)
        with self.session() as session:
            stmt = select(SavedSessionModel).where(SavedSessionModel.name == name)
            record = session.execute(stmt).scalar_one_or_none()
            if record is None:
                record = SavedSessionModel(name=name, data=payload)
                session.add(record)
            else:
                record.data = payload
            session.flush()
            session.refresh(record)
            logger.debug("Saved session '%s' (id=%s)", name, record.id)
            return record

    def list_sessions(self) -> list[SavedSessionModel]:
        with self.session() as session:
            stmt = select(SavedSessionModel).order_by(SavedSessionModel.name)
            return list(session.execute(stmt).scalars().all())

    def get_session_by_id(self, session_id: int) -> SavedSessionModel | None:
        """
        Retrieve a saved session by ID.

        Args:
            session_id: The ID of the session to retrieve.

        Returns:
            The session record or None if not found.
        """
        with self.session() as session:
            stmt = select(SavedSessionModel).where(SavedSessionModel.id == session_id)
            return session.execute(stmt).scalar_one_or_none()

    def get_session_by_name(self, name: str) -> SavedSessionModel | None:
        with self.session() as session:
            stmt = select(SavedSessionModel).where(SavedSessionModel.name == name)
            return session.execute(stmt).scalar_one_or_none()

    def delete_session(self, session_id: int) -> bool:
        """
        Delete a saved session; its calculation records are kept but unlinked.

        Returns:
            True when a session was deleted.
        """
        with self.session() as session:
            record = session.get(SavedSessionModel, session_id)
            if record is None:
                return False
            for calculation in record.calculations:
                calculation.session_id = None
            session.delete(record)
            return True

    # --- Calculation records ---

    def record_calculation(
        self,
        label: str,
        summary: Mapping[str, Any],
        *,
        session: SavedSessionModel | None = None,
        advice: str | None = None,
        output_dir: str | None = None,
    ) -> CalculationRecord:
        """
        Store the outcome of a calculation or consultation.

        Args:
            label: Session name or "adhoc".
            summary: JSON-serializable inputs and result.
            session: Optional saved session the calculation came from.
            advice: Advisory text, if one was requested.
            output_dir: Filesystem path containing exported report files.
        """
        with self.session() as db:
            record = CalculationRecord(
                label=label,
                summary=dict(summary),
                session_id=session.id if session else None,
                advice=advice,
                output_dir=output_dir,
            )
            db.add(record)
            db.flush()
            db.refresh(record)
            return record

    def list_calculations(self, limit: int = 50) -> list[CalculationRecord]:
        """
        Fetch the latest calculation records, newest first.

        Args:
            limit: Maximum number of records to return.
        """
        with self.session() as session:
            stmt = (
                select(CalculationRecord)
                .order_by(desc(CalculationRecord.created_at), desc(CalculationRecord.id))
                .limit(limit)
            )
            return list(session.execute(stmt).scalars().all())
