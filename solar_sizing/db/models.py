"""
SQLAlchemy database models for solar sizing persistence.

Defines the schema for the inverter catalog, saved household sessions
(appliance list, configuration, region) and calculation records. All models
inherit automatic timestamp tracking via TimestampMixin.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class TimestampMixin:
    """
    Mixin adding automatic created_at and updated_at timestamps.

    Notes:
        - Timestamps managed by database (server_default, onupdate)
        - created_at immutable after insert
        - updated_at changes on every UPDATE
    """
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class InverterModel(Base, TimestampMixin):
    """
    Database model for inverter catalog entries.

    When the table holds at least one row, the application sizes systems
    against it instead of the built-in catalog.

    Attributes:
        id: Primary key (auto-increment).
        label: Unique commercial model name (upsert key).
        brand: Manufacturer.
        capacity_kw: Rated AC capacity in kW.
        phase_type: "single-phase" or "three-phase".

    Example:
        ```python
        inverter = InverterModel(
            label="Solis 6kW 1P",
            brand="Solis",
            capacity_kw=6.0,
            phase_type="single-phase",
        )
        ```
    """
    __tablename__ = "inverters"

    id = Column(Integer, primary_key=True)
    label = Column(String(255), unique=True, nullable=False)
    brand = Column(String(255), nullable=True)
    capacity_kw = Column(Float, nullable=False)
    phase_type = Column(String(20), nullable=False, default="single-phase")


class SavedSessionModel(Base, TimestampMixin):
    """
    Database model for a named household session.

    Stores everything the user entered so the calculation can be reproduced:
    consumption mode, appliance list, monthly bill, sizing configuration and
    selected region.

    Attributes:
        id: Primary key (auto-increment).
        name: Unique session name (upsert key).
        data: Session payload (JSON), see ``SizingSession.to_dict``.
        calculations: Calculation records produced from this session.

    Example:
        ```python
        record = SavedSessionModel(
            name="Nguyen family",
            data={
                "mode": "device",
                "appliances": [{"appliance_id": "fan", "quantity": 2, ...}],
                "config": {"panel_wattage": 450, "system_efficiency": 0.8},
                "region_index": 2,
            },
        )
        ```
    """
    __tablename__ = "saved_sessions"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    data = Column(JSON, nullable=False)

    calculations = relationship("CalculationRecord", back_populates="session")


class CalculationRecord(Base, TimestampMixin):
    """
    Database model for a completed calculation.

    Attributes:
        id: Primary key (auto-increment).
        session_id: Optional link to the saved session that was calculated.
        label: Short description (session name or "adhoc").
        summary: Calculation summary (JSON): inputs and result.
        advice: Advisory text returned with the consultation, if any.
        output_dir: Report directory when files were written.
    """
    __tablename__ = "calculations"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("saved_sessions.id"), nullable=True)
    label = Column(String(255), nullable=False)
    summary = Column(JSON, nullable=False)
    advice = Column(Text, nullable=True)
    output_dir = Column(String(1024), nullable=True)

    session = relationship("SavedSessionModel", back_populates="calculations")
