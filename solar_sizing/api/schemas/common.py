"""
Common utilities shared by the schema modules.

Schemas accept plain dicts, mappings and SQLAlchemy rows (ORM mode); the
helpers here normalize those inputs before validation.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping


def _coerce_to_dict(data: Any) -> Dict[str, Any]:
    """
    Coerce various input types to dictionary for Pydantic validation.

    Args:
        data: Dict, Mapping, SQLAlchemy model or None.

    Returns:
        Dictionary representation of the input, or the original object
        if it's a SQLAlchemy model (handled by ``from_attributes``).

    Example:
        >>> _coerce_to_dict(None)
        {}
        >>> _coerce_to_dict({"label": "Solis 5kW"})
        {'label': 'Solis 5kW'}
    """
    if data is None:
        return {}
    if isinstance(data, dict):
        return data
    if isinstance(data, Mapping):
        return dict(data)
    if hasattr(data, "__tablename__") or hasattr(data, "_sa_instance_state"):
        return data  # type: ignore
    return dict(data)
