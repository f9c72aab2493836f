from __future__ import annotations

from functools import lru_cache

from ..advisory import AdvisoryTextGenerator, GeminiAdvisor
from ..application import SizingApplication
from ..db.session import init_db
from ..persistence import PersistenceService
from ..result_builder import ResultBuilder


@lru_cache()
def get_persistence_service() -> PersistenceService:
    """
    Provide a cached PersistenceService instance for API routes.
    """
    init_db()
    return PersistenceService()


def get_result_builder() -> ResultBuilder:
    """
    Provide a ResultBuilder for optional report exports.
    """
    return ResultBuilder()


@lru_cache()
def get_advisor() -> AdvisoryTextGenerator:
    """
    Provide the advisory text generator (settings read once from the environment).
    """
    return GeminiAdvisor()


def get_application_service() -> SizingApplication:
    """
    Provide a SizingApplication configured for API usage.
    """
    # API does not write report files by default
    return SizingApplication(
        save_outputs=False,
        persistence=get_persistence_service(),
        advisor=get_advisor(),
        result_builder=None,
    )
