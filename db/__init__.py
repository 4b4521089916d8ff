"""Database package for trimp-local."""
from .models import (
    AthleteRecord,
    FitFileRecord,
    SampleRecord,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)

__all__ = [
    "AthleteRecord",
    "FitFileRecord",
    "SampleRecord",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
]
