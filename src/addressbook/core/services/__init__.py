"""Core services exports."""

from .database.db_manage import DbManageService, read_seed_file
from .database.db_session import DbSessionService, build_engine

__all__ = [
    "DbManageService",
    "DbSessionService",
    "build_engine",
    "read_seed_file",
]
