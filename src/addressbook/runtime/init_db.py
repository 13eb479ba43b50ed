"""Database initialization script."""

from pathlib import Path

from sqlalchemy import Engine

from src.addressbook.core.services import DbManageService, DbSessionService
from src.addressbook.runtime.context import get_config


def configured_seed_file() -> Path | None:
    seed_file = get_config().database.seed_file
    return Path(seed_file) if seed_file else None


def init_db(
    engine: Engine | None = None,
    seed: bool = True,
    seed_file: Path | None = None,
) -> int:
    """Create all database tables and seed an empty address table.

    Returns the number of seeded rows.
    """
    if engine is None:
        engine = DbSessionService().engine
    if seed and seed_file is None:
        seed_file = configured_seed_file()
    return DbManageService(engine).initialize(seed_file if seed else None)


if __name__ == "__main__":
    init_db()
