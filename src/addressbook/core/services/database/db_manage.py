"""Schema creation and seed data loading."""

import csv
from collections.abc import Iterator
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel

from src.addressbook.entities.service.address import (
    AddressCreate,
    AddressRepository,
    AddressTable,
)


def read_seed_file(csv_path: Path) -> Iterator[AddressCreate]:
    """Yield entries from a headerless ``first_name,last_name,phone`` CSV file.

    An empty or missing phone column becomes ``None``.
    """
    with open(csv_path, newline="", encoding="utf-8") as f:
        for line_number, record in enumerate(csv.reader(f), start=1):
            if not record:
                continue
            if len(record) < 2:
                raise ValueError(
                    f"{csv_path}:{line_number}: expected first_name,last_name[,phone]"
                )
            phone = record[2] if len(record) > 2 and record[2] else None
            yield AddressCreate(first_name=record[0], last_name=record[1], phone=phone)


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        SQLModel.metadata.create_all(self._engine, tables=[AddressTable.__table__])
        logger.info("Database initialized with tables.")

    def count(self) -> int:
        with Session(self._engine) as session:
            return AddressRepository(session).count()

    def populate(self, csv_path: Path) -> int:
        """Insert every entry of ``csv_path``; a missing file inserts nothing."""
        if not csv_path.is_file():
            logger.warning(
                "{} not found; will not populate with default data", csv_path
            )
            return 0

        with Session(self._engine) as session:
            inserted = AddressRepository(session).add_all(read_seed_file(csv_path))
            session.commit()

        logger.info("Seeded {} addresses from {}", inserted, csv_path)
        return inserted

    def initialize(self, seed_file: Path | None = None) -> int:
        """Create tables, then seed them from ``seed_file`` if they are empty."""
        self.create_all()
        if seed_file is None:
            return 0
        if self.count() > 0:
            logger.debug("Address table already populated; skipping seed")
            return 0
        return self.populate(seed_file)
