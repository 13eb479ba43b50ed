"""Unit tests for schema creation and seeding."""

import pytest
from sqlalchemy import inspect
from sqlmodel import Session

from src.addressbook.core.services import (
    DbManageService,
    DbSessionService,
    build_engine,
    read_seed_file,
)
from src.addressbook.entities import AddressCreate, AddressRepository
from src.addressbook.runtime.config.config_data import DatabaseConfig
from src.addressbook.runtime.init_db import init_db
from tests.fixtures.core import SEED_ROWS, write_seed_csv


def _entries(rows):
    return [
        AddressCreate(first_name=first, last_name=last, phone=phone)
        for first, last, phone in rows
    ]


class TestReadSeedFile:
    def test_rows(self, seed_csv):
        entries = list(read_seed_file(seed_csv))

        assert len(entries) == len(SEED_ROWS)
        assert entries[0].first_name == "Jane"
        assert entries[0].last_name == "Doe"
        assert entries[0].phone == "070000000"
        assert entries[1].phone is None

    def test_missing_phone_column(self, tmp_path):
        path = tmp_path / "names.csv"
        path.write_text("Jane,Doe\n\nAngela,Thompson,0701\n")

        entries = list(read_seed_file(path))

        assert [(e.first_name, e.phone) for e in entries] == [
            ("Jane", None),
            ("Angela", "0701"),
        ]

    def test_short_row(self, tmp_path):
        path = tmp_path / "names.csv"
        path.write_text("Jane,Doe,1\nlonely\n")

        with pytest.raises(ValueError, match=":2:"):
            list(read_seed_file(path))


class TestDbManageService:
    def test_create_all(self, tmp_path):
        engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'a.db'}"))
        try:
            DbManageService(engine).create_all()

            assert "addresses" in inspect(engine).get_table_names()
        finally:
            engine.dispose()

    def test_populate(self, engine, seed_csv):
        service = DbManageService(engine)

        assert service.populate(seed_csv) == len(SEED_ROWS)
        assert service.count() == len(SEED_ROWS)

    def test_populate_missing_file(self, engine, tmp_path):
        service = DbManageService(engine)

        assert service.populate(tmp_path / "absent.csv") == 0
        assert service.count() == 0

    def test_initialize_seeds_only_empty_table(self, engine, seed_csv):
        service = DbManageService(engine)

        assert service.initialize(seed_csv) == len(SEED_ROWS)
        assert service.initialize(seed_csv) == 0
        assert service.count() == len(SEED_ROWS)

    def test_initialize_without_seed(self, engine):
        assert DbManageService(engine).initialize(None) == 0

    def test_init_db(self, engine, tmp_path):
        seed_file = write_seed_csv(tmp_path / "few.csv", SEED_ROWS[:3])

        assert init_db(engine, seed_file=seed_file) == 3
        assert init_db(engine, seed=False) == 0

        with Session(engine) as session:
            assert AddressRepository(session).count() == 3


class TestDbSessionService:
    def test_memory_database_shared_across_sessions(self):
        service = DbSessionService(DatabaseConfig(url="sqlite://"))
        try:
            DbManageService(service.engine).create_all()

            with service.session_scope() as session:
                AddressRepository(session).add_all(_entries(SEED_ROWS[:2]))

            with service.session_scope() as session:
                assert AddressRepository(session).count() == 2
        finally:
            service.dispose()

    def test_session_scope_rolls_back_on_error(self, engine):
        service = DbSessionService(engine=engine)

        with pytest.raises(RuntimeError):
            with service.session_scope() as session:
                AddressRepository(session).add_all(_entries(SEED_ROWS[:2]))
                raise RuntimeError("abort")

        with service.session_scope() as session:
            assert AddressRepository(session).count() == 0

    def test_health_check(self, engine):
        assert DbSessionService(engine=engine).health_check() is True
