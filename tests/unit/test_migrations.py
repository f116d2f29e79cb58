"""Test the alembic migrations against SQLite."""

import sqlite3
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_config(tmp_path, monkeypatch):
    """Alembic config pointing at a throwaway database, without ini logging."""
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config, db_path


def table_names(db_path):
    with sqlite3.connect(db_path) as connection:
        rows = connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        return {name for (name,) in rows}


def test_upgrade_creates_tables(alembic_config):
    config, db_path = alembic_config

    command.upgrade(config, "head")

    assert {"contacts", "passports"} <= table_names(db_path)
    with sqlite3.connect(db_path) as connection:
        (foreign_key,) = connection.execute(
            "PRAGMA foreign_key_list(passports)"
        ).fetchall()
    # (id, seq, table, from, to, on_update, on_delete, match)
    assert foreign_key[2:5] == ("contacts", "contact_id", "id")
    assert foreign_key[6] == "CASCADE"


def test_downgrade_drops_tables(alembic_config):
    config, db_path = alembic_config
    command.upgrade(config, "head")

    command.downgrade(config, "base")

    assert not {"contacts", "passports"} & table_names(db_path)


def test_uses_ini_url_without_database_url(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    ini_path = tmp_path / "from_ini.db"
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{ini_path}")

    command.upgrade(config, "head")

    assert "passports" in table_names(ini_path)


def test_database_url_overrides_ini_url(alembic_config, tmp_path):
    config, db_path = alembic_config
    ini_path = tmp_path / "from_ini.db"
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{ini_path}")

    command.upgrade(config, "head")

    assert "passports" in table_names(db_path)
    assert not ini_path.exists()
