"""The Alembic history must build the same schema the ORM models describe."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from hmsnova.core.config import settings
from hmsnova.db.base import Base

ROOT = Path(__file__).resolve().parents[2]


def _alembic_config() -> Config:
    # No ini file: env.py would otherwise reconfigure logging for the whole test run
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    return config


def test_upgrade_head_matches_models(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_file}")

    command.upgrade(_alembic_config(), "head")

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == set(Base.metadata.tables) | {"alembic_version"}
        for name, table in Base.metadata.tables.items():
            migrated = {column["name"] for column in inspector.get_columns(name)}
            assert migrated == {column.name for column in table.columns}, name

        reminder_indexes = {ix["name"] for ix in inspector.get_indexes("scheduled_reminders")}
        assert {"ix_scheduled_reminders_due", "ix_scheduled_reminders_entity"} <= reminder_indexes
        assert "ix_incidents_status" in {ix["name"] for ix in inspector.get_indexes("incidents")}
    finally:
        engine.dispose()


def test_downgrade_base_drops_everything(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_file}")
    config = _alembic_config()

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        assert inspect(engine).get_table_names() == ["alembic_version"]
    finally:
        engine.dispose()
