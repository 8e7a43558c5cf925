# tests/test_migrations.py
"""
Tests that the Alembic migrations build the same schema as the models.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.models import Base

BACKEND_DIR = Path(__file__).resolve().parents[1]


@pytest.fixture
def alembic_config(tmp_path) -> Config:
    config = Config()
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{tmp_path / 'migrated.db'}")
    return config


class TestMigrations:
    def test_upgrade_creates_model_tables(self, alembic_config):
        command.upgrade(alembic_config, "head")

        engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}

        assert tables == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            columns = {c["name"] for c in inspector.get_columns(name)}
            assert columns == {c.name for c in table.columns}
        engine.dispose()

    def test_downgrade_removes_tables(self, alembic_config):
        command.upgrade(alembic_config, "head")
        command.downgrade(alembic_config, "base")

        engine = create_engine(alembic_config.get_main_option("sqlalchemy.url"))
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
        engine.dispose()
