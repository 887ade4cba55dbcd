"""Schema migration tests."""

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from swiftaid.db.base import Base
import swiftaid.models  # noqa: F401

VERSIONS = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _load_revision(filename):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(engine, fn):
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            fn()


def test_initial_migration_matches_models(tmp_path):
    """Upgrade creates every mapped table and column; downgrade removes them."""
    revision = _load_revision("001_create_dispatch_tables.py")
    engine = create_engine(f"sqlite:///{tmp_path / 'migrate.db'}")

    _run(engine, revision.upgrade)
    inspector = inspect(engine)
    assert set(inspector.get_table_names()) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        migrated = {c["name"] for c in inspector.get_columns(name)}
        assert migrated == set(table.columns.keys()), name

    _run(engine, revision.downgrade)
    assert inspect(engine).get_table_names() == []
    engine.dispose()
