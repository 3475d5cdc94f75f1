"""Checks the Alembic migration against the ORM metadata.

The migration module is loaded straight from ``alembic/versions`` and run
through ``Operations`` on a synchronous in-memory SQLite connection.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from interior_manager.core.database import Base
from interior_manager.core.models.domain.enums import PermissionNode

VERSIONS_DIR = Path(__file__).resolve().parents[4] / "alembic" / "versions"


def _load_migrations():
    modules = []
    for path in sorted(VERSIONS_DIR.glob("*.py")):
        spec = importlib.util.spec_from_file_location(f"migration_{path.stem}", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        modules.append(module)
    return modules


@pytest.fixture
def connection():
    engine = sa.create_engine("sqlite://")
    with engine.begin() as conn:
        yield conn
    engine.dispose()


def _run(connection, step: str) -> None:
    context = MigrationContext.configure(connection)
    with Operations.context(context):
        for module in _load_migrations():
            getattr(module, step)()


def test_single_root_revision():
    modules = _load_migrations()
    assert [m.down_revision for m in modules] == [None]


def test_upgrade_matches_models(connection):
    from interior_manager.core.database import entities  # noqa: F401

    _run(connection, "upgrade")

    inspector = sa.inspect(connection)
    assert set(inspector.get_table_names()) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        migrated = {column["name"] for column in inspector.get_columns(name)}
        assert migrated == set(table.columns.keys()), name


def test_upgrade_seeds_permission_catalog(connection):
    _run(connection, "upgrade")

    rows = connection.execute(sa.text("SELECT code, module FROM permissions")).all()
    assert sorted(code for code, _ in rows) == sorted(node.value for node in PermissionNode)
    assert all(code.startswith(f"{module}.") for code, module in rows)


def test_downgrade_drops_everything(connection):
    _run(connection, "upgrade")
    _run(connection, "downgrade")

    assert sa.inspect(connection).get_table_names() == []
