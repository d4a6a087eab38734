# File: tests/conftest.py
# Shared fixtures: a file-backed SQLite schema and in-memory metadata fakes.

import sqlite3
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from record_auto_generator.constants import SupportedDatabases
from record_auto_generator.domain.models import ColumnDescriptor
from record_auto_generator.introspection_django import setup_django


# --- Constants ---
GENERATOR_PROJECT_ROOT = Path(__file__).parent.parent
TEST_SCHEMAS_DIR = GENERATOR_PROJECT_ROOT / "tests" / "schemas"


@pytest.fixture(scope="session")
def sqlite_db_path(tmp_path_factory) -> Path:
    """Creates the fixture schema in a SQLite file shared by the whole session."""
    db_path = tmp_path_factory.mktemp("db") / "shop.sqlite3"
    schema_sql = (TEST_SCHEMAS_DIR / "shop.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(db_path))
    try:
        conn.executescript(schema_sql)
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture(scope="session")
def django_sqlite(sqlite_db_path) -> Path:
    """Configures Django once for the session against the fixture database."""
    setup_django({"default": {"ENGINE": SupportedDatabases.SQLITE, "NAME": str(sqlite_db_path)}})
    return sqlite_db_path


class FakeSchemaMetadata:
    """In-memory stand-in for a metadata session."""

    def __init__(self, tables: Dict[str, Sequence[ColumnDescriptor]], pks: Dict[str, List[str]] = None):
        self.tables = tables
        self.pks = pks or {}
        self.calls: List[str] = []

    def list_tables(self) -> List[str]:
        return list(self.tables)

    def primary_key_columns(self, table_name: str) -> List[str]:
        self.calls.append(f"pk:{table_name}")
        return list(self.pks.get(table_name, []))

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        self.calls.append(f"columns:{table_name}")
        return list(self.tables[table_name])


@pytest.fixture
def order_items_metadata() -> FakeSchemaMetadata:
    return FakeSchemaMetadata(
        tables={
            "order_items": [
                ColumnDescriptor("order_id", 4, "int4", 10, 0),
                ColumnDescriptor("unit_price", 2, "numeric", 12, 2),
                ColumnDescriptor("created_at", 93, "timestamptz", 35, 6),
            ],
        },
        pks={"order_items": ["order_id"]},
    )


@pytest.fixture
def make_metadata():
    """Factory for FakeSchemaMetadata instances."""
    return FakeSchemaMetadata
