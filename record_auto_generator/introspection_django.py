import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import django
from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, connections

from record_auto_generator.constants import SqlType, SupportedDatabases
from record_auto_generator.domain.models import ColumnDescriptor
from record_auto_generator.exceptions import MetadataAccessError


logger = logging.getLogger(__name__)


# --- Type code translation ---
# Django reports backend-native type codes; these tables translate them into
# the JDBC code and type name a JDBC driver would report for the same column.

# PostgreSQL type OID -> (JDBC code, pg type name)
POSTGRES_OID_TYPES: Dict[int, Tuple[SqlType, str]] = {
    16: (SqlType.BIT, "bool"),
    17: (SqlType.BINARY, "bytea"),
    18: (SqlType.CHAR, "char"),
    19: (SqlType.VARCHAR, "name"),
    20: (SqlType.BIGINT, "int8"),
    21: (SqlType.SMALLINT, "int2"),
    23: (SqlType.INTEGER, "int4"),
    25: (SqlType.VARCHAR, "text"),
    26: (SqlType.BIGINT, "oid"),
    114: (SqlType.OTHER, "json"),
    142: (SqlType.SQLXML, "xml"),
    650: (SqlType.OTHER, "cidr"),
    700: (SqlType.REAL, "float4"),
    701: (SqlType.DOUBLE, "float8"),
    790: (SqlType.DOUBLE, "money"),
    829: (SqlType.OTHER, "macaddr"),
    869: (SqlType.OTHER, "inet"),
    1042: (SqlType.CHAR, "bpchar"),
    1043: (SqlType.VARCHAR, "varchar"),
    1082: (SqlType.DATE, "date"),
    1083: (SqlType.TIME, "time"),
    1114: (SqlType.TIMESTAMP, "timestamp"),
    1184: (SqlType.TIMESTAMP, "timestamptz"),
    1186: (SqlType.OTHER, "interval"),
    1266: (SqlType.TIME, "timetz"),
    1560: (SqlType.BIT, "bit"),
    1562: (SqlType.OTHER, "varbit"),
    1700: (SqlType.NUMERIC, "numeric"),
    2950: (SqlType.OTHER, "uuid"),
    3802: (SqlType.OTHER, "jsonb"),
}

# SQLite declared type name -> JDBC code, checked before affinity rules
SQLITE_DECLARED_TYPES: Dict[str, SqlType] = {
    "tinyint": SqlType.TINYINT,
    "smallint": SqlType.SMALLINT,
    "int2": SqlType.SMALLINT,
    "bigint": SqlType.BIGINT,
    "int8": SqlType.BIGINT,
    "boolean": SqlType.BOOLEAN,
    "bool": SqlType.BOOLEAN,
    "bit": SqlType.BIT,
    "decimal": SqlType.DECIMAL,
    "numeric": SqlType.NUMERIC,
    "real": SqlType.REAL,
    "float": SqlType.FLOAT,
    "double": SqlType.DOUBLE,
    "double precision": SqlType.DOUBLE,
    "date": SqlType.DATE,
    "time": SqlType.TIME,
    "datetime": SqlType.TIMESTAMP,
    "timestamp": SqlType.TIMESTAMP,
    "timestamptz": SqlType.TIMESTAMP,
    "timestamp with time zone": SqlType.TIMESTAMP_WITH_TIMEZONE,
    "char": SqlType.CHAR,
    "character": SqlType.CHAR,
    "nchar": SqlType.NCHAR,
    "varchar": SqlType.VARCHAR,
    "nvarchar": SqlType.NVARCHAR,
    "character varying": SqlType.VARCHAR,
    "text": SqlType.VARCHAR,
    "clob": SqlType.CLOB,
    "blob": SqlType.BLOB,
    "binary": SqlType.BINARY,
    "varbinary": SqlType.VARBINARY,
    "uuid": SqlType.OTHER,
    "json": SqlType.OTHER,
    "jsonb": SqlType.OTHER,
}

_TYPE_PARAMS_RE = re.compile(r"\(\s*(\d+)\s*(?:,\s*(-?\d+)\s*)?\)")


def parse_declared_type(declared: str) -> Tuple[str, int, int]:
    """
    Split a declared column type such as ``DECIMAL(10, 2)`` into its base
    name (lowercased) and its precision and scale.
    """
    declared = (declared or "").strip()
    match = _TYPE_PARAMS_RE.search(declared)
    precision = int(match.group(1)) if match else 0
    scale = int(match.group(2)) if match and match.group(2) else 0
    base = _TYPE_PARAMS_RE.sub("", declared)
    base = " ".join(base.lower().split())
    return base, precision, scale


def sqlite_sql_type(base_name: str) -> SqlType:
    """Classify a SQLite declared type, using its affinity rules as the fallback."""
    if base_name in SQLITE_DECLARED_TYPES:
        return SQLITE_DECLARED_TYPES[base_name]
    upper = base_name.upper()
    if "INT" in upper:
        return SqlType.INTEGER
    if any(s in upper for s in ("CHAR", "CLOB", "TEXT")):
        return SqlType.VARCHAR
    if not upper or "BLOB" in upper:
        return SqlType.BLOB
    if any(s in upper for s in ("REAL", "FLOA", "DOUB")):
        return SqlType.DOUBLE
    return SqlType.NUMERIC


def _get_column_details(description) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """Helper to extract sizes potentially available on a FieldInfo. Often None."""
    internal_size = getattr(description, 'internal_size', None)
    precision = getattr(description, 'precision', None)
    scale = getattr(description, 'scale', None)
    return internal_size, precision, scale


# --- Django Setup Helper ---
_django_setup_done = False


def _database_differences(requested: Dict[str, Any], configured: Dict[str, Any]) -> List[str]:
    """Keys of the requested alias settings whose value differs from the configured ones."""
    return sorted(key for key, value in requested.items() if configured.get(key) != value)


def setup_django(db_settings: Dict[str, Dict[str, Any]], secret_key: Optional[str] = None):
    """Configures minimal Django settings and runs django.setup()."""
    global _django_setup_done
    if _django_setup_done or settings.configured:
        logger.debug("Django setup already performed.")
        # Settings can only be configured once per process
        requested = db_settings.get(DEFAULT_DB_ALIAS, {})
        configured = settings.DATABASES.get(DEFAULT_DB_ALIAS, {})
        differences = _database_differences(requested, configured)
        if differences:
            logger.warning(
                "Django is already configured for another database; the requested "
                f"settings are ignored (differing keys: {', '.join(differences)})."
            )
        _django_setup_done = True
        return

    logger.info("Configuring Django settings for introspection...")
    logger.debug(f"Using DB engine for Django: {db_settings['default']['ENGINE']}")
    settings.configure(
        SECRET_KEY=secret_key or os.urandom(50).hex(),
        DATABASES=db_settings,
        INSTALLED_APPS=[],
        TIME_ZONE='UTC',
        USE_TZ=True,
    )
    django.setup()
    _django_setup_done = True
    logger.info("Django setup complete.")


class DjangoSchemaMetadata:
    """
    Schema metadata read through Django's ``connection.introspection``.

    Use as a context manager; one cursor is held open for the session.
    """

    def __init__(self, db_alias: str = DEFAULT_DB_ALIAS):
        self.db_alias = db_alias
        self._connection = None
        self._cursor = None

    def __enter__(self) -> "DjangoSchemaMetadata":
        if not _django_setup_done:
            raise RuntimeError("Django has not been set up. Call setup_django() first.")
        try:
            self._connection = connections[self.db_alias]
            self._cursor = self._connection.cursor()
        except Exception as e:
            raise MetadataAccessError(
                f"Could not connect to database '{self.db_alias}': {e}"
            ) from e
        logger.debug(f"Opened introspection session on '{self.db_alias}' ({self._connection.vendor}).")
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._cursor is not None:
            self._cursor.close()
        if self._connection is not None:
            self._connection.close()
        self._cursor = None
        self._connection = None
        return False

    @property
    def introspection(self):
        return self._connection.introspection

    @property
    def engine(self) -> str:
        return self._connection.settings_dict["ENGINE"]

    def list_tables(self) -> List[str]:
        """Return the base tables visible to the connection, in introspection order."""
        try:
            items = self.introspection.get_table_list(self._cursor)
        except Exception as e:
            raise MetadataAccessError(f"Could not list tables: {e}") from e

        tables = []
        for item in items:
            item_type = getattr(item, 'type', 't')
            if item_type != 't':
                logger.debug(f"Skipping item '{item.name}' (type: {item_type}).")
                continue
            tables.append(item.name)
        logger.info(f"Found {len(tables)} tables.")
        return tables

    def primary_key_columns(self, table_name: str) -> List[str]:
        """Return the primary-key column names of a table, in key order."""
        try:
            constraints = self.introspection.get_constraints(self._cursor, table_name)
            pk_constraint = next((c for c in constraints.values() if c.get('primary_key')), None)
            pk_columns = list(pk_constraint.get('columns') or []) if pk_constraint else []
            if not pk_columns:
                single = self.introspection.get_primary_key_column(self._cursor, table_name)
                pk_columns = [single] if single else []
        except Exception as e:
            raise MetadataAccessError(
                f"Could not read primary key of table '{table_name}': {e}", table=table_name
            ) from e
        logger.debug(f"Primary key columns for '{table_name}': {pk_columns}")
        return pk_columns

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        """Return column descriptors in table order."""
        try:
            description = self.introspection.get_table_description(self._cursor, table_name)
            return [self._to_descriptor(field_info) for field_info in description]
        except MetadataAccessError:
            raise
        except Exception as e:
            raise MetadataAccessError(
                f"Could not read columns of table '{table_name}': {e}", table=table_name
            ) from e

    def _to_descriptor(self, field_info) -> ColumnDescriptor:
        internal_size, precision, scale = _get_column_details(field_info)

        if self.engine == SupportedDatabases.SQLITE:
            type_name, precision, scale = parse_declared_type(str(field_info.type_code))
            sql_type = sqlite_sql_type(type_name)
        else:
            sql_type, type_name = self._postgres_type(field_info.type_code)
            if precision is None and internal_size and internal_size > 0:
                precision = internal_size

        return ColumnDescriptor(
            name=field_info.name,
            sql_type=int(sql_type),
            type_name=type_name,
            precision=precision or 0,
            scale=scale or 0,
        )

    def _postgres_type(self, oid: int) -> Tuple[SqlType, str]:
        known = POSTGRES_OID_TYPES.get(oid)
        if known:
            return known

        # Enums, domains, arrays and extension types: ask the catalog
        self._cursor.execute(
            "SELECT typname, typcategory FROM pg_catalog.pg_type WHERE oid = %s", [oid]
        )
        row = self._cursor.fetchone()
        if row is None:
            return SqlType.OTHER, str(oid)
        type_name, category = row
        if category == 'A':
            return SqlType.ARRAY, type_name
        return SqlType.OTHER, type_name
