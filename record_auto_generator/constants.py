"""
Centralized constants for the record generator.

This module contains the SQL type codes, output type identifiers and default
configuration values shared across the generator.
"""

from enum import IntEnum


# =============================================================================
# CORE CONFIGURATION
# =============================================================================

class DefaultConfig:
    """Default configuration values."""

    OUTPUT_DIR = "target/generated-sources/jdbc-records"
    ENV_PATH = "db.yaml"
    FILE_EXTENSION = "java"
    USE_OFFSET_DATE_TIME = False

    # Template lookup
    TEMPLATE_NAME = "table-record"
    TEMPLATE_SUFFIX = ".j2"


class EnvKeys:
    """Keys of the flat connection document."""

    URL = "DB_URL"
    USER = "DB_USER"
    PASSWORD = "DB_PASSWORD"
    SCHEMA = "DB_SCHEMA"

    ALL = [URL, USER, PASSWORD, SCHEMA]


class SupportedDatabases:
    """Database engines the introspection layer knows how to read."""

    POSTGRESQL = 'django.db.backends.postgresql'
    SQLITE = 'django.db.backends.sqlite3'

    # URL scheme -> Django engine
    SCHEMES = {
        "postgresql": POSTGRESQL,
        "postgres": POSTGRESQL,
        "sqlite": SQLITE,
    }


# =============================================================================
# SQL TYPE CODES
# =============================================================================

class SqlType(IntEnum):
    """JDBC type codes, as reported by java.sql.Types."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCLOB = 2011
    SQLXML = 2009
    REF_CURSOR = 2012
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014

    # SQL Server DATETIMEOFFSET, reported outside the standard range
    MSSQL_DATETIMEOFFSET = -155


# =============================================================================
# OUTPUT TYPES
# =============================================================================

class JavaTypes:
    """Fully-qualified output type identifiers."""

    INTEGER = "java.lang.Integer"
    LONG = "java.lang.Long"
    BIG_DECIMAL = "java.math.BigDecimal"
    DOUBLE = "java.lang.Double"
    STRING = "java.lang.String"
    BOOLEAN = "java.lang.Boolean"
    OBJECT = "java.lang.Object"

    LOCAL_DATE_TIME = "java.time.LocalDateTime"
    LOCAL_DATE = "java.time.LocalDate"
    LOCAL_TIME = "java.time.LocalTime"
    INSTANT = "java.time.Instant"
    OFFSET_DATE_TIME = "java.time.OffsetDateTime"

    BYTES = "byte[]"
    JSON_NODE = "com.fasterxml.jackson.databind.JsonNode"
    UUID = "java.util.UUID"

    # Types under this prefix never need an import
    IMPLICIT_NAMESPACE = "java.lang."


class TypeNameHints:
    """Substrings looked for in the raw (vendor) type name."""

    TIMEZONE = ("tz", "offset")
    JSON = "json"
    JSON_NAMES = ("json", "jsonb")
    UUID = "uuid"
