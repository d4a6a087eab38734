"""
SQL type to output type mapping.

The mapping is an ordered list of rules evaluated top to bottom; the first
rule whose predicate accepts a column decides its type. Columns no rule
accepts are mapped to ``Object`` with a logged warning rather than an
error, so unseen vendor types never stop a run.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional

from ..constants import JavaTypes, SqlType, TypeNameHints
from ..exceptions import UnsupportedTypeWarning
from .models import ColumnDescriptor, TypeMappingResult


logger = logging.getLogger(__name__)


class SqlColumnType(NamedTuple):
    """Inputs of a mapping rule; ``name`` is the lowercased raw type name."""

    code: int
    name: str
    precision: int
    scale: int


Predicate = Callable[[SqlColumnType], bool]
Resolver = Callable[[SqlColumnType, str], str]


@dataclass(frozen=True)
class MappingRule:
    """One row of the dispatch table."""

    category: str
    predicate: Predicate
    resolve: Resolver


def _codes(*codes: SqlType) -> Predicate:
    members = frozenset(int(c) for c in codes)
    return lambda col: col.code in members


def _fixed(java_type: str) -> Resolver:
    return lambda col, tz_type: java_type


def _exact_numeric(col: SqlColumnType, tz_type: str) -> str:
    # scale 0, or Oracle's -127, means no fractional digits
    if col.scale <= 0:
        if 0 < col.precision < 10:
            return JavaTypes.INTEGER
        return JavaTypes.LONG
    return JavaTypes.BIG_DECIMAL


def _timestamp(col: SqlColumnType, tz_type: str) -> str:
    if any(hint in col.name for hint in TypeNameHints.TIMEZONE):
        return tz_type
    return JavaTypes.LOCAL_DATE_TIME


def _special(col: SqlColumnType, tz_type: str) -> str:
    if col.name in TypeNameHints.JSON_NAMES:
        return JavaTypes.JSON_NODE
    if col.name == TypeNameHints.UUID:
        return JavaTypes.UUID
    return JavaTypes.STRING


MAPPING_RULES: List[MappingRule] = [
    MappingRule("integer", _codes(SqlType.INTEGER, SqlType.SMALLINT, SqlType.TINYINT),
                _fixed(JavaTypes.INTEGER)),
    MappingRule("bigint", _codes(SqlType.BIGINT), _fixed(JavaTypes.LONG)),
    MappingRule("exact_numeric", _codes(SqlType.DECIMAL, SqlType.NUMERIC), _exact_numeric),
    MappingRule("floating", _codes(SqlType.FLOAT, SqlType.REAL, SqlType.DOUBLE),
                _fixed(JavaTypes.DOUBLE)),
    MappingRule("character",
                _codes(SqlType.VARCHAR, SqlType.CHAR, SqlType.LONGVARCHAR, SqlType.CLOB,
                       SqlType.NVARCHAR, SqlType.NCHAR),
                _fixed(JavaTypes.STRING)),
    MappingRule("boolean", _codes(SqlType.BOOLEAN, SqlType.BIT), _fixed(JavaTypes.BOOLEAN)),
    MappingRule("timestamp_tz",
                _codes(SqlType.MSSQL_DATETIMEOFFSET, SqlType.TIMESTAMP_WITH_TIMEZONE),
                lambda col, tz_type: tz_type),
    MappingRule("timestamp", _codes(SqlType.TIMESTAMP), _timestamp),
    MappingRule("date", _codes(SqlType.DATE), _fixed(JavaTypes.LOCAL_DATE)),
    MappingRule("time", _codes(SqlType.TIME), _fixed(JavaTypes.LOCAL_TIME)),
    MappingRule("binary",
                _codes(SqlType.BINARY, SqlType.VARBINARY, SqlType.LONGVARBINARY, SqlType.BLOB),
                _fixed(JavaTypes.BYTES)),
    MappingRule("special", _codes(SqlType.OTHER, SqlType.ROWID), _special),
]


def map_sql_type(
    sql_type: int,
    type_name: Optional[str],
    precision: int,
    scale: int,
    timestamp_tz_type: str = JavaTypes.INSTANT,
) -> TypeMappingResult:
    """
    Map a column's SQL type to a fully-qualified output type.

    Args:
        sql_type: JDBC type code
        type_name: Raw vendor type name; compared case-insensitively
        precision: Numeric precision (column size)
        scale: Numeric scale (decimal digits)
        timestamp_tz_type: Type used for every timezone-aware column of the run

    Returns:
        The mapping result. ``warning`` is set when no rule applied.
    """
    col = SqlColumnType(
        code=int(sql_type),
        name=(type_name or "").lower(),
        precision=precision or 0,
        scale=scale or 0,
    )

    for rule in MAPPING_RULES:
        if rule.predicate(col):
            return TypeMappingResult(rule.resolve(col, timestamp_tz_type))

    if TypeNameHints.JSON in col.name:
        return TypeMappingResult(JavaTypes.JSON_NODE)

    warning = UnsupportedTypeWarning(col.code, col.name)
    logger.warning(str(warning))
    return TypeMappingResult(JavaTypes.OBJECT, warning=warning)


class TypeMapper:
    """Maps columns with the timezone-aware type chosen once for the run."""

    def __init__(self, use_offset_date_time: bool = False):
        self.timestamp_tz_type = (
            JavaTypes.OFFSET_DATE_TIME if use_offset_date_time else JavaTypes.INSTANT
        )

    def map_type(self, column: ColumnDescriptor) -> TypeMappingResult:
        return map_sql_type(
            column.sql_type,
            column.type_name,
            column.precision,
            column.scale,
            self.timestamp_tz_type,
        )
