"""
Core domain models for the record generator.

These models describe one table as read from the database and as handed to
the renderer. They are built fresh for every run and never mutated after
construction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..constants import JavaTypes
from ..exceptions import UnsupportedTypeWarning


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Represents a database column as reported by the metadata provider.

    ``sql_type`` is a JDBC type code (see ``constants.SqlType``) and
    ``type_name`` the vendor's own name for the type, e.g. ``timestamptz``.
    """

    name: str
    sql_type: int
    type_name: str = ""
    precision: int = 0
    scale: int = 0
    is_pk: bool = False


@dataclass(frozen=True)
class TypeMappingResult:
    """The output type resolved for one column."""

    qualified_name: str
    warning: Optional[UnsupportedTypeWarning] = field(default=None, compare=False)

    @property
    def simple_name(self) -> str:
        """Unqualified type name, e.g. ``BigDecimal``."""
        return self.qualified_name.rsplit(".", 1)[-1]

    @property
    def requires_import(self) -> bool:
        """Qualified types outside ``java.lang`` need an import."""
        return (
            "." in self.qualified_name
            and not self.qualified_name.startswith(JavaTypes.IMPLICIT_NAMESPACE)
        )


@dataclass(frozen=True)
class FieldDescriptor:
    """A record component generated from one column."""

    java_name: str
    db_name: str
    type: str
    has_custom_mapping: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the key shape the template expects."""
        return {
            "javaName": self.java_name,
            "dbName": self.db_name,
            "type": self.type,
            "hasCustomMapping": self.has_custom_mapping,
        }


@dataclass(frozen=True)
class GenerationContext:
    """
    The fully resolved description of one table's output record.
    """

    package_name: str
    class_name: str
    table_name: str
    pk_columns: Tuple[FieldDescriptor, ...] = ()
    columns: Tuple[FieldDescriptor, ...] = ()
    imports: Tuple[str, ...] = ()

    @property
    def has_custom_table_mapping(self) -> bool:
        return self.table_name.lower() != self.class_name.lower()

    @property
    def has_composite_pk(self) -> bool:
        return len(self.pk_columns) > 1
