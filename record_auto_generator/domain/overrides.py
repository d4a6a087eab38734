"""
User-declared name overrides for tables and columns.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from .naming import to_camel_case, to_pascal_case


class MappedName(NamedTuple):
    """A resolved output name and whether it came from an override."""

    name: str
    custom: bool


_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True)
class OverrideRegistry:
    """
    Table-name and per-table column-name overrides.

    Keys are the real database names, compared exactly (case-sensitive).
    A missing table or column falls back to the computed name.
    """

    tables: Mapping[str, str] = field(default_factory=dict)
    columns: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    @classmethod
    def from_mappings(
        cls,
        tables: Optional[Mapping[str, str]] = None,
        columns: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> "OverrideRegistry":
        frozen_columns = {
            table: MappingProxyType(dict(cols or {}))
            for table, cols in (columns or {}).items()
        }
        return cls(
            tables=MappingProxyType(dict(tables or {})),
            columns=MappingProxyType(frozen_columns),
        )

    def columns_for_table(self, table_name: str) -> Mapping[str, str]:
        return self.columns.get(table_name) or _EMPTY

    def mapped_table_name(self, table_name: str) -> str:
        """Return the configured class name, or the PascalCase table name."""
        custom = self.tables.get(table_name)
        return custom if custom is not None else to_pascal_case(table_name)

    def mapped_column_name(self, table_name: str, column_name: str) -> MappedName:
        """
        Return the configured field name for a column.

        The ``custom`` flag tells the template whether an explicit column
        annotation carrying the original name is needed.
        """
        custom = self.columns_for_table(table_name).get(column_name)
        if custom is not None:
            return MappedName(custom, True)
        return MappedName(to_camel_case(column_name), False)
