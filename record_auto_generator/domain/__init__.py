"""
Domain module for the record generator.

This module contains the schema mapping logic, separated from database access
and template rendering: naming rules, table filters, name overrides and the
SQL type mapping table.
"""

from .models import (
    ColumnDescriptor,
    TypeMappingResult,
    FieldDescriptor,
    GenerationContext,
)

from .naming import (
    to_pascal_case,
    to_camel_case,
)

from .filters import (
    FilterSet,
    MATCH_EVERYTHING,
)

from .overrides import (
    OverrideRegistry,
    MappedName,
)

from .type_mapping import (
    TypeMapper,
    MappingRule,
    MAPPING_RULES,
    map_sql_type,
)

__all__ = [
    # Core models
    'ColumnDescriptor',
    'TypeMappingResult',
    'FieldDescriptor',
    'GenerationContext',

    # Naming
    'to_pascal_case',
    'to_camel_case',

    # Filters and overrides
    'FilterSet',
    'MATCH_EVERYTHING',
    'OverrideRegistry',
    'MappedName',

    # Type mapping
    'TypeMapper',
    'MappingRule',
    'MAPPING_RULES',
    'map_sql_type',
]
