"""
Schema walking: from database metadata to generation contexts.

For each eligible table the walker reads the primary-key columns and the
column list from the metadata provider, resolves every column's output type
and field name, and produces one ``GenerationContext``. Nothing is shared
between tables; the per-table lists and import sets are local to
``walk_table``.

Example:
    >>> walker = SchemaWalker("com.example.records", mappings, TypeMapper())
    >>> for context in walker.walk(metadata):
    ...     print(context.class_name)
"""

import logging
from dataclasses import replace
from typing import Iterator, List, Protocol, Sequence, Set

from record_auto_generator.config import GeneratorMappings
from record_auto_generator.domain.models import (
    ColumnDescriptor,
    FieldDescriptor,
    GenerationContext,
)
from record_auto_generator.domain.type_mapping import TypeMapper
from record_auto_generator.exceptions import MetadataAccessError


logger = logging.getLogger(__name__)


class SchemaMetadata(Protocol):
    """What the walker needs from a schema-metadata session."""

    def list_tables(self) -> Sequence[str]:
        ...

    def primary_key_columns(self, table_name: str) -> Sequence[str]:
        ...

    def columns(self, table_name: str) -> Sequence[ColumnDescriptor]:
        ...


class SchemaWalker:
    """Builds one ``GenerationContext`` per eligible table."""

    def __init__(self, package_name: str, mappings: GeneratorMappings, type_mapper: TypeMapper):
        self.package_name = package_name
        self.mappings = mappings
        self.type_mapper = type_mapper

    def eligible_tables(self, metadata: SchemaMetadata) -> List[str]:
        tables = []
        for table_name in metadata.list_tables():
            if self.mappings.should_process_table(table_name):
                tables.append(table_name)
            else:
                logger.debug(f"Skipping table '{table_name}' (filtered out).")
        return tables

    def walk(self, metadata: SchemaMetadata) -> Iterator[GenerationContext]:
        """
        Yield a context per eligible table, in enumeration order.

        Tables are processed lazily so each file can be written before the
        next table is read.
        """
        for table_name in self.eligible_tables(metadata):
            yield self.walk_table(metadata, table_name)

    def walk_table(self, metadata: SchemaMetadata, table_name: str) -> GenerationContext:
        """
        Build the context for one table.

        Raises:
            MetadataAccessError: If the table's key or columns cannot be read
        """
        overrides = self.mappings.overrides
        class_name = overrides.mapped_table_name(table_name)
        logger.info(f"Generating: {table_name} -> {class_name}")

        try:
            pk_names: Set[str] = {name.lower() for name in metadata.primary_key_columns(table_name)}
            columns = list(metadata.columns(table_name))
        except MetadataAccessError:
            raise
        except Exception as e:
            raise MetadataAccessError(
                f"Failed reading metadata for table '{table_name}': {e}", table=table_name
            ) from e

        pk_fields: List[FieldDescriptor] = []
        fields: List[FieldDescriptor] = []
        imports: Set[str] = set()

        for column in columns:
            column = replace(column, is_pk=column.name.lower() in pk_names)
            mapping = self.type_mapper.map_type(column)
            if mapping.requires_import:
                imports.add(mapping.qualified_name)

            java_name, custom = overrides.mapped_column_name(table_name, column.name)
            descriptor = FieldDescriptor(
                java_name=java_name,
                db_name=column.name,
                type=mapping.simple_name,
                has_custom_mapping=custom,
            )

            if column.is_pk:
                pk_fields.append(descriptor)
            else:
                fields.append(descriptor)

        if not pk_fields:
            logger.warning(f"Table '{table_name}' has no primary key.")

        return GenerationContext(
            package_name=self.package_name,
            class_name=class_name,
            table_name=table_name,
            pk_columns=tuple(pk_fields),
            columns=tuple(fields),
            imports=tuple(sorted(imports)),
        )
