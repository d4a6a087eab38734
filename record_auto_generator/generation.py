"""
Generation run: wires configuration, introspection, walking and rendering.

All configuration is loaded and validated before the database is opened.
Tables are then processed one at a time; the first failure aborts the run
and files already written are left in place.
"""

import logging
from pathlib import Path
from typing import List

from record_auto_generator.codegen import RecordWriter, load_template
from record_auto_generator.colored_logging import (
    log_highlight,
    log_progress,
    log_section,
    log_success,
)
from record_auto_generator.config import (
    GeneratorMappings,
    GeneratorSettings,
    load_connection,
    load_mappings,
)
from record_auto_generator.domain.type_mapping import TypeMapper
from record_auto_generator.introspection_django import DjangoSchemaMetadata, setup_django
from record_auto_generator.mapper import SchemaMetadata, SchemaWalker


logger = logging.getLogger(__name__)


def generate_records(
    settings: GeneratorSettings,
    mappings: GeneratorMappings,
    metadata: SchemaMetadata,
    writer: RecordWriter,
) -> List[Path]:
    """
    Generate one record file per eligible table.

    Returns:
        The paths written, in processing order
    """
    walker = SchemaWalker(
        settings.package_name,
        mappings,
        TypeMapper(use_offset_date_time=settings.use_offset_date_time),
    )
    written: List[Path] = []
    for context in walker.walk(metadata):
        written.append(writer.write(context))
    return written


def run(settings: GeneratorSettings) -> List[Path]:
    """
    Execute a full generation run from settings.

    Raises:
        ConfigurationError: A configuration document is missing or invalid
        MetadataAccessError: The database or a table's metadata cannot be read
        RenderError: The template cannot be loaded or applied
    """
    log_section(logger, "Record Generation")
    log_progress(logger, "Starting record generation...")
    log_highlight(logger, f"Timezone-aware columns map to {settings.timestamp_tz_label}.")

    mappings = load_mappings(settings.mappings_path)
    connection = load_connection(settings.env_path)
    template = load_template(settings.templates_path)
    log_success(logger, "Configuration loaded and validated successfully.")

    setup_django(connection.to_django_databases())

    writer = RecordWriter(template, Path(settings.output_dir), settings.file_extension)
    log_progress(logger, "Introspecting database schema...")
    with DjangoSchemaMetadata() as metadata:
        written = generate_records(settings, mappings, metadata, writer)

    if not written:
        logger.warning("No tables matched the configured filters. Nothing was generated.")
    else:
        log_success(logger, f"Generated {len(written)} record(s) under {settings.output_dir}")
    return written
