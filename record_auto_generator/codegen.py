import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
)

from record_auto_generator.constants import DefaultConfig
from record_auto_generator.domain.models import GenerationContext
from record_auto_generator.exceptions import ConfigurationError, RenderError


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_NAME = DefaultConfig.TEMPLATE_NAME + DefaultConfig.TEMPLATE_SUFFIX


def build_template_context(context: GenerationContext) -> Dict[str, Any]:
    """Shape a GenerationContext into the keys the record template uses."""
    return {
        "packageName": context.package_name,
        "className": context.class_name,
        "dbTableName": context.table_name,
        "hasCustomTableMapping": context.has_custom_table_mapping,
        "pkColumns": [f.to_dict() for f in context.pk_columns],
        "columns": [f.to_dict() for f in context.columns],
        "hasCompositePk": context.has_composite_pk,
        "imports": list(context.imports),
    }


def resolve_output_path(
    output_dir: Path, package_name: str, class_name: str, extension: str = DefaultConfig.FILE_EXTENSION
) -> Path:
    """``<output_dir>/<package as directories>/<ClassName>.<ext>``"""
    package_dir = Path(*package_name.split(".")) if package_name else Path()
    return Path(output_dir) / package_dir / f"{class_name}.{extension.lstrip('.')}"


def setup_jinja_env(templates_path: Optional[str] = None) -> Environment:
    """
    Sets up the Jinja2 environment, reading templates from ``templates_path``
    when given and from the built-in templates otherwise.

    Raises:
        ConfigurationError: If the custom templates directory does not exist
    """
    if templates_path:
        template_dir = Path(templates_path)
        if not template_dir.is_dir():
            raise ConfigurationError(
                f"Templates path not exists: {template_dir}",
                context={"templates_path": str(template_dir)},
            )
        logger.info(f"Using template file from folder: {template_dir}")
    else:
        template_dir = TEMPLATE_DIR
        logger.info("No custom templates path specified. Falling back to default values.")

    # Generated sources are not markup; nothing must be escaped
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def load_template(templates_path: Optional[str] = None, template_name: str = TEMPLATE_NAME) -> Template:
    """
    Load and compile the record template.

    Raises:
        ConfigurationError: If the custom templates directory does not exist
        RenderError: If the template is missing or does not compile
    """
    env = setup_jinja_env(templates_path)
    try:
        return env.get_template(template_name)
    except TemplateNotFound as e:
        raise RenderError(
            f"Record template not found: {template_name}", template=template_name
        ) from e
    except TemplateError as e:
        raise RenderError(
            f"Failed to parse record template: {template_name}: {e}", template=template_name
        ) from e


class RecordWriter:
    """Renders generation contexts and writes one source file per table."""

    def __init__(self, template: Template, output_dir: Path, extension: str = DefaultConfig.FILE_EXTENSION):
        self.template = template
        self.output_dir = Path(output_dir)
        self.extension = extension

    def render(self, context: GenerationContext) -> str:
        try:
            return self.template.render(build_template_context(context))
        except TemplateError as e:
            raise RenderError(
                f"Failed to render record for table '{context.table_name}': {e}",
                template=self.template.name,
                table=context.table_name,
            ) from e

    def write(self, context: GenerationContext) -> Path:
        """Render the record and save it, creating the package directories."""
        content = self.render(context)
        output_path = resolve_output_path(
            self.output_dir, context.package_name, context.class_name, self.extension
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.debug(f"Generated file: {output_path}")
        return output_path
