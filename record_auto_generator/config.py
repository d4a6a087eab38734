"""
Configuration loading for the record generator.

Three documents drive a run:

- the generator settings, built from CLI arguments;
- the optional mappings document (YAML) with table filters and name overrides;
- the connection document (flat YAML) with the database URL and credentials.

All three are validated with pydantic and turned into immutable objects once,
before any table is read.
"""

import argparse
import keyword
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .constants import DefaultConfig, EnvKeys, SupportedDatabases
from .domain.filters import FilterSet
from .domain.overrides import OverrideRegistry
from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def _format_validation_error(error: ValidationError) -> List[str]:
    """Render pydantic errors as 'location: message' lines."""
    lines = []
    for err in error.errors():
        loc_parts = [str(loc_item) for loc_item in err.get("loc", ())]
        loc_str = " -> ".join(loc_parts) if loc_parts else "Top Level"
        lines.append(f"{loc_str}: {err.get('msg', 'Unknown validation error')}")
    return lines


def _read_yaml_mapping(path: Path, what: str) -> Dict[str, Any]:
    """Read a YAML document that must contain a mapping (an empty file is an empty mapping)."""
    if not path.is_file():
        raise ConfigurationError(f"{what} not found: {path}", config_file=str(path))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {what.lower()}: {e}", config_file=str(path)
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Could not read {what.lower()}: {e}", config_file=str(path)
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{what} must contain a mapping",
            config_file=str(path),
            context={"loaded_type": type(data).__name__},
        )
    return data


# --- Mappings document ---


class FiltersConfig(BaseModel):
    """The ``filters`` section: regular expressions matched against table names."""

    include: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        # A bare "- " line in YAML is a null item; it is skipped like a blank pattern
        if v is None:
            return []
        if isinstance(v, list):
            return [item for item in v if item is not None]
        return v


class MappingsConfig(BaseModel):
    """The ``mappings`` section: custom class and field names."""

    tables: Dict[str, str] = Field(default_factory=dict)
    columns: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("tables", "columns", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("columns", mode="before")
    @classmethod
    def none_table_is_empty(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {table: ({} if cols is None else cols) for table, cols in v.items()}
        return v


class MappingsDocument(BaseModel):
    """Schema of the YAML mappings document."""

    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    mappings: MappingsConfig = Field(default_factory=MappingsConfig)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("filters", "mappings", mode="before")
    @classmethod
    def none_is_default(cls, v: Any) -> Any:
        return {} if v is None else v


@dataclass(frozen=True)
class GeneratorMappings:
    """Compiled filters and overrides used during a run."""

    filters: FilterSet = field(default_factory=FilterSet)
    overrides: OverrideRegistry = field(default_factory=OverrideRegistry)

    @classmethod
    def from_document(cls, document: MappingsDocument) -> "GeneratorMappings":
        return cls(
            filters=FilterSet.from_patterns(document.filters.include, document.filters.exclude),
            overrides=OverrideRegistry.from_mappings(
                document.mappings.tables, document.mappings.columns
            ),
        )

    def should_process_table(self, table_name: str) -> bool:
        return self.filters.should_process(table_name)


def load_mappings(path: Optional[str]) -> GeneratorMappings:
    """
    Load the mappings document, or return the defaults when no path is given.

    Raises:
        ConfigurationError: The file is missing, unreadable or malformed
        PatternCompilationError: A filter pattern is not a valid regex
    """
    if not path:
        logger.info("No mappings file specified. Falling back to default values.")
        return GeneratorMappings()

    mappings_file = Path(path)
    logger.info(f"Using mappings file: {mappings_file}")
    raw = _read_yaml_mapping(mappings_file, "Mappings file")

    try:
        document = MappingsDocument.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            "Failed while parsing mappings file",
            config_file=str(mappings_file),
            context={"errors": "; ".join(_format_validation_error(e))},
        ) from e

    mappings = GeneratorMappings.from_document(document)
    logger.debug(
        f"Mappings loaded: {len(document.filters.include)} include, "
        f"{len(document.filters.exclude)} exclude patterns, "
        f"{len(document.mappings.tables)} table overrides"
    )
    return mappings


# --- Connection document ---


class ConnectionSettings(BaseModel):
    """Flat connection document: URL, credentials and target schema."""

    url: str = Field(..., alias=EnvKeys.URL, min_length=1)
    user: Optional[str] = Field(default=None, alias=EnvKeys.USER)
    password: Optional[str] = Field(default=None, alias=EnvKeys.PASSWORD)
    db_schema: Optional[str] = Field(default=None, alias=EnvKeys.SCHEMA)

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("user", "password", "db_schema", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        # YAML turns unquoted numeric passwords into ints
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("url")
    @classmethod
    def check_scheme(cls, v: str) -> str:
        scheme = urlparse(v).scheme.split("+", 1)[0].lower()
        if scheme not in SupportedDatabases.SCHEMES:
            raise ValueError(
                f"Unsupported database URL scheme '{scheme}'. "
                f"Supported schemes are: {', '.join(sorted(SupportedDatabases.SCHEMES))}"
            )
        return v

    @property
    def engine(self) -> str:
        scheme = urlparse(self.url).scheme.split("+", 1)[0].lower()
        return SupportedDatabases.SCHEMES[scheme]

    def to_django_databases(self) -> Dict[str, Dict[str, Any]]:
        """Build a Django ``DATABASES`` setting with a single ``default`` alias."""
        parsed = urlparse(self.url)

        if self.engine == SupportedDatabases.SQLITE:
            # sqlite:///relative.db and sqlite:////absolute/path.db
            path = unquote(parsed.path)
            if path.startswith("/"):
                path = path[1:]
            return {"default": {"ENGINE": self.engine, "NAME": path}}

        settings: Dict[str, Any] = {
            "ENGINE": self.engine,
            "NAME": unquote(parsed.path.lstrip("/")),
            "USER": self.user or (unquote(parsed.username) if parsed.username else None),
            "PASSWORD": self.password or (unquote(parsed.password) if parsed.password else None),
            "HOST": parsed.hostname or "localhost",
            "PORT": parsed.port,
            "OPTIONS": {},
        }
        if self.db_schema:
            settings["OPTIONS"]["options"] = f"-c search_path={self.db_schema}"
        return {"default": {k: v for k, v in settings.items() if v is not None}}


def load_connection(path: str) -> ConnectionSettings:
    """
    Load the connection document.

    Keys missing from the file fall back to environment variables with the
    same name (``DB_URL``, ``DB_USER``, ``DB_PASSWORD``, ``DB_SCHEMA``).

    Raises:
        ConfigurationError: The file is missing, unreadable, or has no usable URL
    """
    env_file = Path(path)
    raw = _read_yaml_mapping(env_file, "DB properties file")

    for key in EnvKeys.ALL:
        if raw.get(key) in (None, "") and os.getenv(key):
            raw[key] = os.getenv(key)
            logger.debug(f"Using {key} from environment")

    try:
        return ConnectionSettings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            "Failed to load DB properties file",
            config_file=str(env_file),
            context={"errors": "; ".join(_format_validation_error(e))},
        ) from e


# --- Generator settings ---


class GeneratorSettings(BaseModel):
    """Settings of a generation run."""

    package_name: str = Field(..., min_length=1, description="Package of the generated records.")
    output_dir: str = Field(
        DefaultConfig.OUTPUT_DIR, min_length=1, description="Root directory for generated sources."
    )
    env_path: str = Field(DefaultConfig.ENV_PATH, description="Connection document.")
    mappings_path: Optional[str] = Field(default=None, description="Optional mappings document.")
    templates_path: Optional[str] = Field(
        default=None, description="Directory overriding the built-in templates."
    )
    use_offset_date_time: bool = Field(
        DefaultConfig.USE_OFFSET_DATE_TIME,
        description="Use OffsetDateTime instead of Instant for timezone-aware columns.",
    )
    file_extension: str = Field(DefaultConfig.FILE_EXTENSION, min_length=1)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("package_name")
    @classmethod
    def check_package_name(cls, v: str) -> str:
        """Every dot-separated segment must be an identifier."""
        for segment in v.split("."):
            if not segment.isidentifier() or keyword.iskeyword(segment):
                raise ValueError(f"'{v}' is not a valid package name (bad segment '{segment}')")
        return v

    @field_validator("file_extension")
    @classmethod
    def strip_dot(cls, v: str) -> str:
        return v.lstrip(".")

    @property
    def timestamp_tz_label(self) -> str:
        return "OffsetDateTime" if self.use_offset_date_time else "Instant"


def load_settings(cli_args: argparse.Namespace) -> GeneratorSettings:
    """
    Build generator settings from CLI arguments (only those explicitly provided).

    Raises:
        ConfigurationError: If validation fails
    """
    raw_config: Dict[str, Any] = {}
    for key, value in vars(cli_args).items():
        if value is not None and key in GeneratorSettings.model_fields:
            raw_config[key] = value

    try:
        settings = GeneratorSettings.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid generator settings",
            context={"errors": "; ".join(_format_validation_error(e))},
        ) from e

    logger.debug(f"Effective settings: {settings}")
    return settings
