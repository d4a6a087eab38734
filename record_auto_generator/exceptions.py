"""
Custom exception hierarchy for the record generator.

Every fatal condition of a generation run is reported through one of these
exceptions. They carry context about where the failure happened and a few
recovery suggestions, so the CLI can print something actionable.
"""

from typing import Dict, Any, Optional, List


class RecordGeneratorError(Exception):
    """
    Base exception for all record generator errors.

    Provides rich context and error recovery guidance.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        self.error_code = error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [self.message]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.__cause__ is not None:
            lines.append(f"Caused by: {type(self.__cause__).__name__}: {self.__cause__}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


class ConfigurationError(RecordGeneratorError):
    """Raised when a configuration document is missing, unreadable or invalid."""

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = kwargs.get('context', {})
        if config_file:
            context['config_file'] = config_file

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check that the file exists and is readable",
                "Check the YAML syntax of the document",
                "Verify all required keys are present",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code=kwargs.get('error_code', "CONFIG_ERROR")
        )


class PatternCompilationError(ConfigurationError):
    """Raised when an include/exclude table pattern is not a valid regular expression."""

    def __init__(self, message: str, pattern: str = None, **kwargs):
        context = kwargs.pop('context', {})
        if pattern is not None:
            context['pattern'] = pattern

        suggestions = kwargs.pop('suggestions', [])
        if not suggestions:
            suggestions = [
                "Patterns are Python regular expressions matched against the whole table name",
                "Escape literal metacharacters such as '.', '(' or '['",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="PATTERN_ERROR",
            **kwargs
        )


class MetadataAccessError(RecordGeneratorError):
    """Raised when the database cannot be reached or a table's metadata cannot be read."""

    def __init__(self, message: str, table: str = None, database_url: str = None, **kwargs):
        context = kwargs.get('context', {})
        if table:
            context['table'] = table
        if database_url:
            context['database_url'] = self._mask_credentials(database_url)

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check database server is running",
                "Verify connection credentials and schema name",
                "Check database user permissions on the schema",
                "Ensure the database driver is installed",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="METADATA_ERROR"
        )

    @staticmethod
    def _mask_credentials(url: str) -> str:
        """Mask sensitive credentials in database URL."""
        import re
        return re.sub(r'://([^:/@]+):([^@]+)@', r'://\1:***@', url)


class RenderError(RecordGeneratorError):
    """Raised when the record template cannot be loaded, compiled or applied."""

    def __init__(self, message: str, template: str = None, table: str = None, **kwargs):
        context = kwargs.get('context', {})
        if template:
            context['template'] = template
        if table:
            context['table'] = table

        suggestions = kwargs.get('suggestions', [])
        if not suggestions:
            suggestions = [
                "Check the template syntax (Jinja2)",
                "Verify the template only uses the documented context keys",
                "Try the built-in template by omitting --templates",
            ]

        super().__init__(
            message,
            context=context,
            suggestions=suggestions,
            error_code="RENDER_ERROR"
        )


class UnsupportedTypeWarning(UserWarning):
    """A column type with no mapping; the field falls back to Object."""

    def __init__(self, sql_type: int, type_name: str):
        self.sql_type = sql_type
        self.type_name = type_name
        super().__init__(
            f"Unsupported SQL type: {sql_type} (name: {type_name}), falling back to Object"
        )
