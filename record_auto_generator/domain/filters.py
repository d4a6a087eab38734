"""
Table include/exclude filtering.

Patterns are compiled once, when the mappings document is loaded, so a
malformed expression stops the run before any table is touched.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple

from ..exceptions import PatternCompilationError


# An include list containing this pattern means "no include filtering"
MATCH_EVERYTHING = ".*"


def compile_patterns(patterns: Optional[Iterable[str]], section: str) -> Tuple[Pattern, ...]:
    """
    Compile every non-blank pattern, preserving order.

    Raises:
        PatternCompilationError: If a pattern is not a valid regular expression
    """
    compiled = []
    for pattern in patterns or ():
        if pattern is None or not pattern.strip():
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise PatternCompilationError(
                f"Invalid {section} pattern '{pattern}': {e}",
                pattern=pattern,
                context={"section": section},
            ) from e
    return tuple(compiled)


@dataclass(frozen=True)
class FilterSet:
    """
    Decides whether a table takes part in generation.

    Matching is anchored to the whole table name (``re.fullmatch``), so the
    include pattern ``usr`` does not select ``usr_orders``.
    """

    include: Tuple[Pattern, ...] = ()
    exclude: Tuple[Pattern, ...] = ()

    @classmethod
    def from_patterns(
        cls,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
    ) -> "FilterSet":
        include = list(include or [])
        if not include or MATCH_EVERYTHING in include:
            include_patterns: Tuple[Pattern, ...] = ()
        else:
            include_patterns = compile_patterns(include, "include")
        return cls(include=include_patterns, exclude=compile_patterns(exclude, "exclude"))

    def is_included(self, table_name: str) -> bool:
        if not self.include:
            return True
        return any(p.fullmatch(table_name) for p in self.include)

    def is_excluded(self, table_name: str) -> bool:
        if not self.exclude:
            return False
        return any(p.fullmatch(table_name) for p in self.exclude)

    def should_process(self, table_name: str) -> bool:
        """Exclude wins over include when both match."""
        return self.is_included(table_name) and not self.is_excluded(table_name)
