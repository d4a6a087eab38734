"""
Naming convention utilities for the record generator.

Database identifiers are snake_case; generated classes are PascalCase and
their fields camelCase. Both conversions share one case-folding pass.
"""

from typing import Optional


def _transform_case(name: Optional[str]) -> str:
    """
    Fold a snake_case identifier into PascalCase.

    Underscores are dropped and capitalize the character that follows them.
    Every other character is lowercased, so ``ORDER_ID`` and ``order_id``
    produce the same result.
    """
    if not name:
        return ""

    result = []
    next_upper = True
    for char in name:
        if char == "_":
            next_upper = True
        elif next_upper:
            result.append(char.upper())
            next_upper = False
        else:
            result.append(char.lower())
    return "".join(result)


def to_pascal_case(name: Optional[str]) -> str:
    """
    Convert snake_case to PascalCase (the first character is uppercase).

    Args:
        name: The string to convert; None is treated as empty

    Returns:
        The converted PascalCase string

    Example:
        >>> to_pascal_case("user_account")
        'UserAccount'
        >>> to_pascal_case("ORDER_ITEMS")
        'OrderItems'
    """
    return _transform_case(name)


def to_camel_case(name: Optional[str]) -> str:
    """
    Convert snake_case to camelCase (the first character is lowercase).

    Example:
        >>> to_camel_case("user_account")
        'userAccount'
    """
    pascal = _transform_case(name)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]

