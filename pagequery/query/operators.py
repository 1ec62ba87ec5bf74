from enum import Enum
from typing import Optional


class FilterOperator(str, Enum):
    """Filter operators accepted in `filter.<column>=<operator>:<value>` tokens."""

    EQUALS = "equals"
    NOT = "not"
    IN = "in"
    NOT_IN = "notIn"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    CONTAINS = "contains"
    SEARCH = "search"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @classmethod
    def lookup(cls, name: str) -> Optional["FilterOperator"]:
        """Case-insensitive lookup, returns None for unknown operators."""
        return _FILTER_OPERATORS_BY_NAME.get(name.lower())


class OrderDirection(str, Enum):
    """Sort directions accepted in `orderBy=<column>:<direction>` tokens."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def lookup(cls, name: str) -> Optional["OrderDirection"]:
        """Case-insensitive lookup, returns None for unknown directions."""
        return _ORDER_DIRECTIONS_BY_NAME.get(name.lower())


_FILTER_OPERATORS_BY_NAME = {op.value.lower(): op for op in FilterOperator}
_ORDER_DIRECTIONS_BY_NAME = {d.value: d for d in OrderDirection}

# Operators whose value must be a list of literals.
LIST_OPERATORS = frozenset({FilterOperator.IN, FilterOperator.NOT_IN})

# Operators that accept null (rendered as IS / IS NOT).
NULLABLE_OPERATORS = frozenset({FilterOperator.EQUALS, FilterOperator.NOT})
