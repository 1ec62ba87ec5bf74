import re
from typing import Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

RawQueryValue = Union[str, Sequence[str]]
RawQueryMap = Mapping[str, RawQueryValue]

FILTER_PREFIX = "filter."
ORDER_BY_KEY = "orderBy"
PAGE_KEY = "page"
LIMIT_KEY = "limit"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
# CPython's default cap on int() conversion of decimal strings
MAX_INT_DIGITS = 4300


class PaginateParams(BaseModel):
    """Pagination request extracted from a raw query map.

    `filter_tokens` and `order_tokens` are unvalidated; the clause builders
    decide what survives.
    """

    model_config = ConfigDict(frozen=True)

    skip: int
    take: int
    page: int
    limit: int
    filter_tokens: tuple[tuple[str, tuple[str, ...]], ...] = ()
    order_tokens: tuple[str, ...] = ()


def parse_int(value: object) -> Optional[int]:
    """Parse the leading integer of a query value, the way parseInt does.

    Repeated keys use their first value. Returns None when there are no
    leading digits or too many of them to convert.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    if not match or len(match.group(1).lstrip("+-")) > MAX_INT_DIGITS:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # interpreter configured with a lower digit limit
        return None


def _is_string_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def extract_filter_tokens(
    query: RawQueryMap,
) -> tuple[tuple[str, tuple[str, ...]], ...]:
    tokens = []
    for key, value in query.items():
        if not key.startswith(FILTER_PREFIX):
            continue
        column = key[len(FILTER_PREFIX):]
        if isinstance(value, str):
            tokens.append((column, (value,)))
        elif _is_string_sequence(value):
            tokens.append((column, tuple(value)))
    return tuple(tokens)


def extract_order_tokens(query: RawQueryMap) -> tuple[str, ...]:
    value = query.get(ORDER_BY_KEY)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(v for v in value if isinstance(v, str))
    return ()


def extract_paginate_params(query: RawQueryMap, default_page_size: int) -> PaginateParams:
    """Build a PaginateParams from untrusted query parameters.

    Unparseable `limit` falls back to `default_page_size` and unparseable
    `page` to 1. No bounds are enforced here, so `page=0` gives a negative
    skip.
    """
    limit = parse_int(query.get(LIMIT_KEY))
    take = limit if limit is not None else default_page_size
    page = parse_int(query.get(PAGE_KEY))
    if page is None:
        page = 1

    return PaginateParams(
        skip=(page - 1) * take,
        take=take,
        page=page,
        limit=take,
        filter_tokens=extract_filter_tokens(query),
        order_tokens=extract_order_tokens(query),
    )
