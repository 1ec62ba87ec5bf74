"""Sanitization of untrusted filter, sort and pagination query parameters."""

from pagequery.query.columns import ColumnWhitelist
from pagequery.query.filters import (
    ColumnClause,
    Condition,
    WhereDescriptor,
    build_where,
    parse_literal,
)
from pagequery.query.operators import FilterOperator, OrderDirection
from pagequery.query.ordering import OrderItem, build_order_by
from pagequery.query.params import PaginateParams, RawQueryMap, extract_paginate_params

__all__ = [
    "ColumnWhitelist",
    "ColumnClause",
    "Condition",
    "WhereDescriptor",
    "build_where",
    "parse_literal",
    "FilterOperator",
    "OrderDirection",
    "OrderItem",
    "build_order_by",
    "PaginateParams",
    "RawQueryMap",
    "extract_paginate_params",
]
