from typing import Union

from fastapi import Request
from starlette.datastructures import QueryParams

from pagequery.config import settings
from pagequery.query.params import PaginateParams, extract_paginate_params


def to_raw_query_map(query_params: QueryParams) -> dict[str, Union[str, list[str]]]:
    """Collapse query params into a map: single keys to str, repeated keys to list."""
    raw: dict[str, Union[str, list[str]]] = {}
    for key, value in query_params.multi_items():
        if key not in raw:
            raw[key] = value
        elif isinstance(raw[key], list):
            raw[key].append(value)
        else:
            raw[key] = [raw[key], value]
    return raw


async def get_paginate_params(request: Request) -> PaginateParams:
    """Pagination, `filter.<column>` and `orderBy` parameters of the current request."""
    return extract_paginate_params(
        to_raw_query_map(request.query_params), settings.DEFAULT_PAGE_SIZE
    )
