"""
Test utility functions and assertions.

This module provides helper functions for common testing patterns:
- Response assertions (status codes, error codes, pagination)
- Database query helpers
"""

from typing import Optional, Type

from httpx import Response
from sqlalchemy import func, select
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession


# =============================================================================
# Response assertion helpers
# =============================================================================


def assert_status_code(response: Response, expected: int):
    """
    Assert that the response has the expected status code.

    Args:
        response: The HTTP response
        expected: Expected status code

    Raises:
        AssertionError: If status code doesn't match
    """
    assert response.status_code == expected, (
        f"Expected status code {expected}, got {response.status_code}. "
        f"Response body: {response.text}"
    )


def assert_error_code(response: Response, code: str):
    """
    Assert that the response contains a specific error code.

    Args:
        response: The HTTP response
        code: Expected error code

    Raises:
        AssertionError: If error code doesn't match
    """
    data = response.json()
    assert "error" in data, "Response does not contain 'error' field"
    assert data["error"].get("code") == code, (
        f"Expected error code '{code}', got '{data['error'].get('code')}'"
    )


def assert_pagination_structure(
    response: Response, expected_total: Optional[int] = None
):
    """
    Assert that the response has the paginated `{records, meta}` structure.

    Args:
        response: The HTTP response
        expected_total: Optional expected total count

    Raises:
        AssertionError: If pagination structure is invalid
    """
    assert_status_code(response, 200)
    data = response.json()

    assert "records" in data, "Response missing 'records' field"
    assert "meta" in data, "Response missing 'meta' field"
    assert isinstance(data["records"], list), "'records' should be a list"

    meta = data["meta"]
    for key in ("totalCount", "page", "limit", "lastPage", "orderBy", "filter"):
        assert key in meta, f"Meta missing '{key}' field"
    assert isinstance(meta["orderBy"], list), "'orderBy' should be a list"
    assert isinstance(meta["filter"], dict), "'filter' should be an object"

    if expected_total is not None:
        assert meta["totalCount"] == expected_total, (
            f"Expected totalCount={expected_total}, got {meta['totalCount']}"
        )


def record_names(response: Response, field: str = "name") -> list:
    """Values of `field` across the returned records, in response order."""
    return [record[field] for record in response.json()["records"]]


# =============================================================================
# Database query helpers
# =============================================================================


async def count_records(session: AsyncSession, model_class: Type[SQLModel]) -> int:
    """
    Count the number of records for a given model.

    Args:
        session: Database session
        model_class: SQLModel class to count

    Returns:
        Number of records
    """
    result = await session.execute(select(func.count()).select_from(model_class))
    return result.scalar_one()
