import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Type

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    and_,
    func,
    select,
)
from sqlalchemy.exc import (
    ArgumentError,
    CompileError,
    DataError,
    DBAPIError,
    ProgrammingError,
    StatementError,
)
from sqlalchemy.sql import ColumnElement, Select
from sqlalchemy.types import TypeDecorator, TypeEngine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.collections import get_collection
from pagequery.config import settings
from pagequery.exceptions import MalformedQueryException
from pagequery.query.filters import Condition, WhereDescriptor
from pagequery.query.operators import (
    LIST_OPERATORS,
    NULLABLE_OPERATORS,
    FilterOperator,
    OrderDirection,
)
from pagequery.query.ordering import OrderItem

logger = logging.getLogger(__name__)

STRING_OPERATORS = frozenset(
    {
        FilterOperator.CONTAINS,
        FilterOperator.SEARCH,
        FilterOperator.STARTS_WITH,
        FilterOperator.ENDS_WITH,
    }
)

# Widest integer any supported store binds (BIGINT, LIMIT, OFFSET)
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class InvalidQueryError(ValueError):
    """A whitelisted query the store cannot run (bad column, value shape or type)."""


def _check_int64(value: int, what: str) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidQueryError(f"{what} {value} is out of the 64-bit integer range")
    return value


def _sql_type(column: Column) -> TypeEngine:
    # sqlmodel wraps str columns in AutoString, a TypeDecorator over String
    col_type = column.type
    while isinstance(col_type, TypeDecorator):
        col_type = col_type.impl
    return col_type


def _coerce_datetime(col_type: DateTime, parsed: datetime) -> datetime:
    if col_type.timezone:
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed
    if parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _coerce_value(column: Column, value: Any) -> Any:
    """Check a parsed literal against the column type, converting ISO dates.

    Raises:
        InvalidQueryError: If the value cannot be compared with the column
    """
    if value is None:
        return None
    col_type = _sql_type(column)

    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(col_type, Boolean):
        if isinstance(value, bool):
            return value
    elif isinstance(col_type, Integer):
        if is_number and not isinstance(value, float):
            return _check_int64(value, f"value for column {column.name!r}")
    elif isinstance(col_type, Numeric):
        if is_number:
            return Decimal(str(value)) if col_type.asdecimal else value
    elif isinstance(col_type, String):
        if isinstance(value, str):
            return value
    elif isinstance(col_type, DateTime):
        if isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value)
            except ValueError:
                pass
            else:
                return _coerce_datetime(col_type, parsed)
    elif isinstance(col_type, Date):
        if isinstance(value, str):
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
    else:
        return value

    raise InvalidQueryError(
        f"{type(value).__name__} value is not comparable with column {column.name!r}"
    )


def _search(column: Column, value: str, dialect_name: str) -> ColumnElement:
    # Full-text match where the dialect has one, plain substring match elsewhere
    if dialect_name == "postgresql":
        return column.match(value)
    return column.icontains(value, autoescape=True)


def build_condition(
    column: Column, condition: Condition, dialect_name: str = "default"
) -> ColumnElement:
    """Translate one `{operator: value}` pair into a SQL expression.

    Raises:
        InvalidQueryError: If the value shape does not fit the operator
    """
    op, value = condition.operator, condition.value

    if op in LIST_OPERATORS:
        if not isinstance(value, list):
            raise InvalidQueryError(f"{op.value} expects an array")
        if any(v is None for v in value):
            raise InvalidQueryError(f"{op.value} does not accept null elements")
        values = [_coerce_value(column, v) for v in value]
        if op is FilterOperator.IN:
            return column.in_(values)
        return column.not_in(values)

    if isinstance(value, (list, dict)):
        raise InvalidQueryError(f"{op.value} expects a scalar value")
    if value is None and op not in NULLABLE_OPERATORS:
        raise InvalidQueryError(f"{op.value} does not accept null")
    if op in STRING_OPERATORS and not isinstance(value, str):
        raise InvalidQueryError(f"{op.value} expects a string")

    value = _coerce_value(column, value)

    if op is FilterOperator.EQUALS:
        return column.is_(None) if value is None else column == value
    if op is FilterOperator.NOT:
        return column.is_not(None) if value is None else column != value
    if op is FilterOperator.LT:
        return column < value
    if op is FilterOperator.LTE:
        return column <= value
    if op is FilterOperator.GT:
        return column > value
    if op is FilterOperator.GTE:
        return column >= value
    if op is FilterOperator.CONTAINS:
        return column.contains(value, autoescape=True)
    if op is FilterOperator.STARTS_WITH:
        return column.startswith(value, autoescape=True)
    if op is FilterOperator.ENDS_WITH:
        return column.endswith(value, autoescape=True)
    if op is FilterOperator.SEARCH:
        return _search(column, value, dialect_name)
    raise InvalidQueryError(f"Unsupported operator {op.value}")


def _table_column(model: Type[SQLModel], name: str) -> Column:
    column = model.__table__.columns.get(name)
    if column is None:
        raise InvalidQueryError(f"{model.__name__} has no column {name!r}")
    return column


def build_where_criteria(
    model: Type[SQLModel], where: WhereDescriptor, dialect_name: str = "default"
) -> List[ColumnElement]:
    """Translate a where descriptor into a list of criteria to AND together.

    Columns whose clause has no conditions contribute nothing.
    """
    criteria = []
    for clause in where.clauses:
        if not clause.conditions:
            continue
        column = _table_column(model, clause.column)
        criteria.append(
            and_(*(build_condition(column, c, dialect_name) for c in clause.conditions))
        )
    return criteria


def build_order_criteria(
    model: Type[SQLModel], order_by: Sequence[OrderItem]
) -> List[ColumnElement]:
    criteria = []
    for item in order_by:
        column = _table_column(model, item.column)
        criteria.append(column.desc() if item.direction is OrderDirection.DESC else column.asc())
    return criteria


class QueryExecutor:
    """Runs the count and the page fetch of one collection in a single transaction."""

    def __init__(self, isolation_level: Optional[str] = None):
        self.isolation_level = isolation_level

    @classmethod
    def from_settings(cls) -> "QueryExecutor":
        return cls(isolation_level=settings.SNAPSHOT_ISOLATION_LEVEL)

    def build_statements(
        self,
        model: Type[SQLModel],
        where: WhereDescriptor,
        order_by: Sequence[OrderItem],
        skip: int,
        take: int,
        dialect_name: str = "default",
    ) -> tuple[Select, Select]:
        """Build the (count, fetch) statement pair.

        Raises:
            InvalidQueryError: If the descriptors do not fit the model
        """
        if skip < 0:
            raise InvalidQueryError(f"negative offset {skip}")
        if take < 0:
            raise InvalidQueryError(f"negative limit {take}")
        _check_int64(skip, "offset")
        _check_int64(take, "limit")

        criteria = build_where_criteria(model, where, dialect_name)
        count_query = select(func.count()).select_from(model).where(*criteria)
        fetch_query = (
            select(model)
            .where(*criteria)
            .order_by(*build_order_criteria(model, order_by))
            .offset(skip)
            .limit(take)
        )
        return count_query, fetch_query

    async def count_and_fetch(
        self,
        session: AsyncSession,
        collection: str,
        where: WhereDescriptor,
        order_by: Sequence[OrderItem],
        skip: int,
        take: int,
    ) -> tuple[int, List[SQLModel]]:
        """Count matching rows and fetch one ordered page under one snapshot.

        Args:
            session: Database session
            collection: Registered collection name
            where: Validated where descriptor
            order_by: Validated order descriptor
            skip: Number of records to skip
            take: Number of records to return

        Returns:
            Tuple of (total count, records)

        Raises:
            MalformedQueryException: If the store rejects the query or its values
            UnknownCollectionError: If `collection` is not registered
        """
        model = get_collection(collection)
        dialect_name = session.get_bind().dialect.name
        try:
            count_query, fetch_query = self.build_statements(
                model, where, order_by, skip, take, dialect_name
            )
        except (InvalidQueryError, ArgumentError, CompileError) as e:
            raise self._malformed(collection, e) from None

        if session.in_transaction():
            return await self._execute(session, collection, count_query, fetch_query)
        async with session.begin():
            # Unsupported levels are a configuration fault and propagate as is
            if self.isolation_level:
                await session.connection(
                    execution_options={"isolation_level": self.isolation_level}
                )
            return await self._execute(session, collection, count_query, fetch_query)

    @staticmethod
    def _malformed(collection: str, error: Exception) -> MalformedQueryException:
        logger.warning(f"Malformed query on {collection!r}: {error}")
        return MalformedQueryException()

    async def _execute(
        self,
        session: AsyncSession,
        collection: str,
        count_query: Select,
        fetch_query: Select,
    ) -> tuple[int, List[SQLModel]]:
        try:
            total_result = await session.execute(count_query)
            total = total_result.scalar_one()

            result = await session.execute(fetch_query)
            records = list(result.scalars().all())
        except (DataError, ProgrammingError, OverflowError) as e:
            raise self._malformed(collection, e) from None
        except DBAPIError:
            raise
        except (StatementError, ArgumentError, CompileError) as e:
            raise self._malformed(collection, e) from None
        return total, records
