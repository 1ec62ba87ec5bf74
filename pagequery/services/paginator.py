import logging
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from sqlmodel.ext.asyncio.session import AsyncSession

from pagequery.query.columns import ColumnWhitelist
from pagequery.query.filters import build_where
from pagequery.query.ordering import build_order_by
from pagequery.query.params import PaginateParams
from pagequery.schemas.common import PageMeta
from pagequery.services.executor import QueryExecutor

logger = logging.getLogger(__name__)


class PageResult(BaseModel):
    """One page of records plus the tokens that shaped it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    records: List[Any]
    total_count: int
    page: int
    limit: int
    last_page: int
    accepted_filters: dict[str, List[str]] = {}
    accepted_orders: List[str] = []

    @property
    def meta(self) -> PageMeta:
        return PageMeta(
            total_count=self.total_count,
            page=self.page,
            limit=self.limit,
            last_page=self.last_page,
            order_by=self.accepted_orders,
            filter=self.accepted_filters,
        )


def compute_last_page(total_count: int, take: int) -> int:
    """ceil(total_count / take) using the requested take; 0 when take is 0."""
    if take == 0:
        return 0
    return -(-total_count // take)


def assemble_page(
    records: Sequence[Any],
    total_count: int,
    params: PaginateParams,
    accepted_filters: dict[str, List[str]],
    accepted_orders: List[str],
) -> PageResult:
    return PageResult(
        records=list(records),
        total_count=total_count,
        page=params.page,
        limit=params.limit,
        last_page=compute_last_page(total_count, params.take),
        accepted_filters=accepted_filters,
        accepted_orders=accepted_orders,
    )


class PaginationService:
    """Filtered, sorted, paginated reads of one collection.

    Only columns in `whitelist` ever reach the query, whatever the request asks for.
    """

    def __init__(
        self,
        collection: str,
        whitelist: ColumnWhitelist,
        executor: Optional[QueryExecutor] = None,
    ):
        self.collection = collection
        self.whitelist = whitelist
        self.executor = executor or QueryExecutor.from_settings()

    async def paginate(self, session: AsyncSession, params: PaginateParams) -> PageResult:
        """Run a pagination request.

        Args:
            session: Database session
            params: Extracted pagination request

        Returns:
            PageResult with records, counts and accepted tokens

        Raises:
            MalformedQueryException: If the store rejects the whitelisted query
        """
        where, accepted_filters = build_where(params.filter_tokens, self.whitelist)
        order_by, accepted_orders = build_order_by(params.order_tokens, self.whitelist)

        total, records = await self.executor.count_and_fetch(
            session,
            self.collection,
            where,
            order_by,
            skip=params.skip,
            take=params.take,
        )
        logger.debug(
            f"Paginated {self.collection}: page={params.page} take={params.take} "
            f"total={total} filters={accepted_filters} orders={accepted_orders}"
        )

        return assemble_page(records, total, params, accepted_filters, accepted_orders)
