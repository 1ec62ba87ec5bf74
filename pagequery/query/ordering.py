import logging
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from pagequery.query.columns import ColumnWhitelist
from pagequery.query.filters import split_token
from pagequery.query.operators import OrderDirection

logger = logging.getLogger(__name__)


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    direction: OrderDirection

    def to_dict(self) -> dict:
        return {self.column: self.direction.value}


def build_order_by(
    order_tokens: Iterable[str],
    whitelist: ColumnWhitelist,
) -> tuple[list[OrderItem], list[str]]:
    """Validate raw `<column>:<direction>` tokens, keeping the caller's order.

    Returns:
        Tuple of (order descriptor, accepted raw tokens)
    """
    order_by: list[OrderItem] = []
    accepted: list[str] = []

    for token in order_tokens:
        column, direction_name = split_token(token)
        direction = OrderDirection.lookup(direction_name)
        if direction is None or not whitelist.can_sort(column):
            logger.debug(f"Dropping order token {token!r}")
            continue
        order_by.append(OrderItem(column=column, direction=direction))
        accepted.append(token)

    return order_by, accepted
