import json
import logging
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from pagequery.query.columns import ColumnWhitelist
from pagequery.query.operators import FilterOperator

logger = logging.getLogger(__name__)


class Condition(BaseModel):
    """A single `{operator: value}` constraint."""

    model_config = ConfigDict(frozen=True)

    operator: FilterOperator
    value: Any = None


class ColumnClause(BaseModel):
    """AND of conditions on one column. An empty clause matches everything."""

    model_config = ConfigDict(frozen=True)

    column: str
    conditions: tuple[Condition, ...] = ()

    def to_dict(self) -> dict:
        return {
            "AND": [
                {self.column: {c.operator.value: c.value}} for c in self.conditions
            ]
        }


class WhereDescriptor(BaseModel):
    """AND of per-column clauses."""

    model_config = ConfigDict(frozen=True)

    clauses: tuple[ColumnClause, ...] = ()

    def to_dict(self) -> dict:
        return {"AND": [clause.to_dict() for clause in self.clauses]}


def parse_literal(text: str) -> Any:
    """Parse a JSON literal (number, boolean, null, array, object), else return the text."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return text


def split_token(token: str) -> tuple[str, str]:
    head, _, tail = token.partition(":")
    return head, tail


def build_column_clause(column: str, tokens: Sequence[str]) -> tuple[ColumnClause, list[str]]:
    """Build the clause for one whitelisted column.

    Returns the clause and the raw tokens that were accepted.
    """
    conditions = []
    accepted = []
    for token in tokens:
        op_name, value_text = split_token(token)
        operator = FilterOperator.lookup(op_name)
        if operator is None:
            logger.debug(f"Dropping filter token on {column!r}: unknown operator {op_name!r}")
            continue
        conditions.append(Condition(operator=operator, value=parse_literal(value_text)))
        accepted.append(token)
    return ColumnClause(column=column, conditions=tuple(conditions)), accepted


def build_where(
    filter_tokens: Iterable[tuple[str, Sequence[str]]],
    whitelist: ColumnWhitelist,
) -> tuple[WhereDescriptor, dict[str, list[str]]]:
    """Validate raw filter tokens against the whitelist's filterable columns.

    Columns the whitelist does not let callers filter on get neither a clause
    nor a metadata entry.
    Whitelisted columns always get a clause, even when every token was dropped.

    Returns:
        Tuple of (where descriptor, accepted raw tokens by column)
    """
    clauses = []
    accepted_filters: dict[str, list[str]] = {}

    for column, tokens in filter_tokens:
        if not whitelist.can_filter(column):
            logger.debug(f"Dropping filter on non-filterable column {column!r}")
            continue
        clause, accepted = build_column_clause(column, tokens)
        clauses.append(clause)
        if accepted:
            accepted_filters.setdefault(column, []).extend(accepted)

    return WhereDescriptor(clauses=tuple(clauses)), accepted_filters
