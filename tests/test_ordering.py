"""
Tests for the order clause builder.
"""

from pagequery.query.columns import ColumnWhitelist
from pagequery.query.operators import OrderDirection
from pagequery.query.ordering import OrderItem, build_order_by

SORTABLE = ColumnWhitelist.of(filterable=["password"], sortable=["age", "name", "created_at"])


class TestBuildOrderBy:
    def test_keeps_caller_order(self):
        """Test `orderBy=age:desc&orderBy=name:asc` keeps both in order."""
        order_by, accepted = build_order_by(["age:desc", "name:asc"], SORTABLE)

        assert order_by == [
            OrderItem(column="age", direction=OrderDirection.DESC),
            OrderItem(column="name", direction=OrderDirection.ASC),
        ]
        assert accepted == ["age:desc", "name:asc"]

    def test_direction_case_insensitive_and_lowercased(self):
        order_by, accepted = build_order_by(["name:DESC"], SORTABLE)

        assert order_by == [OrderItem(column="name", direction=OrderDirection.DESC)]
        assert order_by[0].to_dict() == {"name": "desc"}
        assert accepted == ["name:DESC"]

    def test_invalid_tokens_dropped_without_affecting_others(self):
        order_by, accepted = build_order_by(
            ["password:asc", "age:sideways", "name", "created_at:asc", "age:desc"],
            SORTABLE,
        )

        assert [item.column for item in order_by] == ["created_at", "age"]
        assert accepted == ["created_at:asc", "age:desc"]

    def test_column_match_is_case_sensitive(self):
        order_by, accepted = build_order_by(["Age:asc"], SORTABLE)

        assert order_by == []
        assert accepted == []

    def test_empty(self):
        assert build_order_by([], SORTABLE) == ([], [])
