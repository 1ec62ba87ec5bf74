from typing import Iterable

from pydantic import BaseModel, ConfigDict


class ColumnWhitelist(BaseModel):
    """Columns a caller may filter or sort a collection by.

    Supplied explicitly per collection; never derived from the table schema.
    """

    model_config = ConfigDict(frozen=True)

    filterable: frozenset[str] = frozenset()
    sortable: frozenset[str] = frozenset()

    @classmethod
    def of(
        cls, filterable: Iterable[str] = (), sortable: Iterable[str] = ()
    ) -> "ColumnWhitelist":
        return cls(filterable=frozenset(filterable), sortable=frozenset(sortable))

    def can_filter(self, column: str) -> bool:
        return column in self.filterable

    def can_sort(self, column: str) -> bool:
        return column in self.sortable
