"""Storage collaborator contract.

A row-oriented remote collection. Records travel as plain dicts keyed by
column name; every implementation raises StorageFailure on rejection.
"""

from __future__ import annotations

from typing import Any, Protocol

Row = dict[str, Any]

ATHLETES = "athletes"
WEEKLY_DATA = "weekly_data"
USERS = "users"


class Storage(Protocol):
    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        """Return rows matching every equality filter.

        Args:
            collection: Collection (table) name
            filters: Column -> value equality filters
            order: Ordering as "column.asc" or "column.desc"
        """
        ...

    def insert(self, collection: str, record: Row) -> Row:
        """Insert one row and return it as stored (with its id)."""
        ...

    def patch(self, collection: str, record_id: Any, fields: Row) -> Row:
        """Update the given columns of one row and return the updated row."""
        ...

    def delete(self, collection: str, record_id: Any) -> None:
        """Remove one row."""
        ...
