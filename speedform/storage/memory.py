"""In-memory implementation of the Storage contract.

Rows are kept per collection with auto-incremented integer ids. Returned rows
are copies, so callers never alias stored state.
"""

from __future__ import annotations

import copy
from typing import Any

from speedform.storage.base import Row
from speedform.storage.errors import StorageFailure


class InMemoryStorage:
    def __init__(self, seed: dict[str, list[Row]] | None = None) -> None:
        self._rows: dict[str, dict[Any, Row]] = {}
        self._next_id = 1
        for collection, rows in (seed or {}).items():
            for row in rows:
                self.insert(collection, row)

    def _table(self, collection: str) -> dict[Any, Row]:
        return self._rows.setdefault(collection, {})

    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        rows = [
            row
            for row in self._table(collection).values()
            if all(row.get(column) == value for column, value in (filters or {}).items())
        ]
        if order:
            column, _, direction = order.partition(".")
            # Nulls sort last, as PostgREST does for ascending order.
            rows.sort(
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0),
                reverse=direction == "desc",
            )
        return copy.deepcopy(rows)

    def insert(self, collection: str, record: Row) -> Row:
        row = copy.deepcopy(record)
        if row.get("id") is None:
            row["id"] = self._next_id
        if isinstance(row["id"], int):
            self._next_id = max(self._next_id, row["id"] + 1)
        table = self._table(collection)
        if row["id"] in table:
            raise StorageFailure("insert", collection, f"duplicate id {row['id']}", status_code=409)
        table[row["id"]] = row
        return copy.deepcopy(row)

    def patch(self, collection: str, record_id: Any, fields: Row) -> Row:
        table = self._table(collection)
        if record_id not in table:
            raise StorageFailure("patch", collection, "no row returned")
        table[record_id].update(copy.deepcopy(fields))
        return copy.deepcopy(table[record_id])

    def delete(self, collection: str, record_id: Any) -> None:
        self._table(collection).pop(record_id, None)
