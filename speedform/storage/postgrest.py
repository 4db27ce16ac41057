"""PostgREST client for the hosted data store.

Talks to `{SUPABASE_URL}/rest/v1/{collection}` with the project API key.
One blocking round-trip per call; no retries, no pagination.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from speedform.config.settings import settings
from speedform.storage.base import Row
from speedform.storage.errors import StorageFailure


def _filter_value(value: Any) -> str:
    """Render an equality filter in PostgREST operator syntax."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestStorage:
    """Thin PostgREST client implementing the Storage contract.

    - Equality filters only
    - Returns representations for every write
    - httpx errors surface as StorageFailure
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Project URL (without the /rest/v1 suffix)
            api_key: Project API key, sent as apikey and bearer token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not base_url:
            raise ValueError("base_url is required for the REST data store")
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> PostgrestStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(
        self,
        operation: str,
        method: str,
        collection: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            resp = self._client.request(method, f"/{collection}", params=params, json=json)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{operation} on {collection} rejected: {e.response.status_code} {e.response.text}")
            raise StorageFailure(operation, collection, e.response.text, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"{operation} on {collection} failed: {e}")
            raise StorageFailure(operation, collection, str(e)) from e

        if not resp.content:
            return None
        return resp.json()

    @staticmethod
    def _single(operation: str, collection: str, payload: Any) -> Row:
        if isinstance(payload, list):
            if not payload:
                raise StorageFailure(operation, collection, "no row returned")
            return payload[0]
        if isinstance(payload, dict):
            return payload
        raise StorageFailure(operation, collection, "no row returned")

    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
    ) -> list[Row]:
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = _filter_value(value)
        if order:
            params["order"] = order
        payload = self._send("query", "GET", collection, params=params)
        return list(payload or [])

    def insert(self, collection: str, record: Row) -> Row:
        payload = self._send("insert", "POST", collection, json=record)
        return self._single("insert", collection, payload)

    def patch(self, collection: str, record_id: Any, fields: Row) -> Row:
        payload = self._send(
            "patch",
            "PATCH",
            collection,
            params={"id": _filter_value(record_id)},
            json=fields,
        )
        return self._single("patch", collection, payload)

    def delete(self, collection: str, record_id: Any) -> None:
        self._send("delete", "DELETE", collection, params={"id": _filter_value(record_id)})


def get_storage() -> PostgrestStorage:
    """Get a PostgREST client configured from settings."""
    return PostgrestStorage(
        settings.supabase_url,
        settings.supabase_key,
        timeout=settings.supabase_timeout_seconds,
    )
