"""HTTP client for the hosted document store.

The store speaks the PostgREST dialect: each table is a resource under
``/rest/v1/<table>``, rows are inserted with POST and updated with PATCH
filtered by ``column=eq.value`` query parameters.
"""

from __future__ import annotations

from typing import Any

import httpx

from fleet_finance.exceptions import DocumentStoreError
from fleet_finance.logging_config import get_logger

logger = get_logger(__name__)

REST_PREFIX = "/rest/v1"


class DocumentStoreClient:
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        headers = {"Prefer": "return=representation"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self._base_url = base_url.rstrip("/")
        if client is not None:
            client.headers.update(headers)
            self._client = client
        else:
            self._client = httpx.Client(
                base_url=self._base_url, headers=headers, timeout=timeout
            )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> DocumentStoreClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> list[dict[str, Any]]:
        path = f"{REST_PREFIX}/{table}"
        try:
            r = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error("document_store_unreachable", table=table, error=str(e))
            raise DocumentStoreError(
                f"Document store request failed: {e}", table=table
            ) from e

        if 200 <= r.status_code < 300:
            if r.status_code == 204 or not r.content:
                return []
            data = r.json()
            return data if isinstance(data, list) else [data]

        try:
            payload = r.json()
        except ValueError:
            detail = r.text
        else:
            if isinstance(payload, dict):
                detail = payload.get("message") or payload.get("error") or str(payload)
            else:
                detail = str(payload)

        logger.warning(
            "document_store_error",
            table=table,
            method=method,
            status_code=r.status_code,
            detail=detail,
        )
        raise DocumentStoreError(
            f"Document store rejected {method} {table}: {detail}",
            table=table,
            store_status=r.status_code,
        )

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert rows and return them as stored (with generated ids)."""
        created = self._request("POST", table, json=rows)
        logger.debug("document_store_insert", table=table, rows=len(rows))
        return created

    def update(
        self, table: str, match: dict[str, str], values: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Update the rows whose columns equal every value in ``match``."""
        params = {column: f"eq.{value}" for column, value in match.items()}
        return self._request("PATCH", table, params=params, json=values)

    def delete(self, table: str, match: dict[str, str]) -> list[dict[str, Any]]:
        """Delete the rows whose columns equal every value in ``match``."""
        params = {column: f"eq.{value}" for column, value in match.items()}
        deleted = self._request("DELETE", table, params=params)
        logger.debug("document_store_delete", table=table, rows=len(deleted))
        return deleted
