# src/projboard/store/postgrest.py

"""
RemoteStore implementation for a PostgREST endpoint (e.g. Supabase `/rest/v1`).

Each collection is a table at `<base_url>/rest/v1/<table>`:
- select-all: GET    ?select=*[&order=<col>.<asc|desc>]
- insert-one: POST   [row]           (Prefer: return=representation)
- update:     PATCH  ?id=eq.<id>
- delete:     DELETE ?id=eq.<id>

Transport errors and HTTP >= 400 become RemoteStoreError. No retries here:
recovery is user-initiated.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.ports import RemoteRow, RemoteStoreError

logger = logging.getLogger(__name__)


def _make_timeout(seconds: float) -> httpx.Timeout:
    connect_s = min(5.0, float(seconds))
    return httpx.Timeout(connect=connect_s, read=float(seconds), write=10.0, pool=connect_s)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "error_description", "error", "hint"):
            val = data.get(key)
            if val:
                return str(val)
    text = (resp.text or "").strip()
    return text[:200] if text else resp.reason_phrase or "request failed"


class PostgrestStore:
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url is required")

        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self._base_url = base_url.strip().rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/rest/v1",
            headers=headers,
            timeout=_make_timeout(timeout_seconds),
            transport=transport,
        )
        logger.info("PostgrestStore ready url=%s auth=%s", self._base_url, bool(api_key))

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method, f"/{table}", params=params, json=body, headers=headers
            )
        except httpx.HTTPError as e:
            raise RemoteStoreError(
                str(e) or e.__class__.__name__, table=table, operation=operation
            ) from e

        logger.debug("%s /%s -> %s", method, table, resp.status_code)

        if resp.status_code >= 400:
            raise RemoteStoreError(
                _error_message(resp),
                table=table,
                operation=operation,
                status_code=resp.status_code,
            )
        return resp

    @staticmethod
    def _rows(resp: httpx.Response, *, table: str, operation: str) -> list[RemoteRow]:
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteStoreError(
                "response is not JSON", table=table, operation=operation, status_code=resp.status_code
            ) from e
        if not isinstance(data, list):
            raise RemoteStoreError(
                "expected a JSON array", table=table, operation=operation, status_code=resp.status_code
            )
        return [row for row in data if isinstance(row, dict)]

    # ---- RemoteStore ----

    async def select_all(
        self,
        table: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[RemoteRow]:
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        resp = await self._request("GET", table, "select", params=params)
        return self._rows(resp, table=table, operation="select")

    async def insert_one(self, table: str, row: RemoteRow) -> RemoteRow:
        resp = await self._request(
            "POST",
            table,
            "insert",
            params={"select": "*"},
            body=[row],
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(resp, table=table, operation="insert")
        if not rows:
            raise RemoteStoreError(
                "insert returned no row", table=table, operation="insert", status_code=resp.status_code
            )
        return rows[0]

    async def update_by_id(self, table: str, row_id: str, values: RemoteRow) -> None:
        await self._request(
            "PATCH",
            table,
            "update",
            params={"id": f"eq.{row_id}"},
            body=values,
            headers={"Prefer": "return=minimal"},
        )

    async def delete_by_id(self, table: str, row_id: str) -> None:
        await self._request(
            "DELETE",
            table,
            "delete",
            params={"id": f"eq.{row_id}"},
            headers={"Prefer": "return=minimal"},
        )
