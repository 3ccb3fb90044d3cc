# src/projboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The data layer depends on a Protocol instead of a concrete HTTP client.
This keeps the table store swappable (PostgREST, in-memory demo) and makes testing easier.
"""

from typing import Any, Protocol

RemoteRow = dict[str, Any]
# Raw snake_case row as returned by the store.


class RemoteStoreError(RuntimeError):
    """Transport or query failure reported by a RemoteStore implementation."""

    def __init__(
            self,
            message: str,
            *,
            table: str,
            operation: str,
            status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        code = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{self.operation} {self.table} failed{code}: {base}"


class RemoteStore(Protocol):
    """
    Remote table store: named collections ("projects", "tasks", "issues")
    supporting select-all, insert-one, update-by-id and delete-by-id.

    Timeouts are the implementation's concern. Every failure is a RemoteStoreError.
    """

    async def select_all(
            self,
            table: str,
            *,
            order_by: str | None = None,
            descending: bool = False,
    ) -> list[RemoteRow]: ...

    async def insert_one(self, table: str, row: RemoteRow) -> RemoteRow: ...

    async def update_by_id(self, table: str, row_id: str, values: RemoteRow) -> None: ...

    async def delete_by_id(self, table: str, row_id: str) -> None: ...

    async def aclose(self) -> None: ...
