"""HTTP/JSON client for the Google Apps Script spreadsheet backend.

Reads are ``GET ?action=<fetchX>`` returning a JSON array of header-keyed rows.
Writes are ``POST {"action": ..., "data": ...}`` returning ``{"success": true}``
or ``{"error": "..."}``. Apps Script answers with a redirect to the content
host, so redirects are always followed.
"""

import logging
from typing import Any, Protocol

import httpx

from src.core.config import constants
from src.core.errors import RemoteStoreError
from src.core.sheet_schema import (
    normalize_audit_entry,
    normalize_foreman,
    normalize_ptp,
    normalize_report,
    normalize_rows,
)
from src.domain.audit import AuditLogEntry
from src.domain.foreman import Foreman
from src.domain.ids import coerce_id
from src.domain.ptp import PreTaskPlan
from src.domain.report import WeeklyReport


logger = logging.getLogger(__name__)


class RemoteStore(Protocol):
    """Interface of the remote persistence backend."""

    async def fetch_reports(self) -> list[WeeklyReport]: ...

    async def fetch_deleted_reports(self) -> list[WeeklyReport]: ...

    async def fetch_foremen(self) -> list[Foreman]: ...

    async def fetch_ptps(self) -> list[PreTaskPlan]: ...

    async def fetch_deleted_ptps(self) -> list[PreTaskPlan]: ...

    async def fetch_audit_logs(self) -> list[AuditLogEntry]: ...

    async def insert_report(self, report: WeeklyReport) -> bool: ...

    async def update_report(self, report: WeeklyReport) -> bool: ...

    async def delete_report(self, report_id: str) -> bool: ...

    async def restore_report(self, report_id: str) -> bool: ...

    async def insert_ptp(self, ptp: PreTaskPlan) -> bool: ...

    async def update_ptp(self, ptp: PreTaskPlan) -> bool: ...

    async def delete_ptp(self, ptp_id: str) -> bool: ...

    async def restore_ptp(self, ptp_id: str) -> bool: ...

    async def upsert_foreman(self, foreman: Foreman) -> bool: ...

    async def delete_foreman(self, name: str) -> bool: ...

    async def insert_audit_log(self, entry: AuditLogEntry) -> None: ...

    async def ping(self) -> bool: ...


class SheetClient:
    """RemoteStore implementation talking to the Apps Script web app."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = constants.API_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, follow_redirects=True, transport=self._transport)

    async def _get(self, action: str) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(self.base_url, params={"action": action})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            logger.error("sheet_fetch_failed", extra={"action": action, "error": str(e)})
            raise RemoteStoreError(f"Failed to fetch {action}: {e}") from e
        except ValueError as e:
            logger.error("sheet_fetch_invalid_json", extra={"action": action, "error": str(e)})
            raise RemoteStoreError(f"Invalid JSON from {action}") from e

        if isinstance(payload, dict) and payload.get("error"):
            raise RemoteStoreError(str(payload["error"]))
        return payload

    async def _post(self, action: str, data: dict[str, Any]) -> bool:
        try:
            async with self._client() as client:
                response = await client.post(self.base_url, json={"action": action, "data": data})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            logger.error("sheet_write_failed", extra={"action": action, "error": str(e)})
            raise RemoteStoreError(f"{action} failed: {e}") from e
        except ValueError as e:
            logger.error("sheet_write_invalid_json", extra={"action": action, "error": str(e)})
            raise RemoteStoreError(f"Invalid JSON from {action}") from e

        if isinstance(payload, dict) and payload.get("error"):
            logger.warning("sheet_write_rejected", extra={"action": action, "error": payload["error"]})
            raise RemoteStoreError(str(payload["error"]))

        logger.info("sheet_write_ok", extra={"action": action})
        return bool(isinstance(payload, dict) and payload.get("success"))

    async def ping(self) -> bool:
        payload = await self._get("ping")
        return isinstance(payload, dict) and payload.get("status") == "ok"

    # ---- reads ----

    async def fetch_reports(self) -> list[WeeklyReport]:
        rows = await self._get("fetchReports")
        return normalize_rows(rows, normalize_report, collection="reports")

    async def fetch_deleted_reports(self) -> list[WeeklyReport]:
        rows = await self._get("fetchDeleted")
        return normalize_rows(rows, normalize_report, collection="deleted_reports")

    async def fetch_foremen(self) -> list[Foreman]:
        rows = await self._get("fetchForemen")
        return normalize_rows(rows, normalize_foreman, collection="foremen")

    async def fetch_ptps(self) -> list[PreTaskPlan]:
        rows = await self._get("fetchPTPs")
        return normalize_rows(rows, normalize_ptp, collection="ptps")

    async def fetch_deleted_ptps(self) -> list[PreTaskPlan]:
        rows = await self._get("fetchDeletedPTPs")
        return normalize_rows(rows, normalize_ptp, collection="deleted_ptps")

    async def fetch_audit_logs(self) -> list[AuditLogEntry]:
        rows = await self._get("fetchAuditLogs")
        return normalize_rows(rows, normalize_audit_entry, collection="audit_logs")

    # ---- writes ----

    async def insert_report(self, report: WeeklyReport) -> bool:
        return await self._post("insert", report.to_wire())

    async def update_report(self, report: WeeklyReport) -> bool:
        return await self._post("update", report.to_wire())

    async def delete_report(self, report_id: str) -> bool:
        return await self._post("delete", {"id": coerce_id(report_id)})

    async def restore_report(self, report_id: str) -> bool:
        return await self._post("restore", {"id": coerce_id(report_id)})

    async def insert_ptp(self, ptp: PreTaskPlan) -> bool:
        return await self._post("insertPTP", ptp.to_wire())

    async def update_ptp(self, ptp: PreTaskPlan) -> bool:
        return await self._post("updatePTP", ptp.to_wire())

    async def delete_ptp(self, ptp_id: str) -> bool:
        return await self._post("deletePTP", {"id": coerce_id(ptp_id)})

    async def restore_ptp(self, ptp_id: str) -> bool:
        return await self._post("restorePTP", {"id": coerce_id(ptp_id)})

    async def upsert_foreman(self, foreman: Foreman) -> bool:
        return await self._post("upsertForeman", foreman.model_dump())

    async def delete_foreman(self, name: str) -> bool:
        return await self._post("deleteForeman", {"name": name})

    async def insert_audit_log(self, entry: AuditLogEntry) -> None:
        await self._post("insertAuditLog", entry.model_dump())
