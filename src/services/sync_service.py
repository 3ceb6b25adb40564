"""Full resync: replace every local collection with what the sheet holds."""

import asyncio
import functools
import logging

from src.core.config import constants
from src.core.errors import classify_remote_error, error_message
from src.core.logging import span
from src.core.state import AppContext


logger = logging.getLogger(__name__)


async def resync(ctx: AppContext) -> bool:
    """Fetch all six collections concurrently and replace local state wholesale.

    Local optimistic changes not yet visible remotely are overwritten; the sheet
    wins. On failure the local state is left untouched and a toast is shown.

    Returns:
        True if the local collections were replaced
    """
    with span("sync_service.resync"):
        state = ctx.state
        store = ctx.store
        state.is_syncing = True
        try:
            reports, deleted_reports, foremen, ptps, deleted_ptps, audit_logs = await asyncio.gather(
                store.fetch_reports(),
                store.fetch_deleted_reports(),
                store.fetch_foremen(),
                store.fetch_ptps(),
                store.fetch_deleted_ptps(),
                store.fetch_audit_logs(),
            )
        except Exception as e:
            category, hint = classify_remote_error(e)
            logger.error(
                "resync_failed", extra={"error": error_message(e), "category": category.value, "hint": hint}
            )
            state.show_toast(constants.SYNC_FAILED_MESSAGE)
            return False
        finally:
            state.is_syncing = False

        state.reports = reports
        state.deleted_reports = deleted_reports
        state.foremen = foremen
        state.ptps = ptps
        state.deleted_ptps = deleted_ptps
        state.audit_logs = audit_logs
        state.pending_archive_ids.clear()
        state.pending_restore_ids.clear()

        logger.info(
            "resync_complete",
            extra={
                "reports": len(reports),
                "deleted_reports": len(deleted_reports),
                "ptps": len(ptps),
                "deleted_ptps": len(deleted_ptps),
                "foremen": len(foremen),
                "audit_logs": len(audit_logs),
            },
        )
        return True


def schedule_resync(ctx: AppContext) -> str:
    """Queue a resync after the configured delay. Pending resyncs are never cancelled."""
    return ctx.scheduler.schedule(functools.partial(resync, ctx))


async def recover(ctx: AppContext, *, failure_label: str, error: BaseException) -> None:
    """Surface a failed remote mutation and resync immediately to restore the sheet's truth."""
    message = error_message(error)
    logger.error("remote_mutation_failed", extra={"failure": failure_label, "error": message})
    ctx.state.show_toast(f"{failure_label}: {message}")
    await resync(ctx)
