"""Optimistic create/update/archive/restore of weekly reports.

Every operation changes local state first, then calls the sheet. Discrepancies
are corrected by the delayed resync, or by an immediate resync when the remote
call fails.
"""

import logging

from src.core.clock import now_iso
from src.core.config import constants
from src.core.errors import RecordNotFoundError, RemoteStoreError
from src.core.logging import span
from src.core.state import AppContext, ViewMode, find_by_id, replace_by_id
from src.domain.audit import AuditAction
from src.domain.ids import coerce_id
from src.domain.report import WeeklyReport
from src.services import audit_service, lifecycle_service, sync_service
from src.services.diff_service import diff_report
from src.services.history_service import append_edit, seed_edit_log


logger = logging.getLogger(__name__)


def _not_found(ctx: AppContext, report_id: object) -> None:
    report_id = coerce_id(report_id)
    logger.warning("report_not_found", extra={"report_id": report_id})
    ctx.state.show_toast(f"Error: Report {report_id} not found")


def _summary(report: WeeklyReport, *, empty: str) -> str:
    return f"Vessel: {report.vessel} | Compartments: {report.compartment_names(empty=empty)}"


def _report_vessel(report: WeeklyReport) -> str:
    # The form sets the vessel per compartment; the last one entered wins
    for compartment in reversed(report.compartments):
        if compartment.vessel:
            return compartment.vessel
    return report.vessel


async def create_report(ctx: AppContext, report: WeeklyReport) -> WeeklyReport | None:
    """Stamp authorship, seed history and insert a new report.

    Returns:
        The stored report, or None if nobody is signed in
    """
    with span("report_service.create_report"):
        state = ctx.state
        # Guard: mutations require a signed-in foreman
        if not state.is_authorized:
            logger.warning("unauthorized_mutation", extra={"operation": "create_report"})
            return None

        author = report.author or state.current_user or constants.ADMIN_NAME
        timestamp = now_iso()
        created_at = report.created_at or timestamp
        final = report.model_copy(
            update={
                "vessel": _report_vessel(report),
                "author": author,
                "created_at": created_at,
                "last_editor": author,
                "updated_at": timestamp,
                "edit_log": seed_edit_log(author=author, created_at=created_at),
            }
        )

        state.is_syncing = True
        state.reports.insert(0, final)

        try:
            await ctx.store.insert_report(final)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Save failed", error=e)
        else:
            await audit_service.record(ctx, AuditAction.CREATE_REPORT, _summary(final, empty="No Units"))
            sync_service.schedule_resync(ctx)

        logger.info("report_created", extra={"report_id": final.id, "user": author})
        state.view = ViewMode.LIST
        return final


async def update_report(ctx: AppContext, report: WeeklyReport) -> WeeklyReport | None:
    """Diff against the stored revision, append history and save.

    Returns:
        The stored report, or None if unauthorized or the report is unknown
    """
    with span("report_service.update_report"):
        state = ctx.state
        # Guard: mutations require a signed-in foreman
        if not state.is_authorized:
            logger.warning("unauthorized_mutation", extra={"operation": "update_report"})
            return None

        existing = find_by_id(state.reports, report.id)
        if existing is None:
            _not_found(ctx, report.id)
            return None

        editor = state.current_user or constants.ADMIN_NAME
        timestamp = now_iso()
        diff = diff_report(existing, report)
        final = report.model_copy(
            update={
                "author": report.author or existing.author,
                "created_at": report.created_at or existing.created_at,
                "last_editor": editor,
                "updated_at": timestamp,
                "edit_log": append_edit(existing=existing, editor=editor, timestamp=timestamp),
            }
        )

        state.is_syncing = True
        replace_by_id(state.reports, final)

        try:
            await ctx.store.update_report(final)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Save failed", error=e)
        else:
            await audit_service.record(ctx, AuditAction.UPDATE_REPORT, diff.audit_details)
            sync_service.schedule_resync(ctx)

        logger.info("report_updated", extra={"report_id": final.id, "user": editor, "changes": len(diff.changes)})
        state.view = ViewMode.LIST
        return final


async def archive_report(ctx: AppContext, report_id: str) -> bool:
    """Move a report to the trash.

    Returns:
        True if the sheet confirmed the move
    """
    with span("report_service.archive_report"):
        state = ctx.state
        # Guard: mutations require a signed-in foreman
        if not state.is_authorized:
            logger.warning("unauthorized_mutation", extra={"operation": "archive_report"})
            return False

        report_id = coerce_id(report_id)
        try:
            report = lifecycle_service.move_to_trash(
                active=state.reports, trashed=state.deleted_reports, record_id=report_id
            )
        except RecordNotFoundError:
            _not_found(ctx, report_id)
            return False

        state.is_syncing = True
        state.pending_archive_ids.add(report_id)
        state.show_toast("Moving to trash...")

        try:
            success = await ctx.store.delete_report(report_id)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Delete failed", error=e)
            return False

        if not success:
            await sync_service.recover(
                ctx, failure_label="Delete failed", error=RemoteStoreError(constants.UNCONFIRMED_MOVE_MESSAGE)
            )
            return False

        state.show_toast("Report moved to trash")
        await audit_service.record(ctx, AuditAction.DELETE_REPORT, _summary(report, empty="Unknown Units"))
        sync_service.schedule_resync(ctx)
        return True


async def restore_report(ctx: AppContext, report_id: str) -> bool:
    """Move a trashed report back to the active list.

    Returns:
        True if the sheet confirmed the move
    """
    with span("report_service.restore_report"):
        state = ctx.state
        # Guard: mutations require a signed-in foreman
        if not state.is_authorized:
            logger.warning("unauthorized_mutation", extra={"operation": "restore_report"})
            return False

        report_id = coerce_id(report_id)
        try:
            report = lifecycle_service.move_to_active(
                active=state.reports, trashed=state.deleted_reports, record_id=report_id
            )
        except RecordNotFoundError:
            _not_found(ctx, report_id)
            return False

        state.is_syncing = True
        state.pending_restore_ids.add(report_id)

        try:
            success = await ctx.store.restore_report(report_id)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Restore failed", error=e)
            return False

        if not success:
            await sync_service.recover(
                ctx, failure_label="Restore failed", error=RemoteStoreError(constants.UNCONFIRMED_MOVE_MESSAGE)
            )
            return False

        state.show_toast("Report restored to active list")
        await audit_service.record(ctx, AuditAction.RESTORE_REPORT, _summary(report, empty="Unknown Units"))
        sync_service.schedule_resync(ctx)
        return True
