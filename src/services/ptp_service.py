"""Optimistic create/update/archive/restore of pre-task safety plans."""

import logging
from collections.abc import Iterable

from src.core.clock import now_iso
from src.core.config import constants
from src.core.errors import RecordNotFoundError, RemoteStoreError
from src.core.logging import span
from src.core.state import AppContext, ViewMode, find_by_id, replace_by_id
from src.domain.audit import AuditAction
from src.domain.ids import coerce_id
from src.domain.ptp import PreTaskPlan
from src.services import audit_service, lifecycle_service, sync_service


logger = logging.getLogger(__name__)


def _not_found(ctx: AppContext, ptp_id: object) -> None:
    ptp_id = coerce_id(ptp_id)
    logger.warning("ptp_not_found", extra={"ptp_id": ptp_id})
    ctx.state.show_toast(f"Error: PTP {ptp_id} not found")


def _summary(ptp: PreTaskPlan) -> str:
    return f"Location: {ptp.location}, ID: {ptp.id}"


def _unauthorized(ctx: AppContext, operation: str) -> bool:
    if ctx.state.is_authorized:
        return False
    logger.warning("unauthorized_mutation", extra={"operation": operation})
    return True


async def create_ptp(ctx: AppContext, ptp: PreTaskPlan) -> PreTaskPlan | None:
    with span("ptp_service.create_ptp"):
        state = ctx.state
        if _unauthorized(ctx, "create_ptp"):
            return None

        final = ptp.model_copy(
            update={
                "author": state.current_user or constants.ADMIN_NAME,
                "created_at": now_iso(),
            }
        )

        state.is_syncing = True
        state.ptps.insert(0, final)

        try:
            await ctx.store.insert_ptp(final)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Save failed", error=e)
        else:
            await audit_service.record(ctx, AuditAction.CREATE_PTP, _summary(final))
            sync_service.schedule_resync(ctx)

        logger.info("ptp_created", extra={"ptp_id": final.id, "complete": final.is_complete()})
        state.view = ViewMode.PTP_LIST
        return final


async def update_ptp(ctx: AppContext, ptp: PreTaskPlan) -> PreTaskPlan | None:
    """Save a revised plan. Plans carry no edit history; only updated_at is stamped."""
    with span("ptp_service.update_ptp"):
        state = ctx.state
        if _unauthorized(ctx, "update_ptp"):
            return None

        if find_by_id(state.ptps, ptp.id) is None:
            _not_found(ctx, ptp.id)
            return None

        final = ptp.model_copy(update={"updated_at": now_iso()})

        state.is_syncing = True
        replace_by_id(state.ptps, final)

        try:
            await ctx.store.update_ptp(final)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Save failed", error=e)
        else:
            await audit_service.record(ctx, AuditAction.UPDATE_PTP, _summary(final))
            sync_service.schedule_resync(ctx)

        logger.info("ptp_updated", extra={"ptp_id": final.id})
        state.view = ViewMode.PTP_LIST
        return final


async def archive_ptp(ctx: AppContext, ptp_id: str) -> bool:
    """Move a plan to the trash. Returns True if the sheet confirmed the move."""
    with span("ptp_service.archive_ptp"):
        state = ctx.state
        if _unauthorized(ctx, "archive_ptp"):
            return False

        ptp_id = coerce_id(ptp_id)
        try:
            ptp = lifecycle_service.move_to_trash(active=state.ptps, trashed=state.deleted_ptps, record_id=ptp_id)
        except RecordNotFoundError:
            _not_found(ctx, ptp_id)
            return False

        state.is_syncing = True
        state.pending_archive_ids.add(ptp_id)
        state.show_toast("Moving to trash...")

        try:
            success = await ctx.store.delete_ptp(ptp_id)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Delete failed", error=e)
            return False

        if not success:
            await sync_service.recover(
                ctx, failure_label="Delete failed", error=RemoteStoreError(constants.UNCONFIRMED_MOVE_MESSAGE)
            )
            return False

        state.show_toast("Safety Plan moved to trash")
        await audit_service.record(ctx, AuditAction.DELETE_PTP, _summary(ptp))
        sync_service.schedule_resync(ctx)
        return True


async def restore_ptp(ctx: AppContext, ptp_id: str) -> bool:
    """Move a trashed plan back to the active list. Returns True if the sheet confirmed the move."""
    with span("ptp_service.restore_ptp"):
        state = ctx.state
        if _unauthorized(ctx, "restore_ptp"):
            return False

        ptp_id = coerce_id(ptp_id)
        try:
            ptp = lifecycle_service.move_to_active(active=state.ptps, trashed=state.deleted_ptps, record_id=ptp_id)
        except RecordNotFoundError:
            _not_found(ctx, ptp_id)
            return False

        state.is_syncing = True
        state.pending_restore_ids.add(ptp_id)

        try:
            success = await ctx.store.restore_ptp(ptp_id)
        except Exception as e:
            await sync_service.recover(ctx, failure_label="Restore failed", error=e)
            return False

        if not success:
            await sync_service.recover(
                ctx, failure_label="Restore failed", error=RemoteStoreError(constants.UNCONFIRMED_MOVE_MESSAGE)
            )
            return False

        state.show_toast("Safety Plan restored")
        await audit_service.record(ctx, AuditAction.RESTORE_PTP, _summary(ptp))
        sync_service.schedule_resync(ctx)
        return True


async def record_bulk_print(ctx: AppContext, ptp_ids: Iterable[object]) -> list[str]:
    """Select plans for a combined printout and audit the print run."""
    with span("ptp_service.record_bulk_print"):
        state = ctx.state
        if _unauthorized(ctx, "record_bulk_print"):
            return []

        selected = [coerce_id(ptp_id) for ptp_id in ptp_ids]
        state.selected_bulk_ids = selected
        state.view = ViewMode.PTP_BULK_PRINT
        await audit_service.record(ctx, AuditAction.BULK_PRINT_PTP, f"Count: {len(selected)}")
        return selected
