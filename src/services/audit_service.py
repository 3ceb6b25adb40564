"""Audit log writer and audit history queries."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import StrEnum

from src.core.clock import now_iso, time_based_id
from src.core.errors import error_message
from src.core.logging import span
from src.core.state import AppContext
from src.domain.audit import AuditLogEntry


logger = logging.getLogger(__name__)


class ActionKind(StrEnum):
    """Coarse classification of audit actions for display."""

    DELETE = "delete"
    CREATE = "create"
    UPDATE = "update"
    LOGIN = "login"
    LOGOUT = "logout"
    RESTORE = "restore"
    OTHER = "other"


_KIND_KEYWORDS: list[tuple[ActionKind, tuple[str, ...]]] = [
    (ActionKind.DELETE, ("delete",)),
    (ActionKind.CREATE, ("create", "add")),
    (ActionKind.UPDATE, ("update", "edit")),
    (ActionKind.LOGIN, ("login",)),
    (ActionKind.LOGOUT, ("logout",)),
    (ActionKind.RESTORE, ("restore",)),
]


async def record(
    ctx: AppContext,
    action: str,
    details: str,
    *,
    actor_override: str | None = None,
) -> AuditLogEntry | None:
    """Write an audit entry remotely and prepend it to the local audit log.

    The actor is actor_override, else the signed-in foreman. Anonymous actions
    are never audited and return None.

    A failed remote write is logged but does not undo the local entry; the next
    resync replaces the local log with what the sheet actually holds.
    """
    with span("audit_service.record"):
        actor = actor_override or ctx.state.current_user
        # Guard: nobody to attribute the action to
        if not actor:
            logger.debug("audit_skipped_anonymous", extra={"action": action})
            return None

        entry = AuditLogEntry(
            id=time_based_id(),
            timestamp=now_iso(),
            user=actor,
            action=action,
            details=details,
        )

        try:
            await ctx.store.insert_audit_log(entry)
        except Exception as e:
            logger.warning(
                "audit_remote_write_failed",
                extra={"action": action, "user": actor, "error": error_message(e)},
            )

        ctx.state.audit_logs.insert(0, entry)
        logger.info("audit_recorded", extra={"action": action, "user": actor, "entry_id": entry.id})
        return entry


def _sort_key(entry: AuditLogEntry) -> datetime:
    try:
        parsed = datetime.fromisoformat(entry.timestamp)
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def search_audit_logs(logs: Iterable[AuditLogEntry], query: str = "") -> list[AuditLogEntry]:
    """Entries whose user, action or details contain query (case-insensitive), newest first."""
    needle = query.lower()
    matches = [
        entry
        for entry in logs
        if needle in entry.user.lower() or needle in entry.action.lower() or needle in entry.details.lower()
    ]
    return sorted(matches, key=_sort_key, reverse=True)


def action_kind(action: str) -> ActionKind:
    lowered = (action or "").lower()
    for kind, keywords in _KIND_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return kind
    return ActionKind.OTHER
