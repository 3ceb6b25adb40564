"""Explicit application state passed to every command handler."""

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, TypeVar

from src.core.config import constants
from src.core.local_config import LocalConfigStore
from src.core.scheduler import SchedulesResync
from src.core.sheet_client import RemoteStore
from src.domain.audit import AuditLogEntry
from src.domain.foreman import Foreman
from src.domain.ids import same_id
from src.domain.ptp import PreTaskPlan
from src.domain.report import WeeklyReport


logger = logging.getLogger(__name__)


class ViewMode(StrEnum):
    """Screens the interface can show."""

    DASHBOARD = "dashboard"
    LIST = "list"
    ADD = "add"
    EDIT = "edit"
    DELETED = "deleted"
    DETAIL = "detail"
    MANAGEMENT = "management"
    PTP_LIST = "ptp_list"
    PTP_ADD = "ptp_add"
    PTP_EDIT = "ptp_edit"
    PTP_DETAIL = "ptp_detail"
    PTP_BULK_PRINT = "ptp_bulk_print"
    PTP_DELETED = "ptp_deleted"
    AUDIT_LOG = "audit_log"


PUBLIC_VIEWS = frozenset({ViewMode.DASHBOARD, ViewMode.LIST})


class _Identified(Protocol):
    id: str


R = TypeVar("R", bound=_Identified)


def find_by_id(records: Sequence[R], record_id: object) -> R | None:
    """Return the record whose id matches after string coercion."""
    for record in records:
        if same_id(record.id, record_id):
            return record
    return None


def replace_by_id(records: list[R], record: R) -> bool:
    """Swap the record sharing record.id in place. Returns False if there is none."""
    for index, existing in enumerate(records):
        if same_id(existing.id, record.id):
            records[index] = record
            return True
    return False


@dataclass
class AppState:
    """Local cache of every collection plus session and UI flags."""

    reports: list[WeeklyReport] = field(default_factory=list)
    deleted_reports: list[WeeklyReport] = field(default_factory=list)
    ptps: list[PreTaskPlan] = field(default_factory=list)
    deleted_ptps: list[PreTaskPlan] = field(default_factory=list)
    audit_logs: list[AuditLogEntry] = field(default_factory=list)
    foremen: list[Foreman] = field(default_factory=list)

    current_user: str | None = None
    login_error: bool = False
    view: ViewMode = ViewMode.DASHBOARD
    selected_bulk_ids: list[str] = field(default_factory=list)
    is_syncing: bool = False
    toasts: deque[str] = field(default_factory=lambda: deque(maxlen=constants.TOAST_HISTORY))
    pending_archive_ids: set[str] = field(default_factory=set)
    pending_restore_ids: set[str] = field(default_factory=set)

    @property
    def is_authorized(self) -> bool:
        return bool(self.current_user)

    @property
    def toast(self) -> str | None:
        """Most recent toast message."""
        return self.toasts[-1] if self.toasts else None

    def show_toast(self, message: str) -> None:
        self.toasts.append(message)
        logger.info("toast", extra={"message": message})


@dataclass
class AppContext:
    """State plus the collaborators the controllers talk to."""

    state: AppState
    store: RemoteStore
    scheduler: SchedulesResync
    local_config: LocalConfigStore

    @classmethod
    def initialize(
        cls,
        *,
        store: RemoteStore,
        scheduler: SchedulesResync,
        local_config: LocalConfigStore,
    ) -> "AppContext":
        """Build a context with the identity loaded from durable config."""
        state = AppState(current_user=local_config.get(constants.ACTIVE_FOREMAN_KEY))
        if state.current_user:
            logger.info("Restored session", extra={"user": state.current_user})
        return cls(state=state, store=store, scheduler=scheduler, local_config=local_config)
