"""Soft-delete lifecycle: records move between an active and a trashed collection.

Moves never copy or rebuild the record, so field values survive a
trash-then-restore round trip unchanged. Permanent deletion is not modelled
here; the sheet is the only place rows are ever removed.
"""

import logging
from enum import StrEnum

from src.core.errors import RecordNotFoundError
from src.core.state import R, find_by_id
from src.domain.ids import coerce_id, same_id


logger = logging.getLogger(__name__)


class LifecycleState(StrEnum):
    """Where a record currently lives in the local view."""

    ACTIVE = "active"
    TRASHED = "trashed"


def state_of(*, active: list[R], trashed: list[R], record_id: object) -> LifecycleState | None:
    """Lifecycle state of record_id, or None if it is in neither collection."""
    if find_by_id(active, record_id) is not None:
        return LifecycleState.ACTIVE
    if find_by_id(trashed, record_id) is not None:
        return LifecycleState.TRASHED
    return None


def _transfer(*, source: list[R], target: list[R], record_id: object) -> R:
    record = find_by_id(source, record_id)
    if record is None:
        raise RecordNotFoundError(coerce_id(record_id))

    # Lists are shared with AppState, so mutate in place
    source[:] = [r for r in source if not same_id(r.id, record_id)]
    target[:] = [r for r in target if not same_id(r.id, record_id)]
    target.insert(0, record)
    return record


def move_to_trash(*, active: list[R], trashed: list[R], record_id: object) -> R:
    """Move a record from active to the head of trashed.

    Raises:
        RecordNotFoundError: If record_id is not active
    """
    record = _transfer(source=active, target=trashed, record_id=record_id)
    logger.debug("record_trashed", extra={"record_id": record.id})
    return record


def move_to_active(*, active: list[R], trashed: list[R], record_id: object) -> R:
    """Move a record from trashed back to the head of active.

    Raises:
        RecordNotFoundError: If record_id is not trashed
    """
    record = _transfer(source=trashed, target=active, record_id=record_id)
    logger.debug("record_restored", extra={"record_id": record.id})
    return record
