"""Append-only edit history for weekly reports."""

from src.domain.report import EditAction, EditLogEntry, WeeklyReport


SYSTEM_USER = "System"


def seed_edit_log(*, author: str, created_at: str) -> list[EditLogEntry]:
    """History of a freshly created report: a single 'created' entry."""
    return [EditLogEntry(user=author, timestamp=created_at, action=EditAction.CREATED)]


def append_edit(*, existing: WeeklyReport | None, editor: str, timestamp: str) -> list[EditLogEntry]:
    """Return existing history plus exactly one 'edited' entry.

    Reports saved before history tracking existed have no log; their 'created'
    entry is synthesized from the stored author and creation time.
    """
    history = list(existing.edit_log) if existing else []
    if not history:
        author = (existing.author if existing else None) or SYSTEM_USER
        created_at = (existing.created_at if existing else "") or timestamp
        history.extend(seed_edit_log(author=author, created_at=created_at))
    history.append(EditLogEntry(user=editor, timestamp=timestamp, action=EditAction.EDITED))
    return history
