"""Quality-control pass detection for compartment work phases."""

from collections.abc import Iterable
from typing import Protocol


QC_PASS_SYNONYMS: frozenset[str] = frozenset(
    {
        "qc pass",
        "qc passed",
        "qc inspected",
        "qc check",
        "qc checked",
    }
)


class _Described(Protocol):
    description: str


def is_qc_passed(phases: Iterable[_Described] | None) -> bool:
    """Return True if any phase description contains a QC-pass synonym (case-insensitive)."""
    for phase in phases or ():
        text = (phase.description or "").lower()
        if any(synonym in text for synonym in QC_PASS_SYNONYMS):
            return True
    return False
