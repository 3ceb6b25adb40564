"""Human-readable change summaries between two revisions of a weekly report.

The summary is written to the audit log on every report update, e.g.::

    VESSEL: CVN74 | Details: C-1 [SqFt: 100→150] || Added Comp: C-2

Compartments are paired by id first and by name as a fallback. Renaming a
compartment while its id also changes therefore reads as a removal plus an
addition.
"""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from src.domain.ids import same_id
from src.domain.report import Compartment, WeeklyReport


METADATA_ONLY = "Metadata update"
UNKNOWN_VESSEL = "Unknown"
CHANGE_SEPARATOR = " || "


class ReportDiff(BaseModel):
    """Result of comparing two report revisions."""

    vessel: str = Field(..., description="'OLD → NEW' when the vessel changed, else the unchanged name")
    changes: list[str] = Field(default_factory=list, description="One entry per changed compartment")

    @property
    def details(self) -> str:
        return CHANGE_SEPARATOR.join(self.changes) if self.changes else METADATA_ONLY

    @property
    def audit_details(self) -> str:
        return f"VESSEL: {self.vessel} | Details: {self.details}"


def _fmt(value: object) -> str:
    if value is None:
        return "None"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def diff_vessel(old: str | None, new: str | None) -> str:
    old_name = old or UNKNOWN_VESSEL
    new_name = new or UNKNOWN_VESSEL
    return f"{old_name} → {new_name}" if old_name != new_name else old_name


def find_counterpart(compartment: Compartment, candidates: Sequence[Compartment]) -> Compartment | None:
    """Pair a compartment with its previous revision: id match first, then name."""
    for candidate in candidates:
        if same_id(candidate.id, compartment.id):
            return candidate
    for candidate in candidates:
        if candidate.name == compartment.name:
            return candidate
    return None


def diff_compartment(old: Compartment, new: Compartment) -> list[str]:
    """Field-level change fragments for one matched compartment."""
    fragments = []
    if old.sqft != new.sqft:
        fragments.append(f"SqFt: {_fmt(old.sqft)}→{_fmt(new.sqft)}")
    if old.installer != new.installer:
        fragments.append(f"Lead: {old.installer or 'None'}→{new.installer}")
    if old.type != new.type:
        fragments.append(f"Type: {old.type or 'None'}→{new.type}")

    old_summary = old.phase_summary()
    new_summary = new.phase_summary()
    old_count = len(old.phases)
    new_count = len(new.phases)
    if old_summary != new_summary:
        fragments.append(f"Phases: {old_count}→{new_count} (Before: {old_summary} | After: {new_summary})")
    elif old_count != new_count:
        # e.g. a phase with an empty description was added
        fragments.append(f"Phase Count: {old_count}→{new_count}")
    return fragments


def diff_compartments(existing: Sequence[Compartment], incoming: Sequence[Compartment]) -> list[str]:
    changes = []
    for new_comp in incoming:
        old_comp = find_counterpart(new_comp, existing)
        if old_comp is None:
            changes.append(f"Added Comp: {new_comp.name}")
            continue
        fragments = diff_compartment(old_comp, new_comp)
        if fragments:
            changes.append(f"{new_comp.name} [{'; '.join(fragments)}]")

    for old_comp in existing:
        still_present = any(same_id(c.id, old_comp.id) or c.name == old_comp.name for c in incoming)
        if not still_present:
            changes.append(f"Removed Comp: {old_comp.name}")
    return changes


def diff_report(existing: WeeklyReport | None, incoming: WeeklyReport) -> ReportDiff:
    """Describe every semantic change from existing to incoming.

    A missing existing revision is treated as an empty report, so every
    compartment reads as added.
    """
    old_vessel = existing.vessel if existing else None
    old_compartments = existing.compartments if existing else []
    return ReportDiff(
        vessel=diff_vessel(old_vessel, incoming.vessel),
        changes=diff_compartments(old_compartments, incoming.compartments),
    )
