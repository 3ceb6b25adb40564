"""Dashboard figures and list search/sort over the locally cached records.

Everything here is a pure function of the records passed in; nothing calls
the sheet.
"""

import math
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import StrEnum

from src.core.config import constants
from src.domain.ptp import PreTaskPlan
from src.domain.report import Compartment, WeeklyReport
from src.models.service_models import (
    DashboardStats,
    InstallerShare,
    NamedCount,
    PTPListStats,
    RecentActivity,
    ReportGroups,
    TrendPoint,
    VesselProduction,
)


class PTPSortKey(StrEnum):
    """Columns the safety plan list can be sorted by."""

    DATE = "date"
    LOCATION = "location"
    DESCRIPTION = "description"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _sqft(compartment: Compartment) -> float:
    return float(compartment.sqft or 0)


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    # Compare naive and aware values on the same footing
    return parsed.replace(tzinfo=None)


def _date_key(value: str | None) -> datetime:
    return _parse_date(value) or datetime.min


def _compartments(reports: Iterable[WeeklyReport]) -> Iterable[tuple[WeeklyReport, Compartment]]:
    for report in reports:
        for compartment in report.compartments:
            yield report, compartment


def dashboard_stats(reports: Sequence[WeeklyReport]) -> DashboardStats:
    """Aggregate production, QC and activity figures across reports.

    QC status is derived from phase descriptions, never from the stored flag.
    """
    total_sqft = 0.0
    compartment_count = 0
    qc_passed_count = 0
    installers: set[str] = set()
    vessels: set[str] = set()
    latest_phases: Counter[str] = Counter()
    production: dict[str, float] = defaultdict(float)
    activities: list[RecentActivity] = []

    for report, compartment in _compartments(reports):
        sqft = _sqft(compartment)
        total_sqft += sqft
        compartment_count += 1
        if compartment.is_qc_passed():
            qc_passed_count += 1
        if compartment.installer:
            installers.add(compartment.installer)

        vessel = compartment.vessel or report.vessel or constants.DEFAULT_VESSEL
        vessels.add(vessel)
        production[vessel] += sqft

        if compartment.phases:
            latest_phases[compartment.phases[-1].description] += 1
            activities.extend(
                RecentActivity(vessel=vessel, compartment=compartment.name, phase=phase.description, date=phase.date)
                for phase in compartment.phases
            )

    activities.sort(key=lambda a: _date_key(a.date), reverse=True)

    return DashboardStats(
        total_sqft=total_sqft,
        compartment_count=compartment_count,
        qc_passed_count=qc_passed_count,
        qc_rate=_round_half_up(qc_passed_count / compartment_count * 100) if compartment_count else 0,
        installer_count=len(installers),
        vessel_count=len(vessels),
        avg_unit_size=_round_half_up(total_sqft / compartment_count) if compartment_count else 0,
        phase_distribution=[NamedCount(name=name, value=count) for name, count in latest_phases.most_common()],
        vessel_production=[
            VesselProduction(name=name, sqft=sqft)
            for name, sqft in sorted(production.items(), key=lambda item: item[1], reverse=True)
        ],
        recent_activities=activities[: constants.RECENT_ACTIVITY_LIMIT],
    )


def weekly_trend(reports: Sequence[WeeklyReport], *, weeks: int = constants.TREND_WEEKS) -> list[TrendPoint]:
    """Per-report production for the most recent reporting weeks, oldest first."""
    ordered = sorted(reports, key=lambda r: _date_key(r.week_start))
    return [
        TrendPoint(
            week_start=report.week_start,
            sqft=sum(_sqft(c) for c in report.compartments),
            entries=len(report.compartments),
        )
        for report in ordered[-weeks:]
    ]


def installer_share(reports: Sequence[WeeklyReport], *, limit: int = constants.TOP_INSTALLERS) -> list[InstallerShare]:
    """Top installers by square footage with their percentage of the total."""
    totals: dict[str, float] = defaultdict(float)
    for _, compartment in _compartments(reports):
        totals[compartment.installer or "Unknown"] += _sqft(compartment)

    grand_total = sum(totals.values())
    shares = [
        InstallerShare(name=name, sqft=sqft, percent=(sqft / grand_total * 100) if grand_total > 0 else 0.0)
        for name, sqft in totals.items()
    ]
    shares.sort(key=lambda s: s.sqft, reverse=True)
    return shares[:limit]


def search_reports(reports: Iterable[WeeklyReport], query: str = "") -> list[WeeklyReport]:
    """Match vessel, author, compartment name or installer; newest activity first."""
    needle = query.lower()

    def matches(report: WeeklyReport) -> bool:
        if needle in report.vessel.lower() or needle in (report.author or "").lower():
            return True
        return any(needle in c.name.lower() or needle in c.installer.lower() for c in report.compartments)

    found = [r for r in reports if matches(r)]
    return sorted(found, key=lambda r: _date_key(r.updated_at or r.created_at), reverse=True)


def group_by_qc(reports: Iterable[WeeklyReport]) -> ReportGroups:
    groups = ReportGroups()
    for report in reports:
        (groups.done if report.is_fully_passed() else groups.active).append(report)
    return groups


def search_ptps(ptps: Iterable[PreTaskPlan], query: str = "") -> list[PreTaskPlan]:
    """Plans whose description, location, supervisor or author contain query."""
    needle = query.strip().lower()
    if not needle:
        return list(ptps)
    return [
        p
        for p in ptps
        if any(needle in field.lower() for field in (p.description, p.location, p.supervisor, p.author))
    ]


def sort_ptps(
    ptps: Iterable[PreTaskPlan],
    *,
    key: PTPSortKey = PTPSortKey.DATE,
    descending: bool = True,
) -> list[PreTaskPlan]:
    if key == PTPSortKey.DATE:
        return sorted(ptps, key=lambda p: _date_key(p.date), reverse=descending)
    return sorted(ptps, key=lambda p: str(getattr(p, key.value) or "").lower(), reverse=descending)


def ptp_list_stats(ptps: Sequence[PreTaskPlan]) -> PTPListStats:
    return PTPListStats(
        plans=len(ptps),
        hazards=sum(len(p.hazards) for p in ptps),
        ppe=sum(len(p.ppe) for p in ptps),
        steps=sum(len(p.steps) for p in ptps),
        incomplete=sum(1 for p in ptps if not p.is_complete()),
    )
