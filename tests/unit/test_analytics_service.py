"""Unit tests for analytics_service module."""

import pytest

from src.domain.ptp import Hazard, PTPStep
from src.services import analytics_service
from src.services.analytics_service import PTPSortKey
from tests.unit.mocks import make_compartment, make_ptp, make_report


@pytest.fixture
def reports():
    return [
        make_report(
            "1",
            compartments=[
                make_compartment("C-1", sqft=100, installer="Joe", phases=["Grind", "QC Passed"]),
                make_compartment("C-2", sqft=50, installer="Ana", vessel="", phases=["Prime"]),
            ],
        ),
        make_report(
            "2",
            vessel="CVN76",
            week_start="2024-05-13",
            compartments=[make_compartment("C-3", sqft=200, installer="Joe", vessel="CVN76")],
        ),
    ]


@pytest.mark.unit
class TestDashboardStats:
    def test_headline_figures(self, reports):
        stats = analytics_service.dashboard_stats(reports)

        assert stats.total_sqft == 350
        assert stats.compartment_count == 3
        assert stats.qc_passed_count == 1
        assert stats.qc_rate == 33
        assert stats.installer_count == 2
        assert stats.vessel_count == 2
        assert stats.avg_unit_size == 117

    def test_vessel_production_falls_back_to_report_vessel(self, reports):
        stats = analytics_service.dashboard_stats(reports)

        assert [(v.name, v.sqft) for v in stats.vessel_production] == [("CVN76", 200), ("CVN74", 150)]

    def test_phase_distribution_counts_latest_phase(self, reports):
        stats = analytics_service.dashboard_stats(reports)

        assert {c.name: c.value for c in stats.phase_distribution} == {"QC Passed": 1, "Prime": 1}

    def test_recent_activities_flatten_phases(self, reports):
        stats = analytics_service.dashboard_stats(reports)

        assert sorted(a.phase for a in stats.recent_activities) == ["Grind", "Prime", "QC Passed"]

    def test_stored_qc_flag_is_ignored(self):
        compartment = make_compartment("C-1").model_copy(update={"qc_passed": True})

        stats = analytics_service.dashboard_stats([make_report("1", compartments=[compartment])])

        assert stats.qc_passed_count == 0

    def test_qc_rate_rounds_half_up(self):
        compartments = [make_compartment("C-0", phases=["qc check"])]
        compartments += [make_compartment(f"C-{i}") for i in range(1, 8)]

        stats = analytics_service.dashboard_stats([make_report("1", compartments=compartments)])

        # 1 of 8 is 12.5%
        assert stats.qc_rate == 13

    def test_no_reports(self):
        stats = analytics_service.dashboard_stats([])

        assert stats.total_sqft == 0
        assert stats.qc_rate == 0
        assert stats.avg_unit_size == 0
        assert stats.recent_activities == []


@pytest.mark.unit
class TestTrendsAndShares:
    def test_weekly_trend_oldest_first(self, reports):
        trend = analytics_service.weekly_trend(list(reversed(reports)))

        assert [(p.week_start, p.sqft, p.entries) for p in trend] == [("2024-05-06", 150, 2), ("2024-05-13", 200, 1)]

    def test_weekly_trend_keeps_most_recent_weeks(self, reports):
        trend = analytics_service.weekly_trend(reports, weeks=1)

        assert [p.week_start for p in trend] == ["2024-05-13"]

    def test_installer_share(self, reports):
        shares = analytics_service.installer_share(reports)

        assert [s.name for s in shares] == ["Joe", "Ana"]
        assert shares[0].sqft == 300
        assert shares[0].percent == pytest.approx(300 / 350 * 100)

    def test_blank_installer_counted_as_unknown(self):
        report = make_report("1", compartments=[make_compartment(installer="")])

        assert [s.name for s in analytics_service.installer_share([report])] == ["Unknown"]


@pytest.mark.unit
class TestReportSearch:
    def test_matches_installer_case_insensitively(self, reports):
        assert [r.id for r in analytics_service.search_reports(reports, "ANA")] == ["1"]

    def test_newest_activity_first(self):
        older = make_report("1", created_at="2024-05-01T00:00:00.000Z", updated_at="2024-05-10T00:00:00.000Z")
        newer = make_report("2", created_at="2024-05-08T00:00:00.000Z")

        assert [r.id for r in analytics_service.search_reports([newer, older])] == ["1", "2"]

    def test_group_by_qc(self):
        done = make_report("1", compartments=[make_compartment(phases=["QC Inspected"])])
        partial = make_report(
            "2", compartments=[make_compartment("C-1", phases=["QC Pass"]), make_compartment("C-2")]
        )
        empty = make_report("3", compartments=[])

        groups = analytics_service.group_by_qc([done, partial, empty])

        assert [r.id for r in groups.done] == ["1"]
        assert [r.id for r in groups.active] == ["2", "3"]


@pytest.mark.unit
class TestPTPList:
    def test_search_ptps(self):
        ptps = [make_ptp("p1", location="CVN-74 Deck 2"), make_ptp("p2", location="CVN-76 Hangar")]

        assert [p.id for p in analytics_service.search_ptps(ptps, " hangar ")] == ["p2"]
        assert len(analytics_service.search_ptps(ptps, "")) == 2

    def test_sort_by_date_descending_by_default(self):
        ptps = [make_ptp("p1", date="2024-05-01"), make_ptp("p2", date="2024-05-09")]

        assert [p.id for p in analytics_service.sort_ptps(ptps)] == ["p2", "p1"]

    def test_sort_by_location_ascending(self):
        ptps = [make_ptp("p1", location="deck 3"), make_ptp("p2", location="Deck 2")]

        sorted_ptps = analytics_service.sort_ptps(ptps, key=PTPSortKey.LOCATION, descending=False)

        assert [p.id for p in sorted_ptps] == ["p2", "p1"]

    def test_list_stats(self):
        ptps = [
            make_ptp("p1", hazards=[Hazard.LADDERS], steps=[PTPStep(description="Prep")]),
            make_ptp("p2", complete=False, ppe=[]),
        ]

        stats = analytics_service.ptp_list_stats(ptps)

        assert stats.plans == 2
        assert stats.hazards == 1
        assert stats.ppe == 7
        assert stats.steps == 1
        assert stats.incomplete == 1
