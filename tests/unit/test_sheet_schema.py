"""Unit tests for spreadsheet row normalization."""

import json

import pytest

from src.core.sheet_schema import (
    normalize_audit_entry,
    normalize_date,
    normalize_foreman,
    normalize_pin,
    normalize_ptp,
    normalize_report,
    normalize_rows,
    parse_json_cell,
)
from src.domain.ptp import PPE, Hazard
from src.domain.report import EditAction


@pytest.fixture
def report_row():
    """A report row as the Reports sheet returns it."""
    return {
        "ID": 1718000000000.0,
        "Vessel": "CVN74",
        "WeekStart": "5/6/2024",
        "WeekEnd": "2024-05-12T07:00:00.000Z",
        "CompartmentsData": json.dumps(
            [
                {
                    "id": "c1",
                    "vessel": "CVN74",
                    "name": "3-45-0-L",
                    "type": "Deck",
                    "sqft": 120,
                    "installer": "Joe",
                    "phases": [{"date": "2024-05-07", "description": "Grind"}, "junk"],
                },
                {"name": "3-46-0-L", "sqft": None},
            ]
        ),
        "CreatedAt": "2024-05-06T09:00:00.000Z",
        "Author": "Joe",
        "LastEditor": "Ana",
        "UpdatedAt": "2024-05-08T09:00:00.000Z",
        "EditLog": json.dumps(
            [
                {"user": "Joe", "timestamp": "2024-05-06T09:00:00.000Z", "action": "created"},
                {"user": "Ana", "timestamp": "2024-05-08T09:00:00.000Z", "action": "edited"},
                {"user": "Bot", "timestamp": "2024-05-08T10:00:00.000Z", "action": "exported"},
            ]
        ),
    }


@pytest.mark.unit
class TestNormalizeReport:
    def test_header_keyed_row(self, report_row):
        report = normalize_report(report_row)

        assert report.id == "1718000000000"
        assert report.week_start == "2024-05-06"
        assert report.week_end == "2024-05-12"
        assert report.author == "Joe"
        assert report.last_editor == "Ana"
        assert [c.name for c in report.compartments] == ["3-45-0-L", "3-46-0-L"]

    def test_compartment_phases_drop_non_objects(self, report_row):
        report = normalize_report(report_row)

        assert [p.description for p in report.compartments[0].phases] == ["Grind"]

    def test_compartment_without_id_gets_positional_id(self, report_row):
        report = normalize_report(report_row)

        assert report.compartments[1].id == "1718000000000-1"
        assert report.compartments[1].sqft is None

    def test_edit_log_keeps_known_actions_only(self, report_row):
        report = normalize_report(report_row)

        assert [(e.user, e.action) for e in report.edit_log] == [
            ("Joe", EditAction.CREATED),
            ("Ana", EditAction.EDITED),
        ]

    def test_legacy_foreman_column_is_author(self):
        report = normalize_report({"id": 7, "vessel": "CVN76", "Foreman": "Ana"})

        assert report.id == "7"
        assert report.author == "Ana"
        assert report.compartments == []
        assert report.edit_log == []

    def test_camel_case_row(self):
        row = {
            "id": "9",
            "vessel": "CVN74",
            "weekStart": "2024-05-06",
            "compartments": [{"id": "a", "name": "C-1"}],
        }

        report = normalize_report(row)

        assert report.compartments[0].name == "C-1"

    def test_unparseable_compartments_cell(self):
        report = normalize_report({"ID": "1", "CompartmentsData": "[{broken"})

        assert report.compartments == []


@pytest.mark.unit
class TestNormalizePTP:
    def test_header_keyed_row(self):
        row = {
            "ID": "p1",
            "Date": "05/06/2024",
            "Description": "Deck grinding",
            "Supervisor": "Joe",
            "Location": "CVN-74 Deck 2",
            "Evaluation": json.dumps({"walkedArea": True, "liveSystems": False}),
            "Hazards": json.dumps(["Pinch Points", "Lava", "Pinch Points"]),
            "PPE": json.dumps(["Gloves", "Cape"]),
            "Steps": json.dumps([{"description": "Prep", "hazards": "Dust", "actions": "Mask"}, 3]),
            "Author": "Joe",
        }

        ptp = normalize_ptp(row)

        assert ptp.date == "2024-05-06"
        assert ptp.evaluation.walked_area is True
        assert ptp.evaluation.live_systems is False
        assert ptp.evaluation.confined_space is None
        assert ptp.hazards == [Hazard.PINCH_POINTS]
        assert ptp.ppe == [PPE.GLOVES]
        assert [s.description for s in ptp.steps] == ["Prep"]

    def test_missing_ppe_column_selects_nothing(self):
        ptp = normalize_ptp({"ID": "p2"})

        assert ptp.ppe == []
        assert ptp.hazards == []
        assert ptp.is_complete() is False


@pytest.mark.unit
class TestNormalizeForemanAndAudit:
    def test_pin_leading_zeros_restored(self):
        foreman = normalize_foreman({"Name": "Ana", "PIN": 7})

        assert foreman.pin == "0007"

    def test_audit_entry_with_blank_details(self):
        entry = normalize_audit_entry(
            {"ID": 1718.0, "Timestamp": "2024-05-06T09:00:00.000Z", "User": "Joe", "Action": "Create Report"}
        )

        assert entry.id == "1718"
        assert entry.details == ""


@pytest.mark.unit
class TestNormalizeRows:
    def test_invalid_rows_are_skipped(self):
        rows = [{"Name": "Ana", "PIN": "0007"}, {"Name": "Bad", "PIN": "abcd"}, "not a row", {"Name": "", "PIN": 1}]

        foremen = normalize_rows(rows, normalize_foreman, collection="foremen")

        assert [f.name for f in foremen] == ["Ana"]

    def test_non_list_payload(self):
        assert normalize_rows({"error": "oops"}, normalize_foreman, collection="foremen") == []


@pytest.mark.unit
class TestCellHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024-05-06", "2024-05-06"),
            ("2024-5-6", "2024-05-06"),
            ("5/6/2024", "2024-05-06"),
            ("2024-05-06T07:00:00.000Z", "2024-05-06"),
            ("", ""),
            (None, ""),
            ("next week", "next week"),
        ],
    )
    def test_normalize_date(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize(("value", "expected"), [(123, "0123"), (123.0, "0123"), ("4321", "4321")])
    def test_normalize_pin(self, value, expected):
        assert normalize_pin(value) == expected

    def test_parse_json_cell_passes_decoded_values_through(self):
        assert parse_json_cell(["a"], []) == ["a"]
        assert parse_json_cell("", []) == []
        assert parse_json_cell("{oops", {}) == {}
