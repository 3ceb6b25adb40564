"""Spreadsheet row schema and normalization.

The Apps Script backend returns each sheet as a list of objects keyed by the
sheet's header row (``ID``, ``Vessel``, ``CompartmentsData`` ...). Rows written
by older clients also carry camelCase or alternate keys (``author``,
``Foreman``). This module is the only place that knows about those variants:
everything past it works with the canonical domain models.
"""

import json
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from src.core.config import constants
from src.domain.audit import AuditLogEntry
from src.domain.foreman import Foreman
from src.domain.ids import coerce_id
from src.domain.ptp import PPE, Hazard, PreTaskPlan
from src.domain.report import WeeklyReport


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Canonical field -> accepted source keys, first non-empty wins
REPORT_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "Id"),
    "vessel": ("vessel", "Vessel"),
    "weekStart": ("weekStart", "WeekStart", "Week Start"),
    "weekEnd": ("weekEnd", "WeekEnd", "Week End"),
    "compartments": ("compartments", "CompartmentsData", "Compartments"),
    "createdAt": ("createdAt", "CreatedAt"),
    "author": ("author", "Author", "Foreman", "foreman"),
    "lastEditor": ("lastEditor", "LastEditor"),
    "updatedAt": ("updatedAt", "UpdatedAt"),
    "editLog": ("editLog", "EditLog"),
}
PTP_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "Id"),
    "date": ("date", "Date"),
    "description": ("description", "Description"),
    "supervisor": ("supervisor", "Supervisor"),
    "location": ("location", "Location"),
    "company": ("company", "Company"),
    "evaluation": ("evaluation", "Evaluation"),
    "hazards": ("hazards", "Hazards"),
    "ppe": ("ppe", "PPE", "Ppe"),
    "steps": ("steps", "Steps"),
    "author": ("author", "Author", "Foreman", "foreman"),
    "createdAt": ("createdAt", "CreatedAt"),
    "updatedAt": ("updatedAt", "UpdatedAt"),
}
FOREMAN_FIELDS: dict[str, tuple[str, ...]] = {
    "name": ("name", "Name"),
    "pin": ("pin", "PIN", "Pin"),
}
AUDIT_FIELDS: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "Id"),
    "timestamp": ("timestamp", "Timestamp"),
    "user": ("user", "User"),
    "action": ("action", "Action"),
    "details": ("details", "Details"),
}

_DATE_SPLIT = re.compile(r"[-/T ]")


def _pick(row: dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _remap(row: dict[str, Any], fields: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    remapped = {}
    for canonical, keys in fields.items():
        value = _pick(row, keys)
        if value is not None:
            remapped[canonical] = value
    return remapped


def parse_json_cell(value: Any, default: T) -> Any | T:
    """Decode a JSON-encoded cell, returning default for blanks or bad JSON."""
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning("sheet_cell_not_json", extra={"preview": value[:80]})
        return default


def normalize_date(value: Any) -> str:
    """Render YYYY-MM-DD, MM/DD/YYYY or ISO timestamps as YYYY-MM-DD."""
    if value is None:
        return ""
    text = str(value).strip()
    parts = _DATE_SPLIT.split(text)
    if len(parts) >= 3:  # noqa: PLR2004
        if len(parts[0]) == 4:  # noqa: PLR2004
            year, month, day = parts[0], parts[1], parts[2]
        elif len(parts[2]) == 4:  # noqa: PLR2004
            month, day, year = parts[0], parts[1], parts[2]
        else:
            return text
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return text


def normalize_pin(value: Any) -> str:
    """Sheets turn '0123' into 123; restore the leading zeros."""
    pin = coerce_id(value)
    if pin.isdigit():
        return pin.zfill(constants.PIN_LENGTH)
    return pin


def _closed_vocabulary(values: Iterable[Any], vocabulary: type[Hazard] | type[PPE], *, record_id: str) -> list[str]:
    known = {member.value for member in vocabulary}
    selected = []
    for value in values:
        label = str(value)
        if label in known:
            selected.append(label)
        else:
            logger.warning(
                "sheet_unknown_vocabulary_label",
                extra={"record_id": record_id, "vocabulary": vocabulary.__name__, "label": label},
            )
    return selected


def _compartments(raw: Any, *, report_id: str) -> list[dict[str, Any]]:
    items = parse_json_cell(raw, [])
    if not isinstance(items, list):
        return []
    compartments = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        comp = dict(item)
        if not coerce_id(comp.get("id")):
            comp["id"] = f"{report_id}-{index}"
        comp["phases"] = [p for p in comp.get("phases") or [] if isinstance(p, dict)]
        compartments.append(comp)
    return compartments


def normalize_report(row: dict[str, Any]) -> WeeklyReport:
    """Map one report row onto the canonical model."""
    data = _remap(row, REPORT_FIELDS)
    report_id = coerce_id(data.get("id"))
    data["id"] = report_id
    data["weekStart"] = normalize_date(data.get("weekStart"))
    data["weekEnd"] = normalize_date(data.get("weekEnd"))
    data["compartments"] = _compartments(data.get("compartments"), report_id=report_id)
    edit_log = parse_json_cell(data.get("editLog"), [])
    if not isinstance(edit_log, list):
        edit_log = []
    data["editLog"] = [
        entry for entry in edit_log if isinstance(entry, dict) and entry.get("action") in ("created", "edited")
    ]
    for key in ("vessel", "createdAt", "author", "lastEditor", "updatedAt"):
        if key in data:
            data[key] = str(data[key])
    return WeeklyReport.model_validate(data)


def normalize_ptp(row: dict[str, Any]) -> PreTaskPlan:
    """Map one PTP row onto the canonical model."""
    data = _remap(row, PTP_FIELDS)
    ptp_id = coerce_id(data.get("id"))
    data["id"] = ptp_id
    data["date"] = normalize_date(data.get("date"))
    evaluation = parse_json_cell(data.get("evaluation"), {})
    data["evaluation"] = evaluation if isinstance(evaluation, dict) else {}
    hazards = parse_json_cell(data.get("hazards"), [])
    data["hazards"] = _closed_vocabulary(hazards if isinstance(hazards, list) else [], Hazard, record_id=ptp_id)
    if "ppe" in data:
        ppe = parse_json_cell(data.get("ppe"), [])
        data["ppe"] = _closed_vocabulary(ppe if isinstance(ppe, list) else [], PPE, record_id=ptp_id)
    else:
        data["ppe"] = []
    steps = parse_json_cell(data.get("steps"), [])
    data["steps"] = [s for s in steps if isinstance(s, dict)] if isinstance(steps, list) else []
    for key in ("description", "supervisor", "location", "company", "author", "createdAt", "updatedAt"):
        if key in data:
            data[key] = str(data[key])
    return PreTaskPlan.model_validate(data)


def normalize_foreman(row: dict[str, Any]) -> Foreman:
    data = _remap(row, FOREMAN_FIELDS)
    return Foreman(name=str(data.get("name", "")), pin=normalize_pin(data.get("pin")))


def normalize_audit_entry(row: dict[str, Any]) -> AuditLogEntry:
    data = _remap(row, AUDIT_FIELDS)
    data["id"] = coerce_id(data.get("id"))
    data.setdefault("timestamp", "")
    data.setdefault("user", "")
    data.setdefault("action", "")
    return AuditLogEntry.model_validate(data)


def normalize_rows(rows: Any, normalizer: Callable[[dict[str, Any]], T], *, collection: str) -> list[T]:
    """Normalize every row, skipping (and logging) rows that fail validation."""
    if not isinstance(rows, list):
        logger.warning("sheet_payload_not_a_list", extra={"collection": collection, "type": type(rows).__name__})
        return []
    records = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            continue
        try:
            records.append(normalizer(row))
        except (ValidationError, ValueError) as e:
            logger.warning(
                "sheet_row_skipped",
                extra={"collection": collection, "row_index": index, "error": str(e)},
            )
    return records
