"""Audit log domain model."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.domain.ids import coerce_id


class AuditLogEntry(BaseModel):
    """Append-only record of a state-changing action."""

    id: str = Field(..., description="Time-based unique id")
    timestamp: str = Field(..., description="When the action happened (ISO format)")
    user: str = Field(..., description="Acting foreman")
    action: str = Field(..., description="Action label (e.g. 'Delete Report')")
    details: str = Field(default="", description="Human-readable summary")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identity(cls, v: object) -> str:
        return coerce_id(v)

    @field_validator("user", "action", "details", "timestamp", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else str(v)


class AuditAction(StrEnum):
    """Action labels written to the audit sheet."""

    CREATE_REPORT = "Create Report"
    UPDATE_REPORT = "Update Report"
    DELETE_REPORT = "Delete Report"
    RESTORE_REPORT = "Restore Report"
    CREATE_PTP = "Create PTP"
    UPDATE_PTP = "Update PTP"
    DELETE_PTP = "Delete PTP"
    RESTORE_PTP = "Restore PTP"
    BULK_PRINT_PTP = "Bulk Print PTP"
    FOREMAN_LOGIN = "Foreman Login"
    FOREMAN_LOGOUT = "Foreman Logout"
