"""Weekly report domain models: reports, compartments, phases and edit history."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.domain.ids import coerce_id
from src.domain.qc import is_qc_passed


WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EditAction(StrEnum):
    """Kinds of entries in a report's edit history."""

    CREATED = "created"
    EDITED = "edited"


class WorkPhase(BaseModel):
    """A dated unit of work performed in a compartment."""

    model_config = WIRE_CONFIG

    date: str = Field(default="", description="Date the phase was performed (YYYY-MM-DD)")
    description: str = Field(default="", description="Free-text description of the work")

    @field_validator("description", "date", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v


class Compartment(BaseModel):
    """A vessel compartment tracked inside a weekly report."""

    model_config = WIRE_CONFIG

    id: str = Field(..., description="Locally generated id, unique within its report")
    vessel: str = Field(default="", description="Vessel the compartment belongs to")
    name: str = Field(default="", description="Compartment designation (e.g. '3-45-0-L')")
    type: str = Field(default="General", description="Flooring/compartment type")
    start_date: str = Field(default="", description="Work start date")
    end_date: str = Field(default="", description="Work end date")
    sqft: int | float | None = Field(default=None, description="Square footage, empty until entered")
    installer: str = Field(default="", description="Lead installer")
    phases: list[WorkPhase] = Field(default_factory=list, description="Ordered work phases")
    qc_passed: bool = Field(
        default=False,
        description="Creation default only; completion is always derived from phases",
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identity(cls, v: object) -> str:
        return coerce_id(v)

    @field_validator("vessel", "name", "type", "installer", "start_date", "end_date", mode="before")
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("sqft", mode="before")
    @classmethod
    def blank_sqft_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_qc_passed(self) -> bool:
        """Completion state derived from phase descriptions."""
        return is_qc_passed(self.phases)

    def phase_summary(self) -> str:
        """Comma-joined phase descriptions, or 'None' when there are no phases."""
        return ", ".join(p.description for p in self.phases) or "None"


class EditLogEntry(BaseModel):
    """One entry of a report's append-only edit history."""

    model_config = WIRE_CONFIG

    user: str = Field(..., description="Foreman who performed the action")
    timestamp: str = Field(..., description="When the action happened (ISO format)")
    action: EditAction = Field(..., description="created or edited")


class WeeklyReport(BaseModel):
    """Weekly progress report for one vessel."""

    model_config = WIRE_CONFIG

    id: str = Field(..., description="Stable report id")
    vessel: str = Field(default="", description="Nominal vessel name")
    week_start: str = Field(default="", description="First day of the reporting week")
    week_end: str = Field(default="", description="Last day of the reporting week")
    compartments: list[Compartment] = Field(default_factory=list)
    created_at: str = Field(default="", description="Creation timestamp (ISO format)")
    author: str | None = Field(default=None, description="Foreman who created the report")
    last_editor: str | None = Field(default=None, description="Most recent modifier")
    updated_at: str | None = Field(default=None, description="Last modification timestamp")
    edit_log: list[EditLogEntry] = Field(default_factory=list, description="Append-only edit history")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identity(cls, v: object) -> str:
        return coerce_id(v)

    def compartment_names(self, *, empty: str = "No Units") -> str:
        """Comma-joined compartment names used in audit summaries."""
        return ", ".join(c.name for c in self.compartments) or empty

    def qc_passed_count(self) -> int:
        return sum(1 for c in self.compartments if c.is_qc_passed())

    def is_fully_passed(self) -> bool:
        """True when every compartment (and at least one) has passed QC."""
        return bool(self.compartments) and self.qc_passed_count() == len(self.compartments)

    def display_author(self) -> str:
        """Author for display, falling back to the 'created' edit log entry."""
        if self.author and self.author != "Unknown" and self.author.strip():
            return self.author
        for entry in self.edit_log:
            if entry.action == EditAction.CREATED and entry.user and entry.user != "Unknown":
                return entry.user
        return "Unknown"

    def to_wire(self) -> dict:
        """Serialize with the backend's camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
