"""Pydantic models for service layer return types.

These models give the dashboard and list views typed results instead of
loose dictionaries.
"""

from pydantic import BaseModel, Field

from src.domain.report import WeeklyReport


class NamedCount(BaseModel):
    """A label with how often it occurs."""

    name: str
    value: int


class VesselProduction(BaseModel):
    """Square footage installed on one vessel."""

    name: str
    sqft: float


class RecentActivity(BaseModel):
    """One work phase, flattened for the activity feed."""

    vessel: str
    compartment: str
    phase: str
    date: str


class DashboardStats(BaseModel):
    """Headline production and quality figures across all active reports."""

    total_sqft: float
    compartment_count: int
    qc_passed_count: int
    qc_rate: int = Field(..., description="Percentage of compartments that passed QC, rounded")
    installer_count: int
    vessel_count: int
    avg_unit_size: int = Field(..., description="Mean square footage per compartment, rounded")
    phase_distribution: list[NamedCount] = Field(default_factory=list, description="Latest phase per compartment")
    vessel_production: list[VesselProduction] = Field(default_factory=list)
    recent_activities: list[RecentActivity] = Field(default_factory=list)


class TrendPoint(BaseModel):
    """Production for one reporting week."""

    week_start: str
    sqft: float
    entries: int


class InstallerShare(BaseModel):
    """An installer's share of total installed square footage."""

    name: str
    sqft: float
    percent: float


class PTPListStats(BaseModel):
    """Totals shown above the safety plan list."""

    plans: int
    hazards: int
    ppe: int
    steps: int
    incomplete: int


class ReportGroups(BaseModel):
    """Reports split by QC status."""

    active: list[WeeklyReport] = Field(default_factory=list, description="Reports with outstanding QC")
    done: list[WeeklyReport] = Field(default_factory=list, description="Reports whose compartments all passed QC")
