"""Pre-Task Plan (PTP) domain models and their closed vocabularies."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.domain.ids import coerce_id
from src.domain.report import WIRE_CONFIG


class EvaluationQuestion(StrEnum):
    """The fifteen yes/no questions every PTP must answer."""

    WALKED_AREA = "walkedArea"
    LIVE_SYSTEMS = "liveSystems"
    SPECIAL_TRAINING = "specialTraining"
    MSDS_REVIEW = "msdsReview"
    AIR_MONITORING = "airMonitoring"
    WORK_PERMITS = "workPermits"
    EVACUATION_ROUTES = "evacuationRoutes"
    EMERGENCY_EQUIPMENT = "emergencyEquipment"
    CONGESTED_AREA = "congestedArea"
    PPE_NEEDED = "ppeNeeded"
    TOOLS_PROVIDED = "toolsProvided"
    TOOLS_INSPECTED = "toolsInspected"
    CONFINED_SPACE = "confinedSpace"
    SAFETY_DEPT_INVOLVED = "safetyDeptInvolved"
    SAFETY_ISSUE_NOT_ADDRESSED = "safetyIssueNotAddressed"

    @property
    def label(self) -> str:
        return EVALUATION_LABELS[self]


EVALUATION_LABELS: dict[EvaluationQuestion, str] = {
    EvaluationQuestion.WALKED_AREA: "Have you walked your area?",
    EvaluationQuestion.LIVE_SYSTEMS: "Working around live systems?",
    EvaluationQuestion.SPECIAL_TRAINING: "Special training required?",
    EvaluationQuestion.MSDS_REVIEW: "MSDS review necessary?",
    EvaluationQuestion.AIR_MONITORING: "Air monitoring required?",
    EvaluationQuestion.WORK_PERMITS: "Are work permits required for this task?",
    EvaluationQuestion.EVACUATION_ROUTES: "Are you familiar with evaluation routes?",
    EvaluationQuestion.EMERGENCY_EQUIPMENT: (
        "Has emergency equipment such as fire extinguishers, eyewash stations, "
        "safety showers, and phones been located?"
    ),
    EvaluationQuestion.CONGESTED_AREA: (
        "If the work area is congested, has the work plan been coordinated with other crafts?"
    ),
    EvaluationQuestion.PPE_NEEDED: "Do you have the PPE needed for this task?",
    EvaluationQuestion.TOOLS_PROVIDED: "Are the required materials and tools provided?",
    EvaluationQuestion.TOOLS_INSPECTED: "Have all tools/equipment been inspected before use?",
    EvaluationQuestion.CONFINED_SPACE: "Confined space involved?",
    EvaluationQuestion.SAFETY_DEPT_INVOLVED: "Safety Dept. involved in planning?",
    EvaluationQuestion.SAFETY_ISSUE_NOT_ADDRESSED: "Any unaddressed safety issues?",
}


class Hazard(StrEnum):
    """Hazard checklist vocabulary."""

    PINCH_POINTS = "Pinch Points"
    THERMAL_BURNS = "Thermal Burns"
    PARTICLES_IN_EYES = "Particles in Eyes"
    ELEVATED_WORK = "Elevated Work"
    POOR_HOUSEKEEPING = "Poor Housekeeping"
    ELECTRICAL_SHOCK = "Electrical Shock"
    CHEMICAL_BURNS = "Chemical Burns"
    FIRE_EXPLOSION = "Fire/Explosion"
    INADEQUATE_ACCESS = "Inadequate Access"
    HIGH_NOISE_LEVELS = "High Noise levels"
    FALLING_OBJECTS = "Falling Objects"
    MANUAL_LIFTING = "Manual Lifting"
    CHEMICAL_SPILL = "Chemical Spill"
    PLANT_OPERATIONS = "Plant Operations"
    SCAFFOLDING = "Scaffolding"
    MOBILE_EQUIPMENT = "Mobile Equipment"
    HAZARDOUS_CHEMICALS = "Hazardous Chemicals"
    HEAT_EXHAUSTION = "Heat Exhaustion/Stress"
    SHARP_OBJECTS = "Sharp Objects or Tools"
    RADIATION = "Radiation"
    EXCAVATIONS = "Excavations"
    LOCKOUT_TAGOUT = "Lockout/Tagout"
    LADDERS = "Ladders"
    RIGGING = "Rigging"
    FALLS_FROM_ELEVATIONS = "Falls from Elevations"
    CONFINED_SPACES = "Confined Spaces"
    LINE_BREAKING = "Line Breaking"
    INHALATION_HAZARD = "Inhalation Hazard"
    CRITICAL_LIFT = "Critical Lift"
    OTHER = "Other"


class PPE(StrEnum):
    """Personal protective equipment vocabulary."""

    HARD_HAT = "Hard Hat"
    EYE_PROTECTION = "Eye Protection"
    EAR_PROTECTION = "Ear Protection"
    GLOVES = "Gloves"
    RESPIRATORS = "Respirators"
    SAFETY_BOOTS = "Safety Approved Boots"
    KNEE_PADS = "Knee Pads"


class PTPEvaluation(BaseModel):
    """Tri-state answers (True/False/None=unanswered) to the evaluation questions."""

    model_config = WIRE_CONFIG

    walked_area: bool | None = None
    live_systems: bool | None = None
    special_training: bool | None = None
    msds_review: bool | None = None
    air_monitoring: bool | None = None
    work_permits: bool | None = None
    evacuation_routes: bool | None = None
    emergency_equipment: bool | None = None
    congested_area: bool | None = None
    ppe_needed: bool | None = None
    tools_provided: bool | None = None
    tools_inspected: bool | None = None
    confined_space: bool | None = None
    safety_dept_involved: bool | None = None
    safety_issue_not_addressed: bool | None = None

    def answers(self) -> dict[EvaluationQuestion, bool | None]:
        """Answers keyed by question."""
        dumped = self.model_dump(by_alias=True)
        return {question: dumped[question.value] for question in EvaluationQuestion}

    def answer(self, question: EvaluationQuestion) -> bool | None:
        return self.answers()[question]

    def is_complete(self) -> bool:
        return all(value is not None for value in self.answers().values())

    def unanswered(self) -> list[EvaluationQuestion]:
        return [q for q, value in self.answers().items() if value is None]


def default_evaluation() -> PTPEvaluation:
    """Defaults pre-filled on a new PTP form; three questions start unanswered."""
    return PTPEvaluation(
        walked_area=True,
        live_systems=None,
        special_training=False,
        msds_review=False,
        air_monitoring=False,
        work_permits=True,
        evacuation_routes=True,
        emergency_equipment=True,
        congested_area=None,
        ppe_needed=True,
        tools_provided=True,
        tools_inspected=True,
        confined_space=None,
        safety_dept_involved=False,
        safety_issue_not_addressed=False,
    )


class PTPStep(BaseModel):
    """One step of the task with its hazards and mitigating actions."""

    model_config = WIRE_CONFIG

    description: str = ""
    hazards: str = ""
    actions: str = ""


def _dedupe(values: list) -> list:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class PreTaskPlan(BaseModel):
    """Safety pre-task plan document."""

    model_config = WIRE_CONFIG

    id: str = Field(..., description="Stable PTP id")
    date: str = Field(default="", description="Date of the task")
    description: str = Field(default="", description="Task description")
    supervisor: str = Field(default="", description="Supervising foreman")
    location: str = Field(default="", description="Location of the task (e.g. 'CVN-74 Deck 2')")
    company: str = Field(default="Marine Flooring LLC", description="Performing company")
    evaluation: PTPEvaluation = Field(default_factory=PTPEvaluation)
    hazards: list[Hazard] = Field(default_factory=list, description="Selected hazards")
    ppe: list[PPE] = Field(default_factory=lambda: list(PPE), description="Selected PPE")
    steps: list[PTPStep] = Field(default_factory=list)
    author: str = Field(default="", description="Foreman who created the plan")
    created_at: str = Field(default="", description="Creation timestamp (ISO format)")
    updated_at: str | None = Field(default=None, description="Last modification timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_identity(cls, v: object) -> str:
        return coerce_id(v)

    @field_validator("hazards", "ppe", mode="after")
    @classmethod
    def unique_selection(cls, v: list) -> list:
        return _dedupe(v)

    def is_complete(self) -> bool:
        """A PTP is complete when every evaluation question has an answer."""
        return self.evaluation.is_complete()

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
