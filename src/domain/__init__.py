"""Domain models and DTOs."""

from src.domain.audit import AuditAction, AuditLogEntry
from src.domain.foreman import Foreman
from src.domain.ptp import PPE, EvaluationQuestion, Hazard, PreTaskPlan, PTPEvaluation, PTPStep
from src.domain.report import Compartment, EditAction, EditLogEntry, WeeklyReport, WorkPhase


__all__ = [
    "PPE",
    "AuditAction",
    "AuditLogEntry",
    "Compartment",
    "EditAction",
    "EditLogEntry",
    "EvaluationQuestion",
    "Foreman",
    "Hazard",
    "PTPEvaluation",
    "PTPStep",
    "PreTaskPlan",
    "WeeklyReport",
    "WorkPhase",
]
