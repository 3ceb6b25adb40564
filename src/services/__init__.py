from src.services import (
    analytics_service,
    audit_service,
    foreman_service,
    lifecycle_service,
    ptp_service,
    report_service,
    session_service,
    sync_service,
)


__all__ = [
    "analytics_service",
    "audit_service",
    "foreman_service",
    "lifecycle_service",
    "ptp_service",
    "report_service",
    "session_service",
    "sync_service",
]
