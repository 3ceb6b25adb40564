"""JSON API for the crew terminal.

The process holds a single AppContext (one terminal, one signed-in foreman),
stored on ``app.state.ctx`` by the lifespan handler.
"""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field, ValidationError

from src.core.clock import time_based_id
from src.core.state import AppContext, ViewMode, find_by_id
from src.domain.audit import AuditLogEntry
from src.domain.ptp import PreTaskPlan, default_evaluation
from src.domain.report import EditLogEntry, WeeklyReport
from src.models.service_models import DashboardStats, InstallerShare, PTPListStats, ReportGroups, TrendPoint
from src.services import (
    analytics_service,
    audit_service,
    foreman_service,
    ptp_service,
    report_service,
    session_service,
    sync_service,
)


router = APIRouter(prefix="/api", tags=["terminal"])


class LoginRequest(BaseModel):
    name: str
    pin: str


class NavigateRequest(BaseModel):
    view: ViewMode


class BulkPrintRequest(BaseModel):
    ids: list[str] = Field(default_factory=list)


class PinUpdateRequest(BaseModel):
    pin: str


class ForemanCreateRequest(BaseModel):
    name: str
    pin: str


class ScriptUrlRequest(BaseModel):
    url: str


class ReportHistory(BaseModel):
    author: str
    last_editor: str | None
    updated_at: str | None
    edit_log: list[EditLogEntry]


class AuditRow(AuditLogEntry):
    kind: audit_service.ActionKind


class Dashboard(BaseModel):
    """Everything the dashboard screen renders."""

    stats: DashboardStats
    trend: list[TrendPoint]
    installers: list[InstallerShare]


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


Context = Annotated[AppContext, Depends(get_context)]


def require_identity(ctx: Context) -> AppContext:
    """Reject anonymous callers before any mutation runs."""
    if not ctx.state.is_authorized:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return ctx


AuthorizedContext = Annotated[AppContext, Depends(require_identity)]


def _outcome(ctx: AppContext, success: bool, **extra: Any) -> dict[str, Any]:
    return {"success": success, "toast": ctx.state.toast, **extra}


# ---- session ----


@router.get("/state")
async def get_state(ctx: Context) -> dict[str, Any]:
    state = ctx.state
    return {
        "current_user": state.current_user,
        "login_error": state.login_error,
        "view": state.view.value,
        "is_syncing": state.is_syncing,
        "toast": state.toast,
        "selected_bulk_ids": state.selected_bulk_ids,
        "counts": {
            "reports": len(state.reports),
            "deleted_reports": len(state.deleted_reports),
            "ptps": len(state.ptps),
            "deleted_ptps": len(state.deleted_ptps),
            "audit_logs": len(state.audit_logs),
            "foremen": len(state.foremen),
        },
    }


@router.post("/session/login")
async def login(body: LoginRequest, ctx: Context) -> dict[str, Any]:
    if not await session_service.login(ctx, name=body.name, pin=body.pin):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid name or PIN")
    return {"success": True, "current_user": ctx.state.current_user}


@router.post("/session/logout")
async def logout(ctx: Context) -> dict[str, Any]:
    await session_service.logout(ctx)
    return {"success": True}


@router.post("/navigate")
async def navigate(body: NavigateRequest, ctx: Context) -> dict[str, Any]:
    if not session_service.navigate(ctx, body.view):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return {"view": ctx.state.view.value}


@router.post("/sync")
async def sync(ctx: Context) -> dict[str, Any]:
    return _outcome(ctx, await sync_service.resync(ctx))


# ---- reports ----


@router.get("/reports")
async def list_reports(ctx: Context, q: str = "") -> list[WeeklyReport]:
    return analytics_service.search_reports(ctx.state.reports, q)


@router.get("/reports/deleted")
async def list_deleted_reports(ctx: AuthorizedContext, q: str = "") -> list[WeeklyReport]:
    return analytics_service.search_reports(ctx.state.deleted_reports, q)


@router.get("/reports/groups")
async def report_groups(ctx: Context) -> ReportGroups:
    """Active reports split by whether every compartment has passed QC."""
    return analytics_service.group_by_qc(ctx.state.reports)


@router.get("/reports/{report_id}")
async def get_report(report_id: str, ctx: Context) -> WeeklyReport:
    report = find_by_id(ctx.state.reports, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return report


@router.get("/reports/{report_id}/history")
async def report_history(report_id: str, ctx: AuthorizedContext) -> ReportHistory:
    report = find_by_id(ctx.state.reports, report_id) or find_by_id(ctx.state.deleted_reports, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Report {report_id} not found")
    return ReportHistory(
        author=report.display_author(),
        last_editor=report.last_editor,
        updated_at=report.updated_at,
        edit_log=report.edit_log,
    )


@router.post("/reports", status_code=status.HTTP_201_CREATED)
async def create_report(report: WeeklyReport, ctx: AuthorizedContext) -> WeeklyReport:
    stored = await report_service.create_report(ctx, report)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return stored


@router.put("/reports/{report_id}")
async def update_report(report_id: str, report: WeeklyReport, ctx: AuthorizedContext) -> WeeklyReport:
    report = report.model_copy(update={"id": report_id})
    stored = await report_service.update_report(ctx, report)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ctx.state.toast)
    return stored


@router.delete("/reports/{report_id}")
async def archive_report(report_id: str, ctx: AuthorizedContext) -> dict[str, Any]:
    return _outcome(ctx, await report_service.archive_report(ctx, report_id))


@router.post("/reports/{report_id}/restore")
async def restore_report(report_id: str, ctx: AuthorizedContext) -> dict[str, Any]:
    return _outcome(ctx, await report_service.restore_report(ctx, report_id))


# ---- safety plans ----


@router.get("/ptps")
async def list_ptps(
    ctx: AuthorizedContext,
    q: str = "",
    sort: analytics_service.PTPSortKey = analytics_service.PTPSortKey.DATE,
    order: Annotated[str, Query(pattern="^(asc|desc)$")] = "desc",
) -> list[PreTaskPlan]:
    found = analytics_service.search_ptps(ctx.state.ptps, q)
    return analytics_service.sort_ptps(found, key=sort, descending=order == "desc")


@router.get("/ptps/stats")
async def ptp_stats(ctx: AuthorizedContext, q: str = "") -> PTPListStats:
    return analytics_service.ptp_list_stats(analytics_service.search_ptps(ctx.state.ptps, q))


@router.get("/ptps/deleted")
async def list_deleted_ptps(ctx: AuthorizedContext) -> list[PreTaskPlan]:
    return ctx.state.deleted_ptps


@router.get("/ptps/template")
async def ptp_template(ctx: AuthorizedContext) -> PreTaskPlan:
    """Blank plan pre-filled the way the new-plan form starts out."""
    return PreTaskPlan(
        id=time_based_id(),
        date=date.today().isoformat(),
        supervisor=ctx.state.current_user or "",
        evaluation=default_evaluation(),
    )


@router.post("/ptps", status_code=status.HTTP_201_CREATED)
async def create_ptp(ptp: PreTaskPlan, ctx: AuthorizedContext) -> PreTaskPlan:
    stored = await ptp_service.create_ptp(ctx, ptp)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in required")
    return stored


@router.put("/ptps/{ptp_id}")
async def update_ptp(ptp_id: str, ptp: PreTaskPlan, ctx: AuthorizedContext) -> PreTaskPlan:
    ptp = ptp.model_copy(update={"id": ptp_id})
    stored = await ptp_service.update_ptp(ctx, ptp)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ctx.state.toast)
    return stored


@router.delete("/ptps/{ptp_id}")
async def archive_ptp(ptp_id: str, ctx: AuthorizedContext) -> dict[str, Any]:
    return _outcome(ctx, await ptp_service.archive_ptp(ctx, ptp_id))


@router.post("/ptps/{ptp_id}/restore")
async def restore_ptp(ptp_id: str, ctx: AuthorizedContext) -> dict[str, Any]:
    return _outcome(ctx, await ptp_service.restore_ptp(ctx, ptp_id))


@router.post("/ptps/bulk-print")
async def bulk_print(body: BulkPrintRequest, ctx: AuthorizedContext) -> dict[str, Any]:
    selected = await ptp_service.record_bulk_print(ctx, body.ids)
    return {"selected": selected, "view": ctx.state.view.value}


# ---- dashboard & audit ----


@router.get("/dashboard")
async def dashboard(ctx: Context) -> Dashboard:
    reports = ctx.state.reports
    return Dashboard(
        stats=analytics_service.dashboard_stats(reports),
        trend=analytics_service.weekly_trend(reports),
        installers=analytics_service.installer_share(reports),
    )


@router.get("/audit")
async def audit_log(ctx: AuthorizedContext, q: str = "") -> list[AuditRow]:
    return [
        AuditRow(**entry.model_dump(), kind=audit_service.action_kind(entry.action))
        for entry in audit_service.search_audit_logs(ctx.state.audit_logs, q)
    ]


# ---- foremen & settings ----


@router.get("/foremen")
async def list_foremen(ctx: AuthorizedContext) -> list[str]:
    # PINs never leave the process
    return [f.name for f in ctx.state.foremen]


@router.put("/foremen/me/pin")
async def update_my_pin(body: PinUpdateRequest, ctx: AuthorizedContext) -> dict[str, Any]:
    try:
        success = await foreman_service.update_my_pin(ctx, new_pin=body.pin)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail="PIN must be 4 digits") from e
    return _outcome(ctx, success)


@router.post("/foremen", status_code=status.HTTP_201_CREATED)
async def add_foreman(body: ForemanCreateRequest, ctx: AuthorizedContext) -> dict[str, Any]:
    try:
        success = await foreman_service.add_foreman(ctx, name=body.name, pin=body.pin)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _outcome(ctx, success)


@router.delete("/foremen/{name}")
async def remove_foreman(name: str, ctx: AuthorizedContext) -> dict[str, Any]:
    try:
        success = await foreman_service.remove_foreman(ctx, name=name)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return _outcome(ctx, success)


@router.put("/settings/script-url")
async def set_script_url(body: ScriptUrlRequest, ctx: AuthorizedContext) -> dict[str, Any]:
    return {"url": foreman_service.set_script_url(ctx, url=body.url)}
