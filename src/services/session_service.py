"""Foreman sign-in, sign-out and view navigation."""

import logging

from src.core.config import constants
from src.core.logging import span
from src.core.state import PUBLIC_VIEWS, AppContext, ViewMode
from src.domain.audit import AuditAction
from src.services import audit_service


logger = logging.getLogger(__name__)


def _matches_fallback_admin(name: str, pin: str) -> bool:
    return name == constants.ADMIN_NAME and pin == constants.ADMIN_PIN


async def login(ctx: AppContext, *, name: str, pin: str) -> bool:
    """Sign a foreman in by name and PIN.

    The built-in Admin/1234 pair always works so a fresh sheet with no
    foremen can still be set up. On success the identity is persisted to
    local config and the login is audited under the new identity. On failure
    only the login error flag changes.

    Returns:
        True if the credentials were accepted
    """
    with span("session_service.login"):
        state = ctx.state

        if _matches_fallback_admin(name, pin):
            identity = constants.ADMIN_NAME
        else:
            foreman = next((f for f in state.foremen if f.name == name), None)
            if foreman is None or foreman.pin != pin:
                state.login_error = True
                logger.warning("login_failed", extra={"name": name})
                return False
            identity = foreman.name

        state.current_user = identity
        state.login_error = False
        ctx.local_config.set(constants.ACTIVE_FOREMAN_KEY, identity)
        logger.info("login_succeeded", extra={"user": identity})

        await audit_service.record(
            ctx, AuditAction.FOREMAN_LOGIN, f"Identity: {identity}", actor_override=identity
        )
        return True


async def logout(ctx: AppContext) -> None:
    """Audit the sign-out, then forget the identity everywhere."""
    with span("session_service.logout"):
        state = ctx.state
        if state.current_user:
            await audit_service.record(ctx, AuditAction.FOREMAN_LOGOUT, f"Identity: {state.current_user}")
            logger.info("logout", extra={"user": state.current_user})

        state.current_user = None
        ctx.local_config.delete(constants.ACTIVE_FOREMAN_KEY)
        state.view = ViewMode.DASHBOARD


def restore_session(ctx: AppContext) -> str | None:
    """Reload the persisted identity into state. Returns the identity, if any."""
    identity = ctx.local_config.get(constants.ACTIVE_FOREMAN_KEY)
    ctx.state.current_user = identity or None
    return ctx.state.current_user


def navigate(ctx: AppContext, view: ViewMode) -> bool:
    """Switch views. Anonymous users are limited to the dashboard and report list.

    Returns:
        False if sign-in is required first
    """
    state = ctx.state
    if not state.is_authorized and view not in PUBLIC_VIEWS:
        logger.info("navigation_requires_login", extra={"view": view.value})
        return False

    state.view = view
    state.selected_bulk_ids = []
    return True
