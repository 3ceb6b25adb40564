"""Foreman roster management and the backend endpoint override."""

import logging

from src.core.config import constants
from src.core.errors import error_message
from src.core.logging import span
from src.core.state import AppContext
from src.domain.foreman import Foreman
from src.services import sync_service


logger = logging.getLogger(__name__)


def _require_admin(ctx: AppContext, operation: str) -> None:
    if ctx.state.current_user != constants.ADMIN_NAME:
        msg = f"Only {constants.ADMIN_NAME} can {operation}"
        logger.warning("admin_required", extra={"operation": operation, "user": ctx.state.current_user})
        raise PermissionError(msg)


async def update_my_pin(ctx: AppContext, *, new_pin: str) -> bool:
    """Change the signed-in foreman's own PIN.

    Raises:
        PermissionError: If nobody is signed in
        ValueError: If new_pin is not 4 digits
    """
    with span("foreman_service.update_my_pin"):
        # Guard: must be signed in
        if not ctx.state.current_user:
            raise PermissionError("Sign in to change your PIN")

        foreman = Foreman(name=ctx.state.current_user, pin=new_pin)
        try:
            success = await ctx.store.upsert_foreman(foreman)
        except Exception as e:
            logger.error("pin_update_failed", extra={"user": foreman.name, "error": error_message(e)})
            ctx.state.show_toast("Error updating PIN.")
            return False

        if success:
            ctx.state.show_toast("PIN updated.")
            await sync_service.resync(ctx)
        return success


async def add_foreman(ctx: AppContext, *, name: str, pin: str) -> bool:
    """Register a foreman (or reset an existing one's PIN). Admin only.

    Raises:
        PermissionError: If the caller is not Admin
        ValueError: If name is empty or pin is not 4 digits
    """
    with span("foreman_service.add_foreman"):
        # Guard: Verify admin privileges
        _require_admin(ctx, "add foremen")

        foreman = Foreman(name=name, pin=pin)
        try:
            await ctx.store.upsert_foreman(foreman)
        except Exception as e:
            logger.error("foreman_add_failed", extra={"foreman": foreman.name, "error": error_message(e)})
            ctx.state.show_toast("Failed.")
            return False

        logger.info("foreman_added", extra={"foreman": foreman.name})
        ctx.state.show_toast(f"Added {foreman.name}.")
        await sync_service.resync(ctx)
        return True


async def remove_foreman(ctx: AppContext, *, name: str) -> bool:
    """Remove a foreman. Admin only; the Admin account itself cannot be removed.

    Raises:
        PermissionError: If the caller is not Admin or name is Admin
    """
    with span("foreman_service.remove_foreman"):
        # Guard: Verify admin privileges
        _require_admin(ctx, "remove foremen")

        # Guard: Admin is the recovery account
        if name == constants.ADMIN_NAME:
            raise PermissionError(f"{constants.ADMIN_NAME} cannot be removed")

        try:
            await ctx.store.delete_foreman(name)
        except Exception as e:
            logger.error("foreman_remove_failed", extra={"foreman": name, "error": error_message(e)})
            ctx.state.show_toast("Failed.")
            return False

        logger.info("foreman_removed", extra={"foreman": name})
        await sync_service.resync(ctx)
        return True


def set_script_url(ctx: AppContext, *, url: str) -> str:
    """Persist a backend endpoint override.

    The override takes effect the next time the app starts. Only Apps Script
    URLs are honoured; anything else falls back to the configured endpoint.

    Returns:
        The stored URL
    """
    url = url.strip()
    ctx.local_config.set(constants.SCRIPT_URL_KEY, url)
    if not url.startswith(constants.SCRIPT_URL_PREFIX):
        logger.warning("script_url_not_apps_script", extra={"url": url})
    ctx.state.show_toast("Script URL saved. Restart to apply.")
    return url
