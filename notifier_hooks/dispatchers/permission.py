"""
PermissionRequest Dispatcher - tell the user a tool is waiting for approval.

Always notifies, with a longer display timeout than completion notices.
The session's window handle is read but left in place for the Stop
dispatcher.
"""
from notifier_hooks.config import APP_NAME, Thresholds, Timeouts
from notifier_hooks.dispatchers.base import SimpleDispatcher
from notifier_hooks.hook_utils import WINDOW, get_session_id, log_event, notify, t


def permission_detail(tool_input) -> str:
    """File path (preferred) or command from tool input, truncated."""
    if not isinstance(tool_input, dict):
        return ""
    detail = tool_input.get("file_path") or tool_input.get("command") or ""
    return str(detail)[:Thresholds.EXCERPT_LENGTH]


def format_permission_message(tool_name: str, detail: str = "") -> str:
    message = f"{t('permission_request')}: {tool_name}"
    if detail:
        message += f"\n{detail}..."
    return message


class PermissionDispatcher(SimpleDispatcher):
    """Notify that a tool is waiting for permission."""
    DISPATCHER_NAME = "permission_request"
    COMMAND = "permission-request"

    def handle(self, ctx: dict) -> None:
        session_id = get_session_id(ctx)
        tool_name = ctx.get("tool_name") or "unknown"
        detail = permission_detail(ctx.get("tool_input"))
        window_handle = self.store.get(session_id, WINDOW)

        notify(
            APP_NAME,
            format_permission_message(tool_name, detail),
            window_handle=window_handle,
            timeout=Timeouts.NOTIFY_PERMISSION,
        )
        log_event(self.DISPATCHER_NAME, "notified", {"session": session_id, "tool": tool_name})
