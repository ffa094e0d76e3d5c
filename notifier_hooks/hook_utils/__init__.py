"""
Hook utilities package - shared building blocks for the notifier hooks.

Usage:
    from notifier_hooks.hook_utils import log_event, SessionStore, notify
    # or
    from notifier_hooks.hook_utils.session import SessionStore
"""
from .logging import (
    log_event,
    graceful_main,
    read_stdin_context,
)

from .i18n import (
    resolve_language,
    reset_language_cache,
    translate,
    t,
)

from .session import (
    FIELDS,
    PROMPT,
    START,
    WINDOW,
    MemorySessionStore,
    SessionStore,
    get_session_id,
    now_ms,
)

from .window import (
    WindowAdapter,
    activate_window,
    capture_window_handle,
    get_window_adapter,
)

from .notify import (
    NotificationUnavailable,
    is_notification_available,
    notify,
    send_notification,
)

__all__ = [
    # Logging
    "log_event",
    "graceful_main",
    "read_stdin_context",
    # Locale
    "resolve_language",
    "reset_language_cache",
    "translate",
    "t",
    # Session
    "FIELDS",
    "PROMPT",
    "START",
    "WINDOW",
    "MemorySessionStore",
    "SessionStore",
    "get_session_id",
    "now_ms",
    # Window
    "WindowAdapter",
    "activate_window",
    "capture_window_handle",
    "get_window_adapter",
    # Notifications
    "NotificationUnavailable",
    "is_notification_available",
    "notify",
    "send_notification",
]
