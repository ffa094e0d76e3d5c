"""
UserPromptSubmit Dispatcher - start the task timer.

Records, per session:
- start: submission time in epoch milliseconds
- prompt: first 50 characters of the prompt (if any)
- window: handle of the terminal window in the foreground (if capturable)

The Stop dispatcher reads these back to decide on a completion notification.
"""
from notifier_hooks.config import Thresholds
from notifier_hooks.dispatchers.base import SimpleDispatcher
from notifier_hooks.hook_utils import (
    PROMPT,
    START,
    WINDOW,
    capture_window_handle,
    get_session_id,
    log_event,
    now_ms,
)


class UserPromptDispatcher(SimpleDispatcher):
    """Record start time, prompt excerpt and terminal window."""
    DISPATCHER_NAME = "start_timer"
    COMMAND = "start-timer"

    def handle(self, ctx: dict) -> None:
        session_id = get_session_id(ctx)
        prompt = ctx.get("prompt") or ""
        if not isinstance(prompt, str):
            prompt = str(prompt)

        self.store.cleanup_stale()
        self.store.put(session_id, START, str(now_ms()))

        if prompt:
            self.store.put(session_id, PROMPT, prompt[:Thresholds.EXCERPT_LENGTH])

        window_handle = capture_window_handle()
        if window_handle:
            self.store.put(session_id, WINDOW, window_handle)

        log_event(self.DISPATCHER_NAME, "started", {
            "session": session_id,
            "has_prompt": bool(prompt),
            "has_window": bool(window_handle),
        })
