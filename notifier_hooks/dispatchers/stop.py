"""
Stop Dispatcher - notify when a long task completes.

Compares the time since the session's prompt was submitted against
Thresholds.DURATION. Long tasks get a "Completed" notification that
refocuses the originating terminal on click. The session record is
removed afterwards whether or not a notification was sent.
"""
from dataclasses import dataclass

from notifier_hooks.config import APP_NAME, Thresholds
from notifier_hooks.dispatchers.base import SimpleDispatcher
from notifier_hooks.hook_utils import (
    PROMPT,
    START,
    WINDOW,
    get_session_id,
    log_event,
    notify,
    now_ms,
    t,
)


@dataclass
class DurationDecision:
    """Outcome of evaluating a session's elapsed time."""
    found: bool
    notify: bool = False
    duration_seconds: int | None = None
    message: str | None = None
    window_handle: str | None = None


def format_completion_message(duration_seconds: int, prompt: str | None = None) -> str:
    """'Completed (75seconds)', plus the prompt excerpt on a second line."""
    message = f"{t('completed')} ({duration_seconds}{t('seconds')})"
    if prompt:
        message += f"\n{prompt}..."
    return message


def evaluate_duration(session_id: str, store, now: int = None, threshold: int = None) -> DurationDecision:
    """
    Decide whether the session ran long enough to notify.

    Args:
        session_id: Session to evaluate
        store: SessionStore (or MemorySessionStore) holding the record
        now: Current time in epoch milliseconds (defaults to the clock)
        threshold: Minimum duration in seconds (defaults to Thresholds.DURATION)

    Returns:
        DurationDecision; found=False when the session was never started.
        A found session's fields are always deleted.
    """
    start = store.get(session_id, START)
    if start is None:
        return DurationDecision(found=False)

    if now is None:
        now = now_ms()
    if threshold is None:
        threshold = Thresholds.DURATION

    try:
        try:
            duration = (now - int(start.strip())) // 1000
        except ValueError:
            log_event("check_duration", "corrupt_start", {"session": session_id}, "warning")
            return DurationDecision(found=True)

        # Negative when the clock moved backwards
        if duration < 0 or duration < threshold:
            return DurationDecision(found=True, duration_seconds=duration)

        return DurationDecision(
            found=True,
            notify=True,
            duration_seconds=duration,
            message=format_completion_message(duration, store.get(session_id, PROMPT)),
            window_handle=store.get(session_id, WINDOW),
        )
    finally:
        store.clear(session_id)


class StopDispatcher(SimpleDispatcher):
    """Notify if the task ran past the duration threshold."""
    DISPATCHER_NAME = "check_duration"
    COMMAND = "check-duration"

    def handle(self, ctx: dict) -> None:
        session_id = get_session_id(ctx)
        decision = evaluate_duration(session_id, self.store)

        if not decision.found:
            return

        if decision.notify:
            notify(APP_NAME, decision.message, window_handle=decision.window_handle)

        log_event(self.DISPATCHER_NAME, "notified" if decision.notify else "skipped", {
            "session": session_id,
            "duration": decision.duration_seconds,
        })
