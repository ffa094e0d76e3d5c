"""Hook dispatchers - one per lifecycle event."""
from notifier_hooks.dispatchers.base import SimpleDispatcher
from notifier_hooks.dispatchers.permission import PermissionDispatcher
from notifier_hooks.dispatchers.stop import DurationDecision, StopDispatcher, evaluate_duration
from notifier_hooks.dispatchers.user_prompt import UserPromptDispatcher

DISPATCHERS = {
    cls.COMMAND: cls
    for cls in (UserPromptDispatcher, StopDispatcher, PermissionDispatcher)
}

__all__ = [
    "DISPATCHERS",
    "DurationDecision",
    "PermissionDispatcher",
    "SimpleDispatcher",
    "StopDispatcher",
    "UserPromptDispatcher",
    "evaluate_duration",
]
