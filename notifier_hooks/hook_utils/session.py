"""
Session-scoped state for one task lifecycle.

Each field of a session record is an independent plain-text file named
``<field>-<session_id>`` under STATE_DIR, so a failed write of one field
never corrupts the others. MemorySessionStore offers the same interface
backed by cachetools for hosts that keep a single long-running process.
"""
import os
import time
from pathlib import Path

from cachetools import TTLCache

from notifier_hooks.config import STATE_DIR, Timeouts
from .io import atomic_write_text, safe_mtime, safe_read_text, safe_unlink
from .logging import log_event

# Field names double as file name prefixes
START = "start"
PROMPT = "prompt"
WINDOW = "window"
FIELDS = (START, PROMPT, WINDOW)

DEFAULT_SESSION_ID = "default"


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds, the unit of the start field."""
    return int(time.time() * 1000)


def get_session_id(ctx: dict = None) -> str:
    """Session ID from hook context, or "default" when absent."""
    if ctx and ctx.get("session_id"):
        return str(ctx["session_id"])
    return DEFAULT_SESSION_ID


def _safe_component(session_id: str) -> str:
    """Keep a session id from escaping the state directory."""
    for sep in (os.sep, os.altsep):
        if sep:
            session_id = session_id.replace(sep, "_")
    return session_id


class SessionStore:
    """Filesystem-backed per-session key-value record.

    No locking: one writer and one reader per session are assumed.

    Usage:
        store = SessionStore()
        store.put("abc", START, "1700000000000")
        store.get("abc", START)   # "1700000000000"
        store.clear("abc")
    """

    def __init__(self, base_dir: Path = None):
        self.base_dir = Path(base_dir) if base_dir else STATE_DIR

    def path(self, session_id: str, field: str) -> Path:
        """File backing one field of one session."""
        return self.base_dir / f"{field}-{_safe_component(session_id)}"

    def put(self, session_id: str, field: str, value: str) -> bool:
        """Write a field. Returns False if the write failed."""
        ok = atomic_write_text(self.path(session_id, field), str(value))
        if not ok:
            log_event("session_store", "write_failed", {"field": field, "session": session_id}, "warning")
        return ok

    def get(self, session_id: str, field: str) -> str | None:
        return safe_read_text(self.path(session_id, field))

    def exists(self, session_id: str, field: str) -> bool:
        return self.path(session_id, field).is_file()

    def delete(self, session_id: str, field: str) -> bool:
        return safe_unlink(self.path(session_id, field))

    def clear(self, session_id: str):
        """Delete every field of a session."""
        for field in FIELDS:
            self.delete(session_id, field)

    def cleanup_stale(self, max_age_secs: int = Timeouts.STATE_MAX_AGE) -> int:
        """Remove field files left behind by sessions that never stopped.

        Returns:
            Number of files removed
        """
        if not self.base_dir.is_dir():
            return 0

        cutoff = time.time() - max_age_secs
        removed = 0
        for field in FIELDS:
            for state_file in self.base_dir.glob(f"{field}-*"):
                if safe_mtime(state_file, default=cutoff) < cutoff and safe_unlink(state_file):
                    removed += 1
        if removed:
            log_event("session_store", "stale_removed", {"count": removed})
        return removed


class MemorySessionStore:
    """In-process session store with automatic expiry.

    Entries for abandoned sessions age out after max_age_secs instead of
    accumulating.
    """

    def __init__(self, max_age_secs: float = Timeouts.STATE_MAX_AGE, maxsize: int = 1024, timer=time.monotonic):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=max_age_secs, timer=timer)

    def put(self, session_id: str, field: str, value: str) -> bool:
        self._cache[(field, session_id)] = str(value)
        return True

    def get(self, session_id: str, field: str) -> str | None:
        return self._cache.get((field, session_id))

    def exists(self, session_id: str, field: str) -> bool:
        return (field, session_id) in self._cache

    def delete(self, session_id: str, field: str) -> bool:
        return self._cache.pop((field, session_id), None) is not None

    def clear(self, session_id: str):
        for field in FIELDS:
            self.delete(session_id, field)

    def cleanup_stale(self, max_age_secs: int = None) -> int:
        """Expire outdated entries. max_age_secs is fixed at construction."""
        before = len(self._cache)
        self._cache.expire()
        return before - len(self._cache)
