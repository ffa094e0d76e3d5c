"""
Logging and graceful degradation utilities.

Uses loguru for structured JSON logging with automatic rotation.
"""
import sys
from functools import wraps
from typing import Callable

import msgspec
from loguru import logger

from notifier_hooks.config import DATA_DIR, INVALID_ENV, LOG_FILE, fast_json_loads


# Configure loguru: JSON format, 10MB rotation, keep 3 files
# Remove default stderr handler, add file handler
logger.remove()
try:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        LOG_FILE,
        format="{message}",
        serialize=True,  # JSON output
        rotation="10 MB",
        retention=3,
        compression="gz",
        catch=True,  # Never raise
    )
except OSError:
    pass  # Unwritable data dir: run without a log sink


def log_event(hook_name: str, event_type: str, data: dict = None, level: str = "info"):
    """
    Log structured event using loguru.

    Args:
        hook_name: Name of the hook (e.g., "check_duration")
        event_type: Event type (e.g., "notified", "error")
        data: Additional context data
        level: Log level (debug, info, warning, error)
    """
    try:
        log_func = getattr(logger, level, logger.info)
        log_func(event_type, hook=hook_name, **(data or {}))
    except Exception:
        pass  # Never raise


def graceful_main(hook_name: str):
    """
    Decorator for hook main functions.
    Ensures graceful degradation - logs errors but never blocks the host.

    Usage:
        @graceful_main("my_hook")
        def main():
            # hook logic here
            pass
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_event(hook_name, "error", {"type": type(e).__name__, "msg": str(e)}, "error")
                return None
        return wrapper
    return decorator


def read_stdin_context() -> dict:
    """Read and parse stdin context using msgspec.

    Malformed or non-object input yields an empty dict.
    """
    try:
        data = sys.stdin.buffer.read()
        ctx = fast_json_loads(data) if data.strip() else {}
    except (msgspec.DecodeError, OSError, ValueError, AttributeError) as e:
        log_event("read_stdin_context", "parse_error", {"msg": str(e)}, "warning")
        return {}
    return ctx if isinstance(ctx, dict) else {}


for _name, _raw in INVALID_ENV.items():
    log_event("config", "invalid_env", {"name": _name, "value": _raw}, "warning")
