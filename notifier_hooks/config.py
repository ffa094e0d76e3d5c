"""
Centralized configuration for the notifier hooks.

All configurable constants in one place for easy tuning.
Individual modules import from here for consistency.

Categories:
- Paths: Data, state and asset locations
- Timeouts: External call bounds, display timeouts, state expiry
- Thresholds: Duration threshold and excerpt lengths
- JSON: msgspec-backed encode/decode helpers
"""
import os
import tempfile
from pathlib import Path

import msgspec

# =============================================================================
# Paths
# =============================================================================

APP_NAME = "Claude Code"
APP_NAMESPACE = "claude-code-notifier"

PACKAGE_DIR = Path(__file__).parent

DATA_DIR = Path(os.environ.get("CLAUDE_DATA_DIR", Path.home() / ".claude/data"))
LOG_FILE = DATA_DIR / "notifier-events.jsonl"

# Per-session field files live here: {start|prompt|window}-<session_id>
STATE_DIR = Path(os.environ.get(
    "CLAUDE_NOTIFIER_STATE_DIR",
    Path(tempfile.gettempdir()) / APP_NAMESPACE,
))

ICON_PATH = Path(os.environ.get(
    "CLAUDE_NOTIFIER_ICON",
    PACKAGE_DIR / "assets" / "claude-icon.png",
))

# Env overrides that could not be parsed: name -> raw value.
# Logged once the log sink is configured.
INVALID_ENV: dict[str, str] = {}


def env_int(name: str, default: int) -> int:
    """Integer override from the environment, default when unset or unparseable."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        INVALID_ENV[name] = raw
        return default


# =============================================================================
# Timeouts (seconds)
# =============================================================================

class Timeouts:
    """Timeout and interval settings."""
    # Locale query, window capture
    EXTERNAL_CALL = 3

    # Notification display
    NOTIFY_DEFAULT = 10
    NOTIFY_PERMISSION = 30
    # Extra time the notification worker waits beyond the display timeout
    NOTIFY_GRACE = 5

    # Resolved language is memoized for this long
    LANGUAGE_CACHE_TTL = 300

    # Session files older than this belong to abandoned sessions
    STATE_MAX_AGE = 86400


# =============================================================================
# Thresholds and Limits
# =============================================================================

class Thresholds:
    """Notification thresholds and limits."""
    # Seconds a task must run before a completion notification is sent
    DURATION = env_int("CLAUDE_NOTIFY_THRESHOLD", 60)

    # Prompt excerpt and permission detail length
    EXCERPT_LENGTH = 50


# =============================================================================
# Localized Messages
# =============================================================================

class Messages:
    """Message bundles keyed by two-letter language code."""
    BASE_LANGUAGE = "en"

    BUNDLES = {
        "en": {
            "completed": "Completed",
            "seconds": "seconds",
            "permission_request": "Permission Request",
            "click_to_focus": "Click to focus terminal",
        },
        "ko": {
            "completed": "완료",
            "seconds": "초",
            "permission_request": "권한 요청",
            "click_to_focus": "클릭하여 터미널로 이동",
        },
        "ja": {
            "completed": "完了",
            "seconds": "秒",
            "permission_request": "権限リクエスト",
            "click_to_focus": "クリックしてターミナルにフォーカス",
        },
        "zh": {
            "completed": "完成",
            "seconds": "秒",
            "permission_request": "权限请求",
            "click_to_focus": "点击聚焦终端",
        },
        "de": {
            "completed": "Abgeschlossen",
            "seconds": "Sekunden",
            "permission_request": "Berechtigungsanfrage",
            "click_to_focus": "Klicken zum Fokussieren des Terminals",
        },
        "fr": {
            "completed": "Terminé",
            "seconds": "secondes",
            "permission_request": "Demande de permission",
            "click_to_focus": "Cliquer pour focus le terminal",
        },
        "es": {
            "completed": "Completado",
            "seconds": "segundos",
            "permission_request": "Solicitud de permiso",
            "click_to_focus": "Clic para enfocar la terminal",
        },
    }

    SUPPORTED = frozenset(BUNDLES)


# =============================================================================
# JSON (msgspec)
# =============================================================================

def fast_json_loads(data: bytes | str):
    """Decode JSON via msgspec. Raises msgspec.DecodeError on bad input."""
    return msgspec.json.decode(data)


def fast_json_dumps(obj) -> bytes:
    """Encode JSON via msgspec."""
    return msgspec.json.encode(obj)
