"""
Cross-platform notification abstraction with click-to-focus.

Backends: Linux (notify-send), macOS (terminal-notifier, falling back to
osascript), Windows (powershell toast). Falls back gracefully if the
notification system is unavailable.

The hook process exits right after a notification is requested, so
delivery happens in a detached worker (notifier_hooks.notify_worker) that
stays alive long enough to see the click and refocus the terminal.

Security: All user input is properly escaped to prevent command injection.
"""
import shutil
import subprocess
import sys
from typing import Callable

import msgspec

from notifier_hooks.config import (
    APP_NAME,
    ICON_PATH,
    Timeouts,
    fast_json_dumps,
    fast_json_loads,
)
from .i18n import t
from .logging import log_event
from .window import _escape_applescript, _get_platform, activate_window

# callback(error, response, metadata)
Callback = Callable[[Exception | None, str | None, dict], None]

CLICK_RESPONSES = frozenset({"activate", "clicked", "default"})
CLICK_ACTIVATION_TYPE = "contentsClicked"

WORKER_MODULE = "notifier_hooks.notify_worker"


class NotificationUnavailable(RuntimeError):
    """No notification tool for this platform."""


def _escape_powershell(text: str) -> str:
    """Escape text for PowerShell string literals.

    PowerShell uses backtick for escaping in double-quoted strings.
    """
    return text.replace("`", "``").replace('"', '`"').replace("$", "`$")


def _wait_limit(options: dict) -> float:
    return options.get("timeout", Timeouts.NOTIFY_DEFAULT) + Timeouts.NOTIFY_GRACE


def _notify_linux(options: dict) -> tuple[str | None, dict]:
    """Send notification via notify-send and wait for a click or expiry."""
    if not shutil.which("notify-send"):
        raise NotificationUnavailable("notify-send not found")

    args = [
        "notify-send",
        f"--app-name={options.get('app_id', APP_NAME)}",
        "--urgency=normal",
        f"--expire-time={int(options.get('timeout', Timeouts.NOTIFY_DEFAULT) * 1000)}",
    ]
    if options.get("icon"):
        args.append(f"--icon={options['icon']}")
    if options.get("sound"):
        args.append("--hint=string:sound-name:message-new-instant")
    plain = args + [options["title"], options["message"]]

    waiting = args + [
        f"--action=default={t('click_to_focus')}",
        "--wait",
        options["title"],
        options["message"],
    ]
    try:
        result = subprocess.run(waiting, capture_output=True, text=True, timeout=_wait_limit(options))
    except subprocess.TimeoutExpired:
        return None, {}

    if result.returncode != 0:
        # notify-send before libnotify 0.7.9 has no --action/--wait
        subprocess.run(plain, capture_output=True, timeout=Timeouts.EXTERNAL_CALL)
        return None, {}

    return result.stdout.strip() or None, {}


def _notify_macos(options: dict) -> tuple[str | None, dict]:
    """Send notification via terminal-notifier, or osascript without click support.

    Security: Title and body are escaped to prevent AppleScript injection.
    """
    if shutil.which("terminal-notifier"):
        args = [
            "terminal-notifier",
            "-title", options["title"],
            "-message", options["message"],
            "-json",
            "-timeout", str(int(options.get("timeout", Timeouts.NOTIFY_DEFAULT))),
        ]
        if options.get("sound"):
            args += ["-sound", "default"]
        if options.get("icon"):
            args += ["-appIcon", options["icon"]]
        try:
            result = subprocess.run(args, capture_output=True, text=True, timeout=_wait_limit(options))
        except subprocess.TimeoutExpired:
            return None, {}
        try:
            metadata = fast_json_loads(result.stdout) if result.stdout.strip() else {}
        except msgspec.DecodeError:
            metadata = {}
        if not isinstance(metadata, dict):
            metadata = {}
        activation = metadata.get("activationType")
        response = "activate" if activation == CLICK_ACTIVATION_TYPE else activation
        return response, metadata

    if not shutil.which("osascript"):
        raise NotificationUnavailable("neither terminal-notifier nor osascript found")

    safe_title = _escape_applescript(options["title"])
    safe_body = _escape_applescript(options["message"])
    script = f'display notification "{safe_body}" with title "{safe_title}"'
    if options.get("sound"):
        script += ' sound name "default"'
    subprocess.Popen(
        ["osascript", "-e", script],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    return None, {}


def _notify_windows(options: dict) -> tuple[str | None, dict]:
    """Send notification via PowerShell (Windows 10+). Clicks are not reported.

    Security: Title and body are escaped to prevent PowerShell injection.
    """
    if not shutil.which("powershell"):
        raise NotificationUnavailable("powershell not found")

    safe_title = _escape_powershell(options["title"])
    safe_body = _escape_powershell(options["message"])
    safe_app = _escape_powershell(options.get("app_id", APP_NAME))
    script = f'''
    [Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, ContentType = WindowsRuntime] | Out-Null
    $template = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent([Windows.UI.Notifications.ToastTemplateType]::ToastText02)
    $textNodes = $template.GetElementsByTagName("text")
    $textNodes.Item(0).AppendChild($template.CreateTextNode("{safe_title}")) | Out-Null
    $textNodes.Item(1).AppendChild($template.CreateTextNode("{safe_body}")) | Out-Null
    $toast = [Windows.UI.Notifications.ToastNotification]::new($template)
    $toast.ExpirationTime = [DateTimeOffset]::Now.AddSeconds({int(options.get("timeout", Timeouts.NOTIFY_DEFAULT))})
    [Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier("{safe_app}").Show($toast)
    '''
    subprocess.Popen(
        ["powershell", "-NoProfile", "-Command", script],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    return None, {}


_BACKENDS = {
    "linux": _notify_linux,
    "macos": _notify_macos,
    "windows": _notify_windows,
}


def send_notification(options: dict, callback: Callback = None) -> bool:
    """
    Deliver a notification and report the outcome to callback.

    Blocks while the backend waits for user interaction (only the
    notification worker calls this directly).

    Args:
        options: title, message, icon, sound, timeout, app_id
        callback: Called as callback(error, response, metadata)

    Returns:
        True if the notification was handed to the platform tool
    """
    platform = _get_platform()
    deliver = _BACKENDS.get(platform)
    try:
        if deliver is None:
            raise NotificationUnavailable(f"no notification backend for {platform}")
        response, metadata = deliver(options)
    except (NotificationUnavailable, OSError, subprocess.SubprocessError) as e:
        if callback:
            callback(e, None, {})
        return False

    if callback:
        callback(None, response, metadata)
    return True


def is_notification_available() -> bool:
    """Check if desktop notifications are available on this system."""
    platform = _get_platform()

    if platform == "linux":
        return shutil.which("notify-send") is not None
    elif platform == "macos":
        return shutil.which("terminal-notifier") is not None or shutil.which("osascript") is not None
    elif platform == "windows":
        return shutil.which("powershell") is not None

    return False


def is_click(response: str | None, metadata: dict | None) -> bool:
    """Whether the backend reported that the notification was clicked."""
    if response in CLICK_RESPONSES:
        return True
    return bool(metadata) and metadata.get("activationType") == CLICK_ACTIVATION_TYPE


def make_click_handler(window_handle: str | None) -> Callback:
    """Callback that refocuses window_handle when the notification is clicked."""
    def on_result(error, response, metadata):
        if error:
            log_event("notify", "backend_unavailable", {"msg": str(error)}, "warning")
            return
        if is_click(response, metadata) and window_handle:
            log_event("notify", "clicked", {"window": window_handle})
            activate_window(window_handle)
    return on_result


def build_options(
    title: str,
    message: str,
    window_handle: str | None = None,
    timeout: int = Timeouts.NOTIFY_DEFAULT,
) -> dict:
    """Notification options with the app icon (when installed) and sound on."""
    return {
        "title": title,
        "message": message,
        "icon": str(ICON_PATH) if ICON_PATH.is_file() else None,
        "sound": True,
        "timeout": timeout,
        "app_id": APP_NAME,
        "window_handle": window_handle,
    }


def _detach_kwargs() -> dict:
    if sys.platform == "win32":
        flags = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
        return {"creationflags": flags}
    return {"start_new_session": True}


def notify(
    title: str,
    message: str,
    window_handle: str | None = None,
    timeout: int = Timeouts.NOTIFY_DEFAULT,
) -> bool:
    """
    Show a notification; clicking it refocuses window_handle.

    Returns immediately. Delivery and click handling run in a detached
    worker process that outlives the caller. Returns False without
    spawning it when the platform has no notification tool.

    Example:
        notify("Claude Code", "Completed (75seconds)", window_handle="41943047")
        notify("Claude Code", "Permission Request: Bash", timeout=30)
    """
    if not is_notification_available():
        log_event("notify", "backend_unavailable", {"platform": _get_platform()}, "warning")
        return False

    options = build_options(title, message, window_handle, timeout)
    try:
        subprocess.Popen(
            [sys.executable, "-m", WORKER_MODULE, fast_json_dumps(options).decode()],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **_detach_kwargs(),
        )
    except (OSError, ValueError) as e:
        log_event("notify", "spawn_failed", {"msg": str(e)}, "warning")
        return False

    log_event("notify", "requested", {"timeout": timeout, "has_window": bool(window_handle)})
    return True
