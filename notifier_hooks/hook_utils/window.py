"""
Terminal window capture and activation.

One adapter per platform, selected once per process:
- Linux (xdotool): X11 window ID
- macOS (osascript): bundle identifier of the frontmost application
- Windows (powershell + user32.dll): foreground window handle (HWND)

Capture is bounded by Timeouts.EXTERNAL_CALL and returns None on any
failure. Activation is spawned detached and never awaited.
"""
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod

from notifier_hooks.config import Timeouts
from .logging import log_event


def _escape_applescript(text: str) -> str:
    """Escape text for AppleScript string literals."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _get_platform() -> str:
    """Detect platform."""
    if sys.platform == "darwin":
        return "macos"
    elif sys.platform == "win32":
        return "windows"
    elif sys.platform.startswith("linux"):
        return "linux"
    return "unknown"


def _run_capture(args: list[str]) -> str | None:
    """Run a short query command, returning stripped stdout or None."""
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=Timeouts.EXTERNAL_CALL,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log_event("window", "capture_failed", {"cmd": args[0], "msg": str(e)}, "debug")
        return None

    if result.returncode != 0:
        log_event("window", "capture_failed", {"cmd": args[0], "rc": result.returncode}, "debug")
        return None
    return result.stdout.strip() or None


def _spawn_detached(args: list[str]) -> bool:
    """Fire-and-forget: new session, no pipes, no wait."""
    try:
        subprocess.Popen(
            args,
            start_new_session=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return True
    except (OSError, ValueError) as e:
        log_event("window", "activate_failed", {"cmd": args[0], "msg": str(e)}, "debug")
        return False


class WindowAdapter(ABC):
    """Identify the foreground window and bring it back later."""

    platform: str = "unknown"

    @abstractmethod
    def capture(self) -> str | None:
        """Opaque handle of the current foreground window, or None."""

    @abstractmethod
    def activate(self, handle: str) -> None:
        """Best-effort request to bring handle's window to the foreground."""


class NullWindowAdapter(WindowAdapter):
    """Platforms without a known mechanism."""

    def capture(self) -> str | None:
        return None

    def activate(self, handle: str) -> None:
        return None


class LinuxWindowAdapter(WindowAdapter):
    platform = "linux"

    def capture(self) -> str | None:
        if not shutil.which("xdotool"):
            return None
        window_id = _run_capture(["xdotool", "getactivewindow"])
        return window_id if window_id and window_id.isdigit() else None

    def activate(self, handle: str) -> None:
        if not handle or not handle.isdigit():
            return
        _spawn_detached(["xdotool", "windowactivate", handle])


class MacWindowAdapter(WindowAdapter):
    platform = "macos"

    CAPTURE_SCRIPT = (
        'tell application "System Events" to get bundle identifier '
        'of first process whose frontmost is true'
    )

    def capture(self) -> str | None:
        return _run_capture(["osascript", "-e", self.CAPTURE_SCRIPT])

    def activate(self, handle: str) -> None:
        if not handle:
            return
        script = f'tell application id "{_escape_applescript(handle)}" to activate'
        _spawn_detached(["osascript", "-e", script])


class WindowsWindowAdapter(WindowAdapter):
    platform = "windows"

    _USER32 = (
        "Add-Type -TypeDefinition 'using System;using System.Runtime.InteropServices;"
        "public class Win{{[DllImport(\"user32.dll\")]public static extern {decl};}}';"
    )
    CAPTURE_SCRIPT = (
        _USER32.format(decl="IntPtr GetForegroundWindow()")
        + "[Win]::GetForegroundWindow().ToInt64()"
    )
    ACTIVATE_PREFIX = _USER32.format(decl="bool SetForegroundWindow(IntPtr hWnd)")

    def capture(self) -> str | None:
        hwnd = _run_capture(["powershell", "-NoProfile", "-Command", self.CAPTURE_SCRIPT])
        if not hwnd:
            return None
        try:
            value = int(hwnd)
        except ValueError:
            return None
        # A zero handle means no foreground window
        return str(value) if value else None

    def activate(self, handle: str) -> None:
        try:
            hwnd = int(handle)
        except (TypeError, ValueError):
            return
        script = self.ACTIVATE_PREFIX + f"[Win]::SetForegroundWindow([IntPtr]{hwnd})"
        _spawn_detached(["powershell", "-NoProfile", "-Command", script])


_ADAPTERS = {
    "linux": LinuxWindowAdapter,
    "macos": MacWindowAdapter,
    "windows": WindowsWindowAdapter,
}

_adapter: WindowAdapter | None = None


def get_window_adapter() -> WindowAdapter:
    """Adapter for the running platform (selected once per process)."""
    global _adapter
    if _adapter is None:
        _adapter = _ADAPTERS.get(_get_platform(), NullWindowAdapter)()
    return _adapter


def capture_window_handle() -> str | None:
    """Foreground window handle, or None. Never raises."""
    try:
        return get_window_adapter().capture()
    except Exception as e:
        log_event("window", "capture_error", {"type": type(e).__name__, "msg": str(e)}, "warning")
        return None


def activate_window(handle: str | None) -> None:
    """Bring handle's window to the front if possible. Never raises."""
    if not handle:
        return
    try:
        get_window_adapter().activate(handle)
    except Exception as e:
        log_event("window", "activate_error", {"type": type(e).__name__, "msg": str(e)}, "warning")
