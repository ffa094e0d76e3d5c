#!/usr/bin/env python3
"""Unit tests for notify.py - notification backends, click routing and facade.

Tests escaping, platform dispatch, click detection and the detached worker.
"""

import importlib
import json
import subprocess
import sys
from unittest import TestCase
from unittest.mock import patch, MagicMock, Mock

import pytest

from notifier_hooks import notify_worker
notify_module = importlib.import_module("notifier_hooks.hook_utils.notify")
from notifier_hooks.hook_utils.notify import (
    NotificationUnavailable,
    _escape_powershell,
    _notify_linux,
    _notify_macos,
    _notify_windows,
    build_options,
    is_click,
    is_notification_available,
    make_click_handler,
    notify,
    send_notification,
)


def _options(**overrides):
    options = {
        "title": "Claude Code",
        "message": "Completed (75seconds)",
        "icon": None,
        "sound": True,
        "timeout": 10,
        "app_id": "Claude Code",
        "window_handle": None,
    }
    options.update(overrides)
    return options


class TestEscapePowershell(TestCase):
    """Tests for PowerShell string escaping."""

    def test_escapes_backtick(self):
        self.assertEqual(_escape_powershell("test`value"), "test``value")

    def test_escapes_double_quote(self):
        self.assertEqual(_escape_powershell('Say "hello"'), 'Say `"hello`"')

    def test_escapes_dollar_sign(self):
        self.assertEqual(_escape_powershell("Cost is $100"), "Cost is `$100")


class TestIsClick:

    @pytest.mark.parametrize("response", ["activate", "clicked", "default"])
    def test_click_responses(self, response):
        assert is_click(response, {})

    def test_contents_clicked_metadata(self):
        assert is_click(None, {"activationType": "contentsClicked"})

    @pytest.mark.parametrize("response,metadata", [
        (None, {}),
        ("timeout", {}),
        ("closed", {"activationType": "closed"}),
        (None, None),
    ])
    def test_not_clicks(self, response, metadata):
        assert not is_click(response, metadata)


class TestNotifyLinux:
    """Tests for Linux notification via notify-send."""

    @patch("shutil.which", return_value=None)
    def test_unavailable(self, mock_which):
        with pytest.raises(NotificationUnavailable):
            _notify_linux(_options())

    @patch("shutil.which", return_value="/usr/bin/notify-send")
    @patch("subprocess.run")
    def test_waits_for_action(self, mock_run, mock_which):
        mock_run.return_value = Mock(returncode=0, stdout="default\n")
        response, metadata = _notify_linux(_options(icon="/tmp/icon.png"))

        assert response == "default"
        assert metadata == {}
        args = mock_run.call_args[0][0]
        assert args[0] == "notify-send"
        assert "--app-name=Claude Code" in args
        assert "--expire-time=10000" in args
        assert "--icon=/tmp/icon.png" in args
        assert "--wait" in args
        assert "--action=default=Click to focus terminal" in args
        assert args[-2:] == ["Claude Code", "Completed (75seconds)"]
        assert mock_run.call_args[1]["timeout"] == 15

    @patch("shutil.which", return_value="/usr/bin/notify-send")
    @patch("subprocess.run")
    def test_no_icon_flag_without_icon(self, mock_run, mock_which):
        mock_run.return_value = Mock(returncode=0, stdout="")
        response, _ = _notify_linux(_options())
        assert response is None
        assert not any(a.startswith("--icon") for a in mock_run.call_args[0][0])

    @patch("shutil.which", return_value="/usr/bin/notify-send")
    @patch("subprocess.run")
    def test_old_notify_send_retries_plain(self, mock_run, mock_which):
        mock_run.side_effect = [
            Mock(returncode=1, stdout="", stderr="Unknown option --action"),
            Mock(returncode=0, stdout=""),
        ]
        response, _ = _notify_linux(_options())
        assert response is None
        plain = mock_run.call_args_list[1][0][0]
        assert "--wait" not in plain
        assert plain[-2:] == ["Claude Code", "Completed (75seconds)"]

    @patch("shutil.which", return_value="/usr/bin/notify-send")
    @patch("subprocess.run", side_effect=subprocess.TimeoutExpired("notify-send", 15))
    def test_expired_without_click(self, mock_run, mock_which):
        assert _notify_linux(_options()) == (None, {})


class TestNotifyMacos:
    """Tests for macOS notification."""

    @patch("shutil.which", side_effect=lambda name: "/usr/local/bin/terminal-notifier" if name == "terminal-notifier" else None)
    @patch("subprocess.run")
    def test_terminal_notifier_click(self, mock_run, mock_which):
        mock_run.return_value = Mock(
            returncode=0,
            stdout=json.dumps({"activationType": "contentsClicked", "activationValue": ""}),
        )
        response, metadata = _notify_macos(_options(timeout=30))

        assert response == "activate"
        assert metadata["activationType"] == "contentsClicked"
        args = mock_run.call_args[0][0]
        assert args[0] == "terminal-notifier"
        assert "-json" in args
        assert args[args.index("-timeout") + 1] == "30"
        assert args[args.index("-sound") + 1] == "default"

    @patch("shutil.which", side_effect=lambda name: "/usr/local/bin/terminal-notifier" if name == "terminal-notifier" else None)
    @patch("subprocess.run")
    def test_terminal_notifier_garbage_output(self, mock_run, mock_which):
        mock_run.return_value = Mock(returncode=0, stdout="not json")
        assert _notify_macos(_options()) == (None, {})

    @patch("shutil.which", side_effect=lambda name: "/usr/bin/osascript" if name == "osascript" else None)
    @patch("subprocess.Popen")
    def test_osascript_fallback_escapes(self, mock_popen, mock_which):
        response, _ = _notify_macos(_options(title='Say "hi"', message="C:\\path"))
        assert response is None
        script = mock_popen.call_args[0][0][2]
        assert 'Say \\"hi\\"' in script
        assert "C:\\\\path" in script
        assert 'sound name "default"' in script

    @patch("shutil.which", return_value=None)
    def test_unavailable(self, mock_which):
        with pytest.raises(NotificationUnavailable):
            _notify_macos(_options())


class TestNotifyWindows:

    @patch("shutil.which", return_value=None)
    def test_unavailable(self, mock_which):
        with pytest.raises(NotificationUnavailable):
            _notify_windows(_options())

    @patch("shutil.which", return_value="C:\\powershell.exe")
    @patch("subprocess.Popen")
    def test_escapes_title_and_body(self, mock_popen, mock_which):
        _notify_windows(_options(title="Cost: $100", message='Say "hi"'))
        script = mock_popen.call_args[0][0][-1]
        assert "`$100" in script
        assert '`"hi`"' in script
        assert "AddSeconds(10)" in script


class TestSendNotification:

    def test_reports_response_to_callback(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        callback = MagicMock()
        with patch.dict(notify_module._BACKENDS, {"linux": Mock(return_value=("default", {}))}):
            assert send_notification(_options(), callback) is True
        callback.assert_called_once_with(None, "default", {})

    def test_reports_unavailable_backend(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        callback = MagicMock()
        backend = Mock(side_effect=NotificationUnavailable("notify-send not found"))
        with patch.dict(notify_module._BACKENDS, {"linux": backend}):
            assert send_notification(_options(), callback) is False
        error, response, metadata = callback.call_args[0]
        assert isinstance(error, NotificationUnavailable)
        assert response is None

    def test_unknown_platform(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "plan9")
        callback = MagicMock()
        assert send_notification(_options(), callback) is False
        assert isinstance(callback.call_args[0][0], NotificationUnavailable)

    def test_os_error_from_tool(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        with patch.dict(notify_module._BACKENDS, {"linux": Mock(side_effect=PermissionError("denied"))}):
            assert send_notification(_options()) is False


class TestIsNotificationAvailable(TestCase):

    @patch("shutil.which", return_value="/usr/bin/notify-send")
    def test_linux(self, mock_which):
        with patch.object(sys, "platform", "linux"):
            self.assertTrue(is_notification_available())

    @patch("shutil.which", return_value=None)
    def test_missing_tools(self, mock_which):
        with patch.object(sys, "platform", "darwin"):
            self.assertFalse(is_notification_available())


class TestClickHandler:

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_click_activates_window(self, mock_activate):
        make_click_handler("41943047")(None, "default", {})
        mock_activate.assert_called_once_with("41943047")

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_contents_clicked_activates_window(self, mock_activate):
        make_click_handler("com.apple.Terminal")(None, "activate", {"activationType": "contentsClicked"})
        mock_activate.assert_called_once_with("com.apple.Terminal")

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_click_without_handle(self, mock_activate):
        make_click_handler(None)(None, "clicked", {})
        mock_activate.assert_not_called()

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_dismissal_does_nothing(self, mock_activate):
        make_click_handler("42")(None, None, {})
        mock_activate.assert_not_called()

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_error_does_nothing(self, mock_activate):
        make_click_handler("42")(NotificationUnavailable("none"), None, {})
        mock_activate.assert_not_called()


class TestBuildOptions:

    def test_defaults(self):
        options = build_options("Claude Code", "hi")
        assert options["sound"] is True
        assert options["timeout"] == 10
        assert options["app_id"] == "Claude Code"
        assert options["window_handle"] is None

    def test_missing_icon_is_none(self, tmp_path):
        with patch.object(notify_module, "ICON_PATH", tmp_path / "absent.png"):
            assert build_options("t", "m")["icon"] is None

    def test_existing_icon(self, tmp_path):
        icon = tmp_path / "claude-icon.png"
        icon.write_bytes(b"\x89PNG")
        with patch.object(notify_module, "ICON_PATH", icon):
            assert build_options("t", "m")["icon"] == str(icon)


class TestNotifyFacade:
    """notify() hands delivery to a detached worker."""

    @patch("notifier_hooks.hook_utils.notify.is_notification_available", return_value=True)
    @patch("subprocess.Popen")
    def test_spawns_detached_worker(self, mock_popen, mock_available, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        assert notify("Claude Code", "Permission Request: Bash", window_handle="42", timeout=30) is True

        args = mock_popen.call_args[0][0]
        assert args[:3] == [sys.executable, "-m", "notifier_hooks.notify_worker"]
        options = json.loads(args[3])
        assert options["title"] == "Claude Code"
        assert options["message"] == "Permission Request: Bash"
        assert options["window_handle"] == "42"
        assert options["timeout"] == 30
        kwargs = mock_popen.call_args[1]
        assert kwargs["start_new_session"] is True
        assert kwargs["stdout"] is subprocess.DEVNULL

    @patch("notifier_hooks.hook_utils.notify.is_notification_available", return_value=True)
    @patch("subprocess.Popen", side_effect=OSError("no python"))
    def test_spawn_failure_is_swallowed(self, mock_popen, mock_available):
        assert notify("Claude Code", "msg") is False

    @patch("shutil.which", return_value=None)
    @patch("subprocess.Popen")
    def test_no_backend_skips_worker(self, mock_popen, mock_which, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        assert notify("Claude Code", "Completed (75seconds)", window_handle="42") is False
        mock_popen.assert_not_called()


class TestNotifyWorker:

    @patch("notifier_hooks.notify_worker.send_notification", return_value=True)
    def test_delivers_options(self, mock_send):
        payload = json.dumps(_options(window_handle="42"))
        assert notify_worker.main([payload]) is True
        options, callback = mock_send.call_args[0]
        assert options["window_handle"] == "42"
        assert callable(callback)

    @patch("notifier_hooks.hook_utils.notify.activate_window")
    def test_click_reaches_window(self, mock_activate, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        backend = Mock(return_value=("default", {}))
        with patch.dict(notify_module._BACKENDS, {"linux": backend}):
            notify_worker.main([json.dumps(_options(window_handle="41943047"))])
        mock_activate.assert_called_once_with("41943047")

    @patch("notifier_hooks.notify_worker.send_notification")
    def test_bad_payload_is_ignored(self, mock_send):
        assert notify_worker.main(["{not json"]) is None
        assert notify_worker.main([]) is False
        assert notify_worker.main(['{"title": "only"}']) is False
        mock_send.assert_not_called()
