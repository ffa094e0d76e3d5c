"""
Pytest configuration for notifier hook tests.

Points the log and state directories at a scratch location before any
notifier module is imported, and pins the message language to English.
"""
import os
import tempfile

_scratch = tempfile.mkdtemp(prefix="notifier-tests-")
os.environ.setdefault("CLAUDE_DATA_DIR", os.path.join(_scratch, "data"))
os.environ.setdefault("CLAUDE_NOTIFIER_STATE_DIR", os.path.join(_scratch, "state"))

import pytest  # noqa: E402

from notifier_hooks.hook_utils import SessionStore, reset_language_cache  # noqa: E402


@pytest.fixture(autouse=True)
def english(monkeypatch):
    """Resolve messages in English unless a test says otherwise."""
    for var in ("LANG", "LANGUAGE", "LC_ALL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("LANG", "en_US.UTF-8")
    reset_language_cache()
    yield
    reset_language_cache()


@pytest.fixture
def store(tmp_path):
    """Session store rooted in a per-test directory."""
    return SessionStore(tmp_path / "state")
