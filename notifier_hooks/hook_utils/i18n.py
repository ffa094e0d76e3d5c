"""
Message localization.

Detects the system language once per process and looks up message
strings in the bundles from config. Lookups never raise: unknown
languages fall back to English, unknown keys to the key itself.
"""
import locale
import os
import re
import subprocess
import sys

from notifier_hooks.config import Messages, Timeouts
from .cache import create_ttl_cache
from .logging import log_event

_language_cache = create_ttl_cache(maxsize=1, ttl=Timeouts.LANGUAGE_CACHE_TTL)
_LANGUAGE_CACHE_KEY = "language"

_TAG_SEPARATORS = re.compile(r"[_.:@-]")


def _primary_subtag(tag: str) -> str:
    """'ko_KR.UTF-8' -> 'ko'"""
    return _TAG_SEPARATORS.split(tag.strip(), maxsplit=1)[0].lower()


def _query_os_language() -> str:
    """Language code as reported by the OS. Raises on failure."""
    if sys.platform == "win32":
        result = subprocess.run(
            ["powershell", "-NoProfile", "-Command", "(Get-Culture).TwoLetterISOLanguageName"],
            capture_output=True,
            text=True,
            timeout=Timeouts.EXTERNAL_CALL,
            check=True,
        )
        tag = result.stdout
    else:
        tag = os.environ.get("LANG") or os.environ.get("LANGUAGE") or os.environ.get("LC_ALL") or ""

    lang = _primary_subtag(tag)
    if not lang:
        raise LookupError("no language configured")
    return lang


def _query_runtime_language() -> str:
    """Language code from Python's locale settings. Raises on failure."""
    tag = locale.getlocale()[0]
    if not tag:
        raise LookupError("no runtime locale")
    return _primary_subtag(tag)


def _detect_language() -> str:
    try:
        lang = _query_os_language()
    except (OSError, subprocess.SubprocessError, LookupError) as e:
        log_event("i18n", "os_language_failed", {"msg": str(e)}, "debug")
        try:
            lang = _query_runtime_language()
        except (LookupError, ValueError) as e:
            log_event("i18n", "runtime_language_failed", {"msg": str(e)}, "debug")
            lang = Messages.BASE_LANGUAGE

    return lang if lang in Messages.SUPPORTED else Messages.BASE_LANGUAGE


def resolve_language() -> str:
    """Detect system language, cached for LANGUAGE_CACHE_TTL seconds."""
    if _LANGUAGE_CACHE_KEY in _language_cache:
        return _language_cache[_LANGUAGE_CACHE_KEY]

    lang = _detect_language()
    _language_cache[_LANGUAGE_CACHE_KEY] = lang
    return lang


def reset_language_cache():
    """Forget the detected language (e.g. after the environment changed)."""
    _language_cache.clear()


def translate(lang: str, key: str) -> str:
    """Message for key in lang, falling back to English, then to the key."""
    if not isinstance(key, str):
        return str(key)
    bundle = (Messages.BUNDLES.get(lang) if isinstance(lang, str) else None) or {}
    return bundle.get(key) or Messages.BUNDLES[Messages.BASE_LANGUAGE].get(key) or key


def t(key: str) -> str:
    """Message for key in the system language."""
    return translate(resolve_language(), key)
