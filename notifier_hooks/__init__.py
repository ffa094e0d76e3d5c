"""Desktop notifications with click-to-focus for Claude Code hooks."""

__version__ = "0.1.0"
