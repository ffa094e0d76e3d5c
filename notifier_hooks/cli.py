"""
Command-line entry point for the notifier hooks.

Hook configuration (settings.json):
    UserPromptSubmit  -> claude-notify start-timer
    Stop              -> claude-notify check-duration
    PermissionRequest -> claude-notify permission-request

Each command reads the hook's JSON context from stdin.
"""
import argparse

from notifier_hooks.dispatchers import DISPATCHERS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-notify",
        description="Desktop notifications for Claude Code lifecycle hooks",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True
    for command, dispatcher in DISPATCHERS.items():
        subparsers.add_parser(command, help=(dispatcher.__doc__ or "").strip() or None)
    return parser


def main(argv: list[str] = None) -> int:
    args = build_parser().parse_args(argv)
    DISPATCHERS[args.command]().run()
    return 0
