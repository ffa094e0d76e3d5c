"""
Detached notification worker.

Spawned by hook_utils.notify.notify() with the JSON-encoded options as its
only argument. Shows the notification, waits for the user's response and
refocuses the originating terminal on click.

Usage:
    python -m notifier_hooks.notify_worker '{"title": "...", "message": "..."}'
"""
import sys

from notifier_hooks.config import fast_json_loads
from notifier_hooks.hook_utils.logging import graceful_main
from notifier_hooks.hook_utils.notify import make_click_handler, send_notification


@graceful_main("notify_worker")
def main(argv: list[str] = None) -> bool:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        return False

    options = fast_json_loads(argv[0])
    if not isinstance(options, dict) or "title" not in options or "message" not in options:
        return False

    return send_notification(options, make_click_handler(options.get("window_handle")))


if __name__ == "__main__":
    main()
