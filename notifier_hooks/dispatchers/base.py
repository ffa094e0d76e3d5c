"""
Base class for hook dispatchers.

Each lifecycle event of the host (prompt submitted, task stopped,
permission requested) maps to one SimpleDispatcher subclass. A dispatcher
reads the JSON context from stdin, handles it, and exits quietly: errors
are logged, never surfaced to the host.

Subclasses override:
- DISPATCHER_NAME: Name for logging
- COMMAND: CLI subcommand that runs this dispatcher
- handle(): Process the parsed context
"""
from abc import ABC, abstractmethod

from notifier_hooks.hook_utils import (
    SessionStore,
    graceful_main,
    log_event,
    read_stdin_context,
)


class SimpleDispatcher(ABC):
    """Base class for event dispatchers.

    Example:
        class MyDispatcher(SimpleDispatcher):
            DISPATCHER_NAME = "my_dispatcher"
            COMMAND = "my-command"

            def handle(self, ctx: dict) -> None:
                ...

        MyDispatcher().run()
    """

    DISPATCHER_NAME: str = "simple_dispatcher"
    COMMAND: str = ""

    def __init__(self, store: SessionStore = None):
        self.store = store if store is not None else SessionStore()

    @abstractmethod
    def handle(self, ctx: dict) -> None:
        """Process the event context.

        Args:
            ctx: Parsed JSON context from stdin (empty dict if malformed)
        """

    def read_context(self) -> dict:
        """Read and parse context from stdin."""
        return read_stdin_context()

    def run(self) -> None:
        """Main entry point - read stdin, handle event."""
        graceful_main(self.DISPATCHER_NAME)(self._run)()

    def _run(self) -> None:
        ctx = self.read_context()
        log_event(self.DISPATCHER_NAME, "dispatch", {
            "session": str(ctx.get("session_id", ""))[:50],
        }, "debug")
        self.handle(ctx)
