"""
Capability interface for the external game bot library.
"""
from typing import Any, Callable, Protocol

from config import ConnectionConfig

# Lifecycle events the connection manager observes.
SPAWN = "spawn"
END = "end"
KICKED = "kicked"
ERROR = "error"

LIFECYCLE_EVENTS = (SPAWN, END, KICKED, ERROR)


class BotBackend(Protocol):
    """Open, close and observe a connection owned by an external library."""

    def open(self, config: ConnectionConfig) -> Any:
        """Start connecting and return a handle without waiting for the handshake."""
        ...

    def close(self, handle: Any) -> None:
        """Ask the library to end the connection behind the handle."""
        ...

    def subscribe(
        self,
        handle: Any,
        event: str,
        callback: Callable[..., None],
        once: bool = False,
    ) -> None:
        """Invoke callback with the event's arguments each time it fires (or only the first time)."""
        ...
