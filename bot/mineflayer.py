"""
Mineflayer backend reached through the JSPyBridge ``javascript`` package.
"""
import asyncio
import importlib
import logging
from typing import Any, Callable, Optional

from config import ConnectionConfig

logger = logging.getLogger("mc-body.mineflayer")


class MineflayerBackend:
    """BotBackend implementation that drives a mineflayer bot in Node.js."""

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        bridge: Optional[Any] = None,
    ):
        """
        Initialize the backend.

        Args:
            loop: Event loop that callbacks are delivered on. Bridge events
                arrive on the bridge's own thread; with a loop they are
                handed over via call_soon_threadsafe, without one they run
                on the bridge thread.
            bridge: Object exposing require, On and Once. Defaults to the
                ``javascript`` package, imported on first use since importing
                it starts the Node.js process.
        """
        self.loop = loop
        self._bridge = bridge
        self._mineflayer = None

    @property
    def bridge(self):
        if self._bridge is None:
            self._bridge = importlib.import_module("javascript")
        return self._bridge

    @property
    def mineflayer(self):
        if self._mineflayer is None:
            logger.info("Loading mineflayer through the JavaScript bridge")
            self._mineflayer = self.bridge.require("mineflayer")
        return self._mineflayer

    def open(self, config: ConnectionConfig) -> Any:
        return self.mineflayer.createBot(config.as_options())

    def close(self, handle: Any) -> None:
        handle.quit()

    def subscribe(
        self,
        handle: Any,
        event: str,
        callback: Callable[..., None],
        once: bool = False,
    ) -> None:
        register = self.bridge.Once if once else self.bridge.On

        # The bridge passes the emitter as the first argument.
        @register(handle, event)
        def _relay(this, *args):
            if self.loop is None or self.loop.is_closed():
                callback(*args)
            else:
                self.loop.call_soon_threadsafe(callback, *args)
