"""
Connection manager for the Minecraft bot.

Owns at most one live connection handle produced by a BotBackend and logs
the lifecycle events the backend reports. Connection establishment is
asynchronous: connect() returns as soon as the library has been asked to
connect, and spawn/end/kicked/error arrive later as callbacks.
"""
import asyncio
import functools
import logging
import os
import signal
from typing import Any, Callable, Mapping, Optional

from bot.backend import END, ERROR, KICKED, SPAWN, BotBackend
from config import ConnectionConfig

DEFAULT_LOGGER_NAME = "mc-body.bot"

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class BotConnectionManager:
    """Creates, tracks and tears down a single bot connection."""

    def __init__(
        self,
        backend: BotBackend,
        logger: Optional[logging.Logger] = None,
        environ: Optional[Mapping[str, str]] = None,
        handle_signals: bool = False,
    ):
        """
        Initialize the connection manager.

        Args:
            backend: Library adapter used to open, close and observe connections.
            logger: Sink for lifecycle diagnostics. Defaults to the "mc-body.bot" logger.
            environ: Environment to read MC_* settings from. Defaults to os.environ.
            handle_signals: Whether register_signal_handlers() installs anything.
                Tests leave this off so the runner keeps its own handlers.
        """
        self.backend = backend
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.environ = os.environ if environ is None else environ
        self.handle_signals = handle_signals

        self._handle: Optional[Any] = None
        self._config: Optional[ConnectionConfig] = None
        self._signals_registered = False

    @property
    def config(self) -> Optional[ConnectionConfig]:
        """Configuration used by the most recent connect(), if any."""
        return self._config

    def connect(self, **overrides) -> Any:
        """
        Start a connection to the game server.

        Overrides take precedence over MC_HOST/MC_PORT/MC_USERNAME, which take
        precedence over the defaults. A handle that is already held is closed
        before the new one is opened.

        Args:
            **overrides: Any of host, port, username.

        Returns:
            The handle produced by the backend.

        Raises:
            ValueError: If the merged configuration is invalid.
            TypeError: If an unknown override is given.
        """
        config = ConnectionConfig.from_env(self.environ).with_overrides(**overrides)

        if self._handle is not None:
            self.logger.warning("Already connected, closing the previous connection first")
            self.disconnect()

        self.logger.info(
            f'Connecting to {config.host}:{config.port} as "{config.username}"...'
        )
        handle = self.backend.open(config)
        self._handle = handle
        self._config = config

        self.backend.subscribe(handle, SPAWN, lambda *args: self._on_spawn(handle), once=True)
        self.backend.subscribe(handle, END, self._on_end)
        self.backend.subscribe(handle, KICKED, self._on_kicked)
        self.backend.subscribe(handle, ERROR, self._on_error)

        return handle

    def get_handle(self) -> Optional[Any]:
        """Return the current handle, or None if not connected."""
        return self._handle

    def disconnect(self) -> None:
        """Close the current connection if there is one. Never raises for a missing handle."""
        handle = self._handle
        if handle is None:
            return

        self.logger.info("Disconnecting...")
        self._handle = None
        try:
            self.backend.close(handle)
        except Exception as e:
            self.logger.warning(f"Error while closing connection: {e}")

    async def start(self, **overrides) -> Any:
        """
        Run connect() in the default executor.

        Backend calls can block (the mineflayer bridge talks to Node.js over
        IPC and may install packages on first use), so they are kept off the
        event loop.

        Args:
            **overrides: Passed through to connect().

        Returns:
            The handle produced by the backend.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(self.connect, **overrides))

    async def stop(self) -> None:
        """Run disconnect() in the default executor."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.disconnect)

    # ------------------------------------------------------------------
    # Lifecycle observers

    def _on_spawn(self, handle: Any) -> None:
        self.logger.info("Spawned in world")
        try:
            self.logger.info(f"Position: {handle.entity.position}")
            self.logger.info(f"Health: {handle.health}, Food: {handle.food}")
        except Exception as e:
            self.logger.warning(f"Could not read spawn state: {e}")

    def _on_end(self, reason: Any = None, *args) -> None:
        self.logger.info(f"Disconnected: {reason}")

    def _on_kicked(self, reason: Any = None, logged_in: Any = None, *args) -> None:
        self.logger.info(f"Kicked: {reason} (loggedIn: {logged_in})")

    def _on_error(self, err: Any = None, *args) -> None:
        message = getattr(err, "message", None) or str(err)
        self.logger.error(f"Error: {message}")

    # ------------------------------------------------------------------
    # Process signals

    def register_signal_handlers(
        self,
        loop: asyncio.AbstractEventLoop,
        on_exit: Callable[[], None],
    ) -> bool:
        """
        Disconnect and call on_exit on SIGINT or SIGTERM.

        Does nothing unless the manager was created with handle_signals=True,
        and only registers once per manager.

        Args:
            loop: Event loop to attach the handlers to.
            on_exit: Called after disconnecting; expected to end the process cleanly.

        Returns:
            bool: True if handlers were installed by this call.
        """
        if not self.handle_signals or self._signals_registered:
            return False

        def _shutdown() -> None:
            self.logger.info("Shutdown signal received")
            self.disconnect()
            on_exit()

        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, _shutdown)
            except NotImplementedError:
                # Windows event loops
                signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(_shutdown))

        self._signals_registered = True
        self.logger.debug("Signal handlers installed")
        return True
