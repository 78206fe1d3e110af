"""
Minecraft Body Service - Main Entry Point

Serves an HTTP liveness endpoint and, once the server is listening,
connects a mineflayer bot to the configured Minecraft server.
"""
import asyncio
import logging
from typing import Callable, Optional

from aiohttp import web

from bot.backend import BotBackend
from bot.connection import BotConnectionManager
from bot.mineflayer import MineflayerBackend
from config import Config
from web.app import create_app

logger = logging.getLogger("mc-body")


async def serve(
    backend_factory: Callable[[asyncio.AbstractEventLoop], BotBackend] = MineflayerBackend,
    handle_signals: bool = True,
    stopped: Optional[asyncio.Event] = None,
) -> None:
    """
    Run the status server and the bot until a shutdown signal arrives.

    Args:
        backend_factory: Builds the bot backend for the running loop.
        handle_signals: Whether SIGINT/SIGTERM end the service.
        stopped: Event that ends the service when set. Created if not given.
    """
    host, port = Config.BOT_HOST, Config.bot_port()

    runner = web.AppRunner(create_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Listening on {host}:{port}")

    loop = asyncio.get_running_loop()
    if stopped is None:
        stopped = asyncio.Event()

    manager = BotConnectionManager(backend_factory(loop), handle_signals=handle_signals)
    manager.register_signal_handlers(loop, stopped.set)

    try:
        # Connect to Minecraft after the server is ready
        await manager.start()
        await stopped.wait()
    finally:
        await manager.stop()
        await runner.cleanup()
        logger.info("Stopped")


def main():
    """Main entry point for the service."""
    Config.validate()

    # Configure logging
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(serve())
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise


if __name__ == "__main__":
    main()
