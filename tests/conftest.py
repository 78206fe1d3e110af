"""
Shared fixtures: an in-memory bot backend and an aiohttp test client.
"""
import logging
from types import SimpleNamespace

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from bot.connection import BotConnectionManager
from web.app import create_app


class FakeBackend:
    """Records every call a BotConnectionManager makes to its backend."""

    def __init__(self):
        self.opened = []
        self.closed = []
        self.subscriptions = []

    def open(self, config):
        handle = SimpleNamespace(
            entity=SimpleNamespace(position="(0, 64, 0)"),
            health=20,
            food=20,
        )
        self.opened.append((config, handle))
        return handle

    def close(self, handle):
        self.closed.append(handle)

    def subscribe(self, handle, event, callback, once=False):
        self.subscriptions.append((handle, event, callback, once))

    def callbacks_for(self, handle, event):
        return [cb for h, e, cb, _ in self.subscriptions if h is handle and e == event]

    def emit(self, handle, event, *args):
        for callback in self.callbacks_for(handle, event):
            callback(*args)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def bot_logger():
    return logging.getLogger("mc-body.test.bot")


@pytest.fixture
def manager(backend, bot_logger):
    """Manager reading from an empty environment, signals disabled."""
    return BotConnectionManager(backend, logger=bot_logger, environ={})


@pytest.fixture
def web_logger():
    return logging.getLogger("mc-body.test.web")


@pytest_asyncio.fixture
async def client(web_logger):
    test_client = TestClient(TestServer(create_app(logger=web_logger)))
    await test_client.start_server()
    yield test_client
    await test_client.close()
