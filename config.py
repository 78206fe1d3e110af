"""
Configuration module for the Minecraft body service.
Loads and validates environment variables.
"""
import logging
import os
import re
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger("mc-body.config")

DEFAULT_MC_HOST = "localhost"
DEFAULT_MC_PORT = 25565
DEFAULT_MC_USERNAME = "agent"


def _parse_port(value: Optional[str], default: int) -> int:
    """
    Parse a port from an environment string, falling back to the default.

    Args:
        value: Raw environment value, possibly None or empty.
        default: Port used when the value is missing or not a positive integer.

    Returns:
        int: Parsed port or the default.
    """
    if not value:
        return default
    # Leading digits only, so "25566abc" reads as 25566
    match = re.match(r"\s*([+-]?\d+)", value)
    if not match:
        logger.warning(f"Ignoring non-numeric port value {value!r}, using {default}")
        return default
    port = int(match.group(1))
    if port <= 0:
        logger.warning(f"Ignoring non-positive port value {value!r}, using {default}")
        return default
    return port


@dataclass(frozen=True)
class ConnectionConfig:
    """Host, port and username used to open a game server connection."""

    host: str = DEFAULT_MC_HOST
    port: int = DEFAULT_MC_PORT
    username: str = DEFAULT_MC_USERNAME

    def __post_init__(self):
        if not isinstance(self.port, int) or isinstance(self.port, bool):
            raise ValueError(f"Port must be an integer, got {self.port!r}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {self.port}")
        if not self.host:
            raise ValueError("Host must not be empty")
        if not self.username:
            raise ValueError("Username must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConnectionConfig":
        """
        Build a configuration from MC_HOST, MC_PORT and MC_USERNAME.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            ConnectionConfig: Environment values over the defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("MC_HOST") or DEFAULT_MC_HOST,
            port=_parse_port(env.get("MC_PORT"), DEFAULT_MC_PORT),
            username=env.get("MC_USERNAME") or DEFAULT_MC_USERNAME,
        )

    def with_overrides(self, **overrides) -> "ConnectionConfig":
        """Return a copy with the given fields replaced. None values are ignored."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def as_options(self) -> dict:
        """Options dict in the shape the bot library expects."""
        return {"host": self.host, "port": self.port, "username": self.username}


class Config:
    """Central configuration management using environment variables."""

    # HTTP status server
    BOT_HOST: str = os.getenv("BOT_HOST", "127.0.0.1")
    BOT_PORT_RAW: str = os.getenv("BOT_PORT", "3000")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def bot_port(cls) -> int:
        """HTTP bind port as an integer."""
        return int(cls.BOT_PORT_RAW)

    @classmethod
    def validate(cls) -> None:
        """
        Validate the HTTP server settings.

        Raises:
            ValueError: If any setting is invalid.
        """
        problems = []

        if not cls.BOT_HOST:
            problems.append("BOT_HOST must not be empty")

        try:
            port = cls.bot_port()
        except ValueError:
            problems.append(f"BOT_PORT must be an integer, got {cls.BOT_PORT_RAW!r}")
        else:
            if not 0 <= port <= 65535:
                problems.append(f"BOT_PORT must be between 0 and 65535, got {port}")

        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            problems.append(f"LOG_LEVEL {cls.LOG_LEVEL!r} is not a logging level")

        if problems:
            raise ValueError(
                f"Invalid configuration: {'; '.join(problems)}\n"
                "Please fix them in your .env file or environment."
            )
