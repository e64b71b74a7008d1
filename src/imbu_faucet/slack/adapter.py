"""Slack adapter for the faucet.

Connects over Socket Mode, so no public webhook is needed.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import SecretStr
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

logger = logging.getLogger(__name__)


class PlatformAdapter(ABC):
    """Abstract base class for chat platform adapters."""

    @abstractmethod
    async def start(self) -> None:
        """Start the adapter and connect to the platform."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the adapter and disconnect from the platform."""
        ...

    @property
    @abstractmethod
    def app(self):
        """Get the underlying platform app instance."""
        ...


class SlackAdapter(PlatformAdapter):
    """Slack adapter using Bolt for Python with Socket Mode.

    Parameters
    ----------
    bot_token : SecretStr
        Slack bot token (xoxb-...).
    app_token : SecretStr
        Slack app-level token (xapp-...) for Socket Mode.
    """

    def __init__(self, bot_token: SecretStr, app_token: SecretStr):
        self._app_token = app_token
        self._app = AsyncApp(token=bot_token.get_secret_value())
        self._handler: AsyncSocketModeHandler | None = None

    @property
    def app(self) -> AsyncApp:
        return self._app

    @property
    def is_running(self) -> bool:
        return self._handler is not None

    async def start(self) -> None:
        """Connect via Socket Mode."""
        if self.is_running:
            logger.warning("Slack adapter already running")
            return

        handler = AsyncSocketModeHandler(self._app, self._app_token.get_secret_value())
        logger.info("Starting Slack adapter via Socket Mode")
        try:
            await handler.connect_async()
        except Exception as e:
            logger.error("Failed to connect Slack adapter", extra={"error": str(e)})
            raise
        self._handler = handler
        logger.info("Slack adapter connected")

    async def stop(self) -> None:
        """Disconnect from Slack."""
        if self._handler is None:
            return
        logger.info("Stopping Slack adapter")
        await self._handler.close_async()
        self._handler = None
        logger.info("Slack adapter stopped")
