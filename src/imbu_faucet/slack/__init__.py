"""Slack integration for the faucet."""

from .adapter import SlackAdapter
from .commands import register_commands
from .formatter import MessageFormatter

__all__ = ["SlackAdapter", "register_commands", "MessageFormatter"]
