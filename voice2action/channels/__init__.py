"""Chat transports."""

from voice2action.channels.telegram import TelegramChannel

__all__ = ["TelegramChannel"]
