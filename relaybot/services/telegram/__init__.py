"""Telegram service package for bot communication."""

from relaybot.services.telegram.adapter import TelegramEvent
from relaybot.services.telegram.base import ChatGateway
from relaybot.services.telegram.bot import TelegramBotAdapter

__all__ = ["TelegramEvent", "ChatGateway", "TelegramBotAdapter"]
