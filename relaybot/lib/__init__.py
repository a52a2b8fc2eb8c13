"""Shared utilities and configuration."""

from relaybot.lib.config import CompletionConfig, TelegramConfig, TranscriptionConfig
from relaybot.lib.exceptions import (
    RelayError,
    ConfigurationError,
    TransportError,
    DownloadError,
    TranscriptionError,
    CompletionError,
    UnsupportedInputError,
    MessageRejectedError,
)

__all__ = [
    "CompletionConfig",
    "TelegramConfig",
    "TranscriptionConfig",
    "RelayError",
    "ConfigurationError",
    "TransportError",
    "DownloadError",
    "TranscriptionError",
    "CompletionError",
    "UnsupportedInputError",
    "MessageRejectedError",
]
