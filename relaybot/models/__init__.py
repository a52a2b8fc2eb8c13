"""Domain models for the relay bot."""

from relaybot.models.language import Language
from relaybot.models.transcript import TranscriptResult

__all__ = [
    "Language",
    "TranscriptResult",
]
