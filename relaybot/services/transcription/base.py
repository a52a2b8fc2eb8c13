"""Base interface for transcription services.

This module defines the TranscriptionService abstract base class.
Results are returned as TranscriptResult; every failure is raised as
TranscriptionError.
"""

from abc import ABC, abstractmethod
from typing import Optional

from relaybot.models.transcript import TranscriptResult


class TranscriptionService(ABC):
    """
    Abstract base class for remote speech-to-text services.
    """

    @abstractmethod
    async def transcribe(
        self,
        audio: bytes,
        timeout: Optional[float] = None,
    ) -> TranscriptResult:
        """
        Transcribe an audio recording.

        Args:
            audio: Raw audio bytes (ogg/opus voice notes, mp3, m4a, ...)
            timeout: Seconds allowed for the job to complete, service default if None

        Returns:
            TranscriptResult with text and, when detected, the language

        Raises:
            TranscriptionError: On error status, timeout or transport failure
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the service."""
        pass
