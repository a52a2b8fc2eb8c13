"""Transcription service package for speech-to-text."""

from relaybot.services.transcription.base import TranscriptionService
from relaybot.services.transcription.assemblyai import AssemblyAITranscriptionService

__all__ = ["TranscriptionService", "AssemblyAITranscriptionService"]
