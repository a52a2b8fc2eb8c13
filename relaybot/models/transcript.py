"""Transcription result model."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class TranscriptResult:
    """
    Result of a completed transcription.

    Produced once per media message and discarded after the reply is sent.

    Attributes:
        text: Transcribed text content
        language_code: Detected language code, if the service ran detection
        language_confidence: Detection confidence between 0 and 1, if available
        transcript_id: Identifier of the job on the transcription service
    """

    text: str
    language_code: Optional[str] = None
    language_confidence: Optional[float] = None
    transcript_id: Optional[str] = None

    @property
    def has_text(self) -> bool:
        """Check whether any speech was recognised."""
        return bool(self.text and self.text.strip())

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TranscriptResult":
        """Build a result from a completed AssemblyAI transcript payload."""
        confidence = data.get("language_confidence")
        return cls(
            text=(data.get("text") or "").strip(),
            language_code=data.get("language_code") or None,
            language_confidence=float(confidence) if confidence is not None else None,
            transcript_id=data.get("id"),
        )
