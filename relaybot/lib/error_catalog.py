"""Externalized error catalog for humanized user messages.

User-facing error messages are kept here rather than in handlers.
Each entry carries one message per supported language.

Error Code Format: ERR_{DOMAIN}_{NUMBER}
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from relaybot.lib.exceptions import (
    CompletionError,
    DownloadError,
    TranscriptionError,
    TransportError,
)
from relaybot.models.language import Language


class ErrorSeverity(str, Enum):
    """Severity level for user-facing errors."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class UserFacingError:
    """Structured error for humanized presentation.

    Attributes:
        error_code: Unique error identifier (e.g., "ERR_TRANSCRIPTION_001")
        messages: User-friendly description per language (no technical jargon)
        severity: Error severity level
    """

    error_code: str
    messages: dict[Language, str] = field(default_factory=dict)
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def message_for(self, language: Language) -> str:
        """Message in the given language, English when missing."""
        return self.messages.get(language) or self.messages[Language.ENGLISH]


# =============================================================================
# Error Catalog
# =============================================================================

ERROR_CATALOG: dict[str, UserFacingError] = {
    "ERR_DOWNLOAD_001": UserFacingError(
        error_code="ERR_DOWNLOAD_001",
        messages={
            Language.ENGLISH: "Sorry, I could not download your file.",
            Language.ARABIC: "عذراً، لم أتمكن من تنزيل ملفك.",
        },
    ),
    "ERR_NETWORK_001": UserFacingError(
        error_code="ERR_NETWORK_001",
        messages={
            Language.ENGLISH: "Sorry, I could not reach the chat service. Please try again.",
            Language.ARABIC: "عذراً، تعذّر الاتصال بخدمة المحادثة. يرجى المحاولة مرة أخرى.",
        },
    ),
    "ERR_TRANSCRIPTION_001": UserFacingError(
        error_code="ERR_TRANSCRIPTION_001",
        messages={
            Language.ENGLISH: "Sorry, I could not transcribe your recording. Please try again.",
            Language.ARABIC: "عذراً، لم أتمكن من تفريغ تسجيلك. يرجى المحاولة مرة أخرى.",
        },
    ),
    "ERR_TRANSCRIPTION_002": UserFacingError(
        error_code="ERR_TRANSCRIPTION_002",
        messages={
            Language.ENGLISH: "Sorry, transcribing your recording took too long. Please try a shorter one.",
            Language.ARABIC: "عذراً، استغرق تفريغ تسجيلك وقتاً طويلاً. جرّب تسجيلاً أقصر.",
        },
        severity=ErrorSeverity.WARNING,
    ),
    "ERR_COMPLETION_001": UserFacingError(
        error_code="ERR_COMPLETION_001",
        messages={
            Language.ENGLISH: "Sorry, I could not generate an answer right now. Please try again later.",
            Language.ARABIC: "عذراً، لم أتمكن من إعداد إجابة الآن. يرجى المحاولة لاحقاً.",
        },
    ),
}

DEFAULT_ERROR = UserFacingError(
    error_code="ERR_UNKNOWN_001",
    messages={
        Language.ENGLISH: "Sorry, something went wrong. Please try again.",
        Language.ARABIC: "عذراً، حدث خطأ ما. يرجى المحاولة مرة أخرى.",
    },
)


# Transcription timeouts get their own message
TIMEOUT_ERROR_CODE = "ERR_TRANSCRIPTION_002"

# Order matters: more specific exceptions must come first
EXCEPTION_MAPPING: dict[type, str] = {
    DownloadError: "ERR_DOWNLOAD_001",
    TransportError: "ERR_NETWORK_001",
    TranscriptionError: "ERR_TRANSCRIPTION_001",
    CompletionError: "ERR_COMPLETION_001",
}


def get_error_code_for_exception(
    exc: Exception,
    mappings: Optional[dict[type, str]] = None,
) -> str:
    """Get the catalog code for an exception, or the default code.

    Args:
        exc: The exception to map
        mappings: Exception type to code, first match wins. Defaults to
            EXCEPTION_MAPPING.
    """
    if isinstance(exc, TranscriptionError) and exc.timed_out:
        return TIMEOUT_ERROR_CODE
    if mappings is None:
        mappings = EXCEPTION_MAPPING
    for exc_type, error_code in mappings.items():
        if isinstance(exc, exc_type):
            return error_code
    return DEFAULT_ERROR.error_code


def get_error_by_code(error_code: str) -> UserFacingError:
    """Get an error by its code, or DEFAULT_ERROR if not found."""
    return ERROR_CATALOG.get(error_code, DEFAULT_ERROR)
