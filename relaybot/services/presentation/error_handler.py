"""Error presentation layer for humanized user messages.

ErrorPresentationLayer captures exceptions raised inside message
pipelines and turns them into short, fixed user-facing messages. Full
details go to the log under a correlation ID; users never see raw
exception text or stack traces.
"""

import logging
import uuid
from typing import Optional, Type

from relaybot.lib.error_catalog import (
    EXCEPTION_MAPPING,
    ErrorSeverity,
    UserFacingError,
    get_error_by_code,
    get_error_code_for_exception,
)
from relaybot.models.language import Language

logger = logging.getLogger(__name__)

SEVERITY_EMOJI = {
    ErrorSeverity.INFO: "ℹ️",
    ErrorSeverity.WARNING: "⚠️",
    ErrorSeverity.ERROR: "❌",
}


class ErrorPresentationLayer:
    """Error presentation layer for humanized messages.

    Example:
        layer = ErrorPresentationLayer()

        try:
            await risky_operation()
        except Exception as e:
            error = layer.translate_exception(e, {"chat_id": chat_id})
            await chat.send_message(chat_id, layer.format_message(error, language))
    """

    def __init__(self):
        # Copy default mappings to allow custom registrations
        self._exception_mappings: dict[Type[Exception], str] = dict(EXCEPTION_MAPPING)

    def translate_exception(
        self,
        exception: Exception,
        context: Optional[dict] = None,
    ) -> UserFacingError:
        """Transform exception into user-facing error.

        Args:
            exception: Caught exception from a pipeline
            context: Optional context (chat_id, event_type, ...)

        Returns:
            UserFacingError from the catalog

        Side Effects:
            Logs full exception details at ERROR level with correlation ID
        """
        correlation_id = str(uuid.uuid4())[:8]

        error_code = self._find_error_code(exception)
        error = get_error_by_code(error_code)

        log_context = {
            "correlation_id": correlation_id,
            "error_code": error_code,
            "exception_type": type(exception).__name__,
            "context": context or {},
        }

        logger.error(
            f"Error [{correlation_id}] {error_code}: {type(exception).__name__}: {exception}",
            extra=log_context,
            exc_info=exception,
        )

        return error

    def register_exception_mapping(
        self,
        exception_type: Type[Exception],
        error_code: str,
    ) -> None:
        """Register mapping from exception type to error code."""
        self._exception_mappings[exception_type] = error_code
        logger.debug(f"Registered exception mapping: {exception_type.__name__} -> {error_code}")

    def format_message(self, error: UserFacingError, language: Language) -> str:
        """Plain-text message for the chat, in the reply language."""
        emoji = SEVERITY_EMOJI.get(error.severity, "❌")
        return f"{emoji} {error.message_for(language)}"

    def _find_error_code(self, exception: Exception) -> str:
        """Find the error code for an exception, first match wins."""
        return get_error_code_for_exception(exception, self._exception_mappings)


# Global instance for convenience
_error_layer: Optional[ErrorPresentationLayer] = None


def get_error_presentation_layer() -> ErrorPresentationLayer:
    """Get the global error presentation layer instance."""
    global _error_layer
    if _error_layer is None:
        _error_layer = ErrorPresentationLayer()
    return _error_layer


def reset_error_presentation_layer() -> None:
    """Reset the global error presentation layer (for testing)."""
    global _error_layer
    _error_layer = None
