"""Presentation helpers for user-facing errors."""

from relaybot.services.presentation.error_handler import (
    ErrorPresentationLayer,
    get_error_presentation_layer,
    reset_error_presentation_layer,
)

__all__ = [
    "ErrorPresentationLayer",
    "get_error_presentation_layer",
    "reset_error_presentation_layer",
]
