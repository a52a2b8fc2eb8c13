"""Exception hierarchy for the relay bot.

All custom exceptions inherit from RelayError to enable
selective catching at different levels.

Hierarchy:
    RelayError (base)
    ├── ConfigurationError - Missing or invalid configuration
    ├── TransportError - Network/HTTP failure against the chat platform
    │   └── DownloadError - Media file could not be fetched
    ├── TranscriptionError - Transcription service error status, timeout or outage
    ├── CompletionError - Completion service communication errors
    ├── UnsupportedInputError - Inbound message kind with no handler
    └── MessageRejectedError - Chat platform refused a formatted message
"""


class RelayError(Exception):
    """
    Base exception for all relay bot errors.

    Catching this will catch all custom exceptions from this module.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RelayError):
    """
    Configuration error.

    Raised when required configuration is missing or invalid.
    Examples: missing TELEGRAM_BOT_TOKEN, unknown LLM provider.
    """

    pass


class TransportError(RelayError):
    """
    Network or HTTP failure against an external service.

    Attributes:
        service: Name of the service that could not be reached
        original_error: Original exception if wrapping
    """

    def __init__(
        self, message: str, service: str = "unknown", original_error: Exception | None = None
    ):
        self.service = service
        self.original_error = original_error
        super().__init__(f"[{service}] {message}")


class DownloadError(TransportError):
    """Raised when a media file could not be fetched from the chat platform."""

    pass


class TranscriptionError(RelayError):
    """
    Transcription service failure.

    Raised when the service reports an error status, the poll deadline
    elapses, the API key is missing or the service is unreachable.

    Attributes:
        timed_out: True when the poll deadline elapsed before completion
        original_error: Original exception if wrapping
    """

    def __init__(
        self,
        message: str,
        timed_out: bool = False,
        original_error: Exception | None = None,
    ):
        self.timed_out = timed_out
        self.original_error = original_error
        super().__init__(message)


class CompletionError(RelayError):
    """
    Completion provider communication error.

    Examples: network error, rate limit, authentication failure, timeout.

    Attributes:
        provider: Name of the provider that failed
        original_error: Original exception if wrapping
    """

    def __init__(
        self, message: str, provider: str = "unknown", original_error: Exception | None = None
    ):
        self.provider = provider
        self.original_error = original_error
        full_message = f"[{provider}] {message}"
        super().__init__(full_message)


class UnsupportedInputError(RelayError):
    """Raised when an inbound message kind has no handler."""

    def __init__(self, message: str, event_type: str | None = None):
        self.event_type = event_type
        super().__init__(message)


class MessageRejectedError(RelayError):
    """
    The chat platform refused to deliver a message as formatted.

    Typically a Markdown entity parse failure; the caller may resend
    the text without formatting. When a long message was split and some
    chunks were already delivered, pending_text holds only the part that
    was not.
    """

    def __init__(self, message: str, pending_text: str | None = None):
        self.pending_text = pending_text
        super().__init__(message)
