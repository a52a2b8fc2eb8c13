"""Telegram event normalization layer.

This module defines normalized events from Telegram, isolating the
Telegram protocol details from the rest of the application.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

TEXT = "text"
VOICE = "voice"
AUDIO = "audio"
CALLBACK = "callback"
UNSUPPORTED = "unsupported"


@dataclass
class TelegramEvent:
    """
    Normalized inbound event from Telegram.

    Attributes:
        event_type: "text", "voice", "audio", "callback" or "unsupported"
        chat_id: Telegram chat ID
        timestamp: When the event was received
        payload: Event-specific data (text, file info, or callback data)
    """

    event_type: str
    chat_id: int
    timestamp: datetime
    payload: dict

    @classmethod
    def text(cls, chat_id: int, text: str) -> "TelegramEvent":
        """Create a text message event."""
        return cls(
            event_type=TEXT,
            chat_id=chat_id,
            timestamp=datetime.now(),
            payload={"text": text},
        )

    @classmethod
    def voice(
        cls,
        chat_id: int,
        file_id: str,
        duration: Optional[int] = None,
        file_size: Optional[int] = None,
    ) -> "TelegramEvent":
        """Create a voice message event."""
        return cls(
            event_type=VOICE,
            chat_id=chat_id,
            timestamp=datetime.now(),
            payload={
                "file_id": file_id,
                "duration": duration,
                "file_size": file_size,
            },
        )

    @classmethod
    def audio(
        cls,
        chat_id: int,
        file_id: str,
        duration: Optional[int] = None,
        title: Optional[str] = None,
        file_size: Optional[int] = None,
    ) -> "TelegramEvent":
        """Create an audio file event."""
        return cls(
            event_type=AUDIO,
            chat_id=chat_id,
            timestamp=datetime.now(),
            payload={
                "file_id": file_id,
                "duration": duration,
                "title": title,
                "file_size": file_size,
            },
        )

    @classmethod
    def callback(
        cls,
        chat_id: int,
        callback_data: str,
        callback_id: Optional[str] = None,
        message_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> "TelegramEvent":
        """
        Create a callback query event.

        Callback data format: <action>:<value>, e.g. set_lang:ar

        Args:
            chat_id: Telegram chat ID
            callback_data: The callback_data string from the button press
            callback_id: Query ID, needed to acknowledge the press
            message_id: ID of the message containing the button (for editing)
            user_id: ID of the user who pressed the button
        """
        return cls(
            event_type=CALLBACK,
            chat_id=chat_id,
            timestamp=datetime.now(),
            payload={
                "callback_data": callback_data,
                "callback_id": callback_id,
                "message_id": message_id,
                "user_id": user_id,
            },
        )

    @classmethod
    def unsupported(cls, chat_id: int, kind: Optional[str] = None) -> "TelegramEvent":
        """Create an event for a message with no text, voice or audio."""
        return cls(
            event_type=UNSUPPORTED,
            chat_id=chat_id,
            timestamp=datetime.now(),
            payload={"kind": kind},
        )

    @property
    def is_text(self) -> bool:
        return self.event_type == TEXT

    @property
    def is_voice(self) -> bool:
        return self.event_type == VOICE

    @property
    def is_audio(self) -> bool:
        return self.event_type == AUDIO

    @property
    def is_media(self) -> bool:
        """Check if this event carries a file to transcribe."""
        return self.event_type in (VOICE, AUDIO)

    @property
    def is_callback(self) -> bool:
        return self.event_type == CALLBACK

    @property
    def message_text(self) -> Optional[str]:
        """Get the raw text if this is a text event."""
        if self.is_text:
            return self.payload.get("text")
        return None

    @property
    def file_id(self) -> Optional[str]:
        """Get file_id if this is a voice or audio event."""
        if self.is_media:
            return self.payload.get("file_id")
        return None

    @property
    def duration(self) -> Optional[int]:
        """Get duration in seconds if this is a voice or audio event."""
        if self.is_media:
            return self.payload.get("duration")
        return None

    @property
    def title(self) -> Optional[str]:
        """Get the audio title if present."""
        if self.is_audio:
            return self.payload.get("title")
        return None

    @property
    def callback_data(self) -> Optional[str]:
        """Get callback_data if this is a callback event."""
        if self.is_callback:
            return self.payload.get("callback_data")
        return None

    @property
    def callback_id(self) -> Optional[str]:
        """Get the callback query ID if this is a callback event."""
        if self.is_callback:
            return self.payload.get("callback_id")
        return None

    @property
    def message_id(self) -> Optional[int]:
        """Get message_id if this is a callback event."""
        if self.is_callback:
            return self.payload.get("message_id")
        return None

    @property
    def callback_action(self) -> Optional[str]:
        """
        Get the action type from callback_data.

        Returns the prefix before the first colon (e.g., 'set_lang').
        """
        if self.is_callback and self.callback_data:
            parts = self.callback_data.split(":", 1)
            return parts[0] if parts else None
        return None

    @property
    def callback_value(self) -> Optional[str]:
        """
        Get the value portion from callback_data.

        Returns everything after the first colon.
        """
        if self.is_callback and self.callback_data:
            parts = self.callback_data.split(":", 1)
            return parts[1] if len(parts) > 1 else None
        return None
