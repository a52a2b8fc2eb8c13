"""Chat platform contract used by the dispatcher."""

from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ChatGateway(Protocol):
    """
    Outbound operations the dispatcher needs from the chat platform.

    TelegramBotAdapter implements this; tests substitute an AsyncMock.
    """

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        reply_markup: Any = None,
    ) -> None:
        """
        Send a text message.

        Raises:
            MessageRejectedError: If the platform refused the formatting.
                Its pending_text is set when earlier chunks were delivered.
        """
        ...

    async def download_file(self, file_id: str, target_dir: Path) -> Path:
        """
        Download a remote file into target_dir.

        Returns:
            Local path of the downloaded file

        Raises:
            DownloadError: If the download failed
        """
        ...

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        """Acknowledge a callback query so the client stops its spinner."""
        ...

    async def clear_reply_markup(self, chat_id: int, message_id: int) -> None:
        """Remove the inline keyboard from a previously sent message."""
        ...
