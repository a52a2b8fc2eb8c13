"""Telegram bot adapter using python-telegram-bot.

The bot handles:
- Text messages (including /start and /lang commands, parsed downstream)
- Voice messages and audio files: normalized with their file references
- Callback queries: inline keyboard button presses
- Anything else: normalized as an unsupported event

Every update becomes a TelegramEvent handed to the registered handler.
The adapter also implements the ChatGateway operations the dispatcher
uses to reply.
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from telegram import Update
from telegram.error import BadRequest, TelegramError
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from relaybot.lib.config import TelegramConfig
from relaybot.lib.exceptions import DownloadError, MessageRejectedError, TransportError
from relaybot.services.telegram.adapter import TelegramEvent

logger = logging.getLogger(__name__)

TELEGRAM_MESSAGE_LIMIT = 4096

NEW_MESSAGES = filters.UpdateType.MESSAGE


class TelegramBotAdapter:
    """
    Telegram bot adapter using python-telegram-bot library.

    Implements the adapter pattern to isolate Telegram protocol details.
    All Telegram updates are normalized to TelegramEvent objects.
    """

    def __init__(self, config: TelegramConfig):
        """
        Initialize the Telegram bot adapter.

        Args:
            config: Telegram configuration with bot token
        """
        self.config = config
        self._app: Optional[Application] = None
        self._event_handler: Optional[Callable[[TelegramEvent], Awaitable[None]]] = None
        self._running = False

    def on_event(self, handler: Callable[[TelegramEvent], Awaitable[None]]) -> None:
        """
        Register event handler callback.

        Args:
            handler: Async function that processes TelegramEvent
        """
        self._event_handler = handler

    @property
    def username(self) -> Optional[str]:
        """The bot's @username, known once start() has fetched it."""
        if not self._app:
            return None
        return self._app.bot.username

    async def start(self) -> None:
        """Start long polling for Telegram updates."""
        if self._running:
            logger.warning("Bot already running")
            return

        logger.info("Initializing Telegram bot...")

        # Each update runs in its own task so slow transcriptions in one
        # chat do not block other chats
        self._app = (
            ApplicationBuilder()
            .token(self.config.bot_token)
            .concurrent_updates(True)
            .build()
        )

        self._app.add_handler(MessageHandler(NEW_MESSAGES & filters.TEXT, self._handle_text))
        self._app.add_handler(MessageHandler(NEW_MESSAGES & filters.VOICE, self._handle_voice))
        self._app.add_handler(MessageHandler(NEW_MESSAGES & filters.AUDIO, self._handle_audio))
        self._app.add_handler(CallbackQueryHandler(self._handle_callback))

        # Anything not matched above
        self._app.add_handler(MessageHandler(NEW_MESSAGES, self._handle_unsupported))

        self._app.add_error_handler(self._handle_error)

        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling(drop_pending_updates=True)

        self._running = True
        logger.info("Telegram bot started and listening for messages")

    async def stop(self) -> None:
        """Stop the bot gracefully."""
        if not self._running or not self._app:
            return

        logger.info("Stopping Telegram bot...")

        await self._app.updater.stop()
        await self._app.stop()
        await self._app.shutdown()

        self._running = False
        logger.info("Telegram bot stopped")

    async def _dispatch_event(self, event: TelegramEvent) -> None:
        """Dispatch event to registered handler."""
        if self._event_handler:
            try:
                await self._event_handler(event)
            except Exception as e:
                logger.exception(f"Error handling event: {e}")

    # Update handlers

    async def _handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle text message, commands included."""
        event = TelegramEvent.text(
            chat_id=update.effective_chat.id,
            text=update.message.text or "",
        )
        await self._dispatch_event(event)

    async def _handle_voice(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle voice message."""
        voice = update.message.voice

        event = TelegramEvent.voice(
            chat_id=update.effective_chat.id,
            file_id=voice.file_id,
            duration=_seconds(voice.duration),
            file_size=voice.file_size,
        )
        await self._dispatch_event(event)

    async def _handle_audio(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle audio file."""
        audio = update.message.audio

        event = TelegramEvent.audio(
            chat_id=update.effective_chat.id,
            file_id=audio.file_id,
            duration=_seconds(audio.duration),
            title=audio.title,
            file_size=audio.file_size,
        )
        await self._dispatch_event(event)

    async def _handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """
        Handle callback query from inline keyboard button press.

        The query is acknowledged by the dispatcher, not here, so the
        answer can depend on the outcome.
        """
        query = update.callback_query

        if not query:
            return

        chat_id = query.message.chat_id if query.message else update.effective_chat.id

        event = TelegramEvent.callback(
            chat_id=chat_id,
            callback_data=query.data or "",
            callback_id=query.id,
            message_id=query.message.message_id if query.message else None,
            user_id=query.from_user.id if query.from_user else None,
        )

        logger.debug(f"Callback received: {query.data}")
        await self._dispatch_event(event)

    async def _handle_unsupported(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle any message without text, voice or audio."""
        message = update.message
        kind = None
        if message is not None:
            kind = next(
                (attr for attr in ("photo", "video", "document", "sticker", "video_note",
                                   "location", "contact", "animation")
                 if getattr(message, attr, None)),
                None,
            )

        event = TelegramEvent.unsupported(chat_id=update.effective_chat.id, kind=kind)
        await self._dispatch_event(event)

    async def _handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log errors raised while polling or inside handlers."""
        logger.error(f"Telegram error: {context.error}", exc_info=context.error)

    # ChatGateway operations

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
        reply_markup: Any = None,
    ) -> None:
        """
        Send text message to user, split into chunks over the Telegram limit.

        The reply markup is attached to the last chunk.

        Raises:
            MessageRejectedError: If Telegram rejected the message (e.g. bad
                Markdown). pending_text is the rejected chunk onwards.
            TransportError: On any other Telegram API failure
        """
        bot = self._require_bot()
        chunks = self._split_message(text)
        offset = 0

        for index, chunk in enumerate(chunks):
            is_last = index == len(chunks) - 1
            # Chunks are stripped slices of text, in order
            start = text.find(chunk, offset)
            offset = start + len(chunk)
            try:
                await bot.send_message(
                    chat_id=chat_id,
                    text=chunk,
                    parse_mode=parse_mode,
                    reply_markup=reply_markup if is_last else None,
                )
            except BadRequest as e:
                raise MessageRejectedError(
                    f"Telegram rejected message: {e.message}",
                    pending_text=text[start:] if index else None,
                ) from e
            except TelegramError as e:
                raise TransportError(
                    f"send_message failed: {e}", service="telegram", original_error=e
                ) from e

    async def download_file(self, file_id: str, target_dir: Path) -> Path:
        """
        Download a Telegram file into target_dir.

        Returns:
            Local path of the saved file

        Raises:
            DownloadError: If the file could not be fetched or saved
        """
        bot = self._require_bot()
        target_dir.mkdir(parents=True, exist_ok=True)
        timeout = self.config.download_timeout

        try:
            file = await bot.get_file(file_id, read_timeout=timeout)
            suffix = Path(file.file_path).suffix if file.file_path else ""
            destination = target_dir / f"{file.file_unique_id}{suffix}"
            await file.download_to_drive(destination, read_timeout=timeout)
        except (TelegramError, OSError) as e:
            raise DownloadError(
                f"Download of {file_id} failed: {e}", service="telegram", original_error=e
            ) from e

        logger.debug(f"Downloaded {file_id} to {destination}")
        return destination

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        """Acknowledge a callback query."""
        bot = self._require_bot()
        try:
            await bot.answer_callback_query(callback_id, text=text)
        except TelegramError as e:
            raise TransportError(
                f"answer_callback_query failed: {e}", service="telegram", original_error=e
            ) from e

    async def clear_reply_markup(self, chat_id: int, message_id: int) -> None:
        """Remove the inline keyboard from a message."""
        bot = self._require_bot()
        try:
            await bot.edit_message_reply_markup(
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=None,
            )
        except TelegramError as e:
            raise TransportError(
                f"edit_message_reply_markup failed: {e}", service="telegram", original_error=e
            ) from e

    def _require_bot(self):
        if not self._app:
            raise RuntimeError("Bot not started")
        return self._app.bot

    def _split_message(self, text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> list[str]:
        """
        Split text into chunks no longer than the Telegram limit.

        Prefers paragraph breaks, then newlines, then spaces, and only
        hard-splits when none fall inside the window.
        """
        if len(text) <= limit:
            return [text]

        chunks = []
        remaining = text

        while len(remaining) > limit:
            window = remaining[:limit]
            cut = -1
            for separator in ("\n\n", "\n", " "):
                position = window.rfind(separator)
                if position > 0:
                    cut = position
                    break

            if cut == -1:
                chunks.append(window)
                remaining = remaining[limit:]
            else:
                chunks.append(remaining[:cut].rstrip())
                remaining = remaining[cut:].lstrip()

        if remaining:
            chunks.append(remaining)

        return chunks


def _seconds(duration: Any) -> Optional[int]:
    """Normalize a Telegram duration (int or timedelta) to whole seconds."""
    if duration is None:
        return None
    if hasattr(duration, "total_seconds"):
        return int(duration.total_seconds())
    return int(duration)
