"""Inbound event dispatcher.

Routes every normalized TelegramEvent to one pipeline:

- text command (/start, /lang [en|ar]) -> preference store, status reply
- text question -> completion -> reply
- voice/audio -> download -> transcription -> completion -> reply
- callback (set_lang:<code>) -> preference store, confirmation
- anything else -> fixed "unsupported" notice

dispatch() is the task boundary: pipeline failures are logged and
turned into a fixed localized notice, never propagated.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, NamedTuple, Optional

from relaybot.lib.exceptions import MessageRejectedError, TransportError, UnsupportedInputError
from relaybot.lib.messages import get_message
from relaybot.models.language import Language
from relaybot.services.llm.completion_client import CompletionClient
from relaybot.services.presentation.error_handler import (
    ErrorPresentationLayer,
    get_error_presentation_layer,
)
from relaybot.services.preferences.store import PreferenceStore
from relaybot.services.telegram.adapter import TelegramEvent
from relaybot.services.telegram.base import ChatGateway
from relaybot.services.telegram.keyboards import SET_LANGUAGE_ACTION, build_language_keyboard
from relaybot.services.transcription.base import TranscriptionService

logger = logging.getLogger(__name__)

RICH_PARSE_MODE = "Markdown"

# /command, optional @BotName suffix, optional arguments
COMMAND_PATTERN = re.compile(
    r"^/(?P<name>[A-Za-z0-9_]+)(?:@(?P<target>[A-Za-z0-9_]+))?(?:\s+(?P<args>.*))?$",
    re.DOTALL,
)


class Command(NamedTuple):
    """A parsed slash command."""

    name: str
    args: Optional[str]
    target: Optional[str]

    def is_for(self, username: Optional[str]) -> bool:
        """True unless the command names a different bot than username."""
        if not self.target or not username:
            return True
        return self.target.lower() == username.lstrip("@").lower()


def parse_command(text: str) -> Optional[Command]:
    """
    Parse a slash command.

    Returns:
        Command with the name in lowercase, stripped args or None and the
        @BotName it was addressed to (if any), or None if the text is not
        a command
    """
    match = COMMAND_PATTERN.match(text.strip())
    if not match:
        return None
    args = match.group("args")
    args = args.strip() if args else None
    return Command(match.group("name").lower(), args or None, match.group("target"))


class Dispatcher:
    """
    Event-driven router between the chat platform and the two services.

    All collaborators are injected so tests can replace them with stubs.
    """

    def __init__(
        self,
        chat: ChatGateway,
        preferences: PreferenceStore,
        transcriber: TranscriptionService,
        completer: CompletionClient,
        downloads_dir: Path,
        error_layer: Optional[ErrorPresentationLayer] = None,
        bot_username: Optional[str] = None,
    ):
        self.chat = chat
        self.preferences = preferences
        self.transcriber = transcriber
        self.completer = completer
        self.downloads_dir = Path(downloads_dir)
        self.error_layer = error_layer or get_error_presentation_layer()
        # Commands addressed to another @BotName are ignored once this is known
        self.bot_username = bot_username

    async def dispatch(self, event: TelegramEvent) -> None:
        """
        Handle one inbound event.

        Never raises: failures are converted to a user-facing notice.
        """
        logger.debug(f"Handling event: {event.event_type} from {event.chat_id}")

        try:
            await self._route(event)
        except UnsupportedInputError as e:
            logger.info(f"Unsupported input from chat {event.chat_id}: {e.message}")
            language = self.preferences.get(event.chat_id)
            await self._send_safely(event.chat_id, get_message("UNSUPPORTED", language))
        except Exception as e:
            await self._present_error(event, e)

    async def _route(self, event: TelegramEvent) -> None:
        if event.is_text:
            await self._handle_text(event)
        elif event.is_media:
            await self._handle_media(event)
        elif event.is_callback:
            await self._handle_callback(event)
        else:
            raise UnsupportedInputError(
                f"No handler for {event.event_type} events", event_type=event.event_type
            )

    # Text and commands

    async def _handle_text(self, event: TelegramEvent) -> None:
        text = (event.message_text or "").strip()
        if not text:
            raise UnsupportedInputError("Empty text message", event_type=event.event_type)

        command = parse_command(text)
        if command is not None:
            if not command.is_for(self.bot_username):
                logger.debug(f"Ignoring /{command.name}@{command.target} in chat {event.chat_id}")
                return
            await self._handle_command(event.chat_id, command.name, command.args)
            return

        language = self.preferences.get(event.chat_id)
        answer = await self.completer.complete(text, language)
        await self._send_answer(event.chat_id, answer, language)

    async def _handle_command(self, chat_id: int, name: str, args: Optional[str]) -> None:
        if name == "start":
            await self._cmd_start(chat_id)
        elif name == "lang":
            await self._cmd_lang(chat_id, args)
        else:
            logger.info(f"Unknown command /{name} from chat {chat_id}")
            await self._send_notice(chat_id, "UNKNOWN_COMMAND")

    async def _cmd_start(self, chat_id: int) -> None:
        language = self.preferences.get(chat_id)
        text = get_message("WELCOME", language, language_name=language.display_name)
        await self._send_rich(chat_id, text, reply_markup=build_language_keyboard(language))

    async def _cmd_lang(self, chat_id: int, args: Optional[str]) -> None:
        if args and self.preferences.set(chat_id, args):
            await self._send_language_set(chat_id)
            return

        if args:
            logger.info(f"Unknown /lang argument {args!r} from chat {chat_id}")
        await self._send_language_menu(chat_id)

    # Voice and audio

    async def _handle_media(self, event: TelegramEvent) -> None:
        chat_id = event.chat_id
        language = self.preferences.get(chat_id)

        local_path = await self.chat.download_file(event.file_id, self.downloads_dir)
        logger.info(f"Saved {event.event_type} from chat {chat_id} to {local_path}")

        await self.chat.send_message(chat_id, self._receipt_text(event, language))

        audio = await asyncio.to_thread(local_path.read_bytes)
        transcript = await self.transcriber.transcribe(audio)
        logger.info(
            f"Transcribed {len(transcript.text)} chars for chat {chat_id} "
            f"(detected={transcript.language_code})"
        )

        if not transcript.has_text:
            await self._send_notice(chat_id, "NO_SPEECH", language)
            return

        # Stored preference decides the reply language; detection is only a hint
        answer = await self.completer.complete(
            transcript.text,
            language,
            detected_language=transcript.language_code,
        )
        await self._send_answer(chat_id, answer, language)

    def _receipt_text(self, event: TelegramEvent, language: Language) -> str:
        if event.is_voice:
            return get_message("VOICE_RECEIVED", language, duration=event.duration or 0)
        title = get_message("AUDIO_TITLE", language, title=event.title) if event.title else ""
        return get_message("AUDIO_RECEIVED", language, title=title)

    # Callbacks

    async def _handle_callback(self, event: TelegramEvent) -> None:
        chat_id = event.chat_id

        if event.callback_action != SET_LANGUAGE_ACTION:
            logger.warning(f"Unknown callback data {event.callback_data!r} from chat {chat_id}")
            await self._answer_callback(event)
            return

        if not self.preferences.set(chat_id, event.callback_value):
            logger.warning(f"Invalid language in callback {event.callback_data!r}")
            await self._answer_callback(event)
            await self._send_language_menu(chat_id)
            return

        await self._answer_callback(event)
        await self._clear_choice(event)
        await self._send_language_set(chat_id)

    async def _answer_callback(self, event: TelegramEvent) -> None:
        if not event.callback_id:
            return
        try:
            await self.chat.answer_callback(event.callback_id)
        except TransportError as e:
            # Queries older than a few minutes can no longer be answered
            logger.warning(f"Failed to answer callback in chat {event.chat_id}: {e}")

    async def _clear_choice(self, event: TelegramEvent) -> None:
        if event.message_id is None:
            return
        try:
            await self.chat.clear_reply_markup(event.chat_id, event.message_id)
        except TransportError as e:
            # The menu may already be gone (edited twice, or too old to edit)
            logger.warning(f"Failed to clear language menu in chat {event.chat_id}: {e}")

    # Sending

    async def _send_language_menu(self, chat_id: int) -> None:
        language = self.preferences.get(chat_id)
        await self.chat.send_message(
            chat_id,
            get_message("LANGUAGE_MENU", language, language_name=language.display_name),
            reply_markup=build_language_keyboard(language),
        )

    async def _send_language_set(self, chat_id: int) -> None:
        language = self.preferences.get(chat_id)
        await self.chat.send_message(chat_id, get_message("LANGUAGE_SET", language))

    async def _send_answer(self, chat_id: int, answer: str, language: Language) -> None:
        if not answer or not answer.strip():
            logger.warning(f"Completion returned empty content for chat {chat_id}")
            await self._send_notice(chat_id, "EMPTY_ANSWER", language)
            return
        await self._send_rich(chat_id, answer)

    async def _send_rich(self, chat_id: int, text: str, reply_markup: Any = None) -> None:
        """
        Send with Markdown; if the platform rejects it, resend once as plain text.

        Only the undelivered part is resent when earlier chunks of a long
        message already went out.
        """
        try:
            await self.chat.send_message(
                chat_id, text, parse_mode=RICH_PARSE_MODE, reply_markup=reply_markup
            )
        except MessageRejectedError as e:
            logger.warning(f"Rich message rejected for chat {chat_id}, resending as plain text: {e}")
            await self.chat.send_message(chat_id, e.pending_text or text, reply_markup=reply_markup)

    async def _send_notice(
        self,
        chat_id: int,
        key: str,
        language: Optional[Language] = None,
    ) -> None:
        language = language or self.preferences.get(chat_id)
        await self.chat.send_message(chat_id, get_message(key, language))

    async def _present_error(self, event: TelegramEvent, error: Exception) -> None:
        context = {"event_type": event.event_type, "chat_id": event.chat_id}
        if event.is_media:
            context["file_id"] = event.file_id
        elif event.is_callback:
            context["callback_data"] = event.callback_data

        user_error = self.error_layer.translate_exception(error, context)
        language = self.preferences.get(event.chat_id)

        await self._send_safely(event.chat_id, self.error_layer.format_message(user_error, language))

    async def _send_safely(self, chat_id: int, text: str) -> None:
        """Send a plain notice from the error boundary; delivery failures are only logged."""
        try:
            await self.chat.send_message(chat_id, text)
        except Exception as send_error:
            logger.error(f"Failed to send notice to chat {chat_id}: {send_error}")
