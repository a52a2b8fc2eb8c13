"""Unit tests for TelegramBotAdapter message splitting and gateway errors."""

from datetime import timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.error import BadRequest, NetworkError

from relaybot.lib.config import TelegramConfig
from relaybot.lib.exceptions import DownloadError, MessageRejectedError, TransportError
from relaybot.services.telegram.bot import TELEGRAM_MESSAGE_LIMIT, TelegramBotAdapter, _seconds


@pytest.fixture
def bot():
    """Create a bot instance for testing (without starting it)."""
    config = TelegramConfig(TELEGRAM_BOT_TOKEN="test_token")
    return TelegramBotAdapter(config)


@pytest.fixture
def started_bot(bot):
    """Bot with a fake Application so gateway calls reach a mock."""
    app = MagicMock()
    app.bot = AsyncMock()
    bot._app = app
    return bot


class TestMessageSplitting:
    """Tests for _split_message method."""

    def test_short_message_not_split(self, bot):
        text = "Short message"
        assert bot._split_message(text) == [text]

    def test_exact_limit_not_split(self, bot):
        text = "a" * TELEGRAM_MESSAGE_LIMIT
        assert bot._split_message(text) == [text]

    def test_split_at_paragraph(self, bot):
        """Should prefer splitting at paragraph boundaries."""
        para1 = "a" * 2000
        para2 = "b" * 2000
        para3 = "c" * 2000
        text = f"{para1}\n\n{para2}\n\n{para3}"

        chunks = bot._split_message(text)

        assert len(chunks) == 2
        assert para1 in chunks[0]
        assert para2 in chunks[0]
        assert chunks[1] == para3

    def test_split_at_newline(self, bot):
        line1 = "a" * 3000
        line2 = "b" * 3000

        chunks = bot._split_message(f"{line1}\n{line2}")

        assert chunks == [line1, line2]

    def test_split_at_space(self, bot):
        word = "word "
        text = word * (TELEGRAM_MESSAGE_LIMIT // len(word) + 100)

        chunks = bot._split_message(text)

        assert len(chunks) >= 2
        assert all(len(c) <= TELEGRAM_MESSAGE_LIMIT for c in chunks)
        for chunk in chunks[:-1]:
            assert chunk.endswith("word")

    def test_hard_split_when_necessary(self, bot):
        text = "a" * (TELEGRAM_MESSAGE_LIMIT * 3 + 100)

        chunks = bot._split_message(text)

        assert len(chunks) == 4
        assert all(len(c) == TELEGRAM_MESSAGE_LIMIT for c in chunks[:-1])
        assert len(chunks[-1]) == 100

    def test_empty_message(self, bot):
        assert bot._split_message("") == [""]


class TestGatewayOperations:
    """Tests for send_message/download_file error mapping."""

    @pytest.mark.asyncio
    async def test_send_message_passes_parse_mode_and_markup(self, started_bot):
        markup = object()

        await started_bot.send_message(1, "hello", parse_mode="Markdown", reply_markup=markup)

        started_bot._app.bot.send_message.assert_awaited_once_with(
            chat_id=1, text="hello", parse_mode="Markdown", reply_markup=markup
        )

    @pytest.mark.asyncio
    async def test_markup_only_on_last_chunk(self, started_bot):
        markup = object()
        text = "a" * 3000 + "\n" + "b" * 3000

        await started_bot.send_message(1, text, reply_markup=markup)

        calls = started_bot._app.bot.send_message.await_args_list
        assert len(calls) == 2
        assert calls[0].kwargs["reply_markup"] is None
        assert calls[1].kwargs["reply_markup"] is markup

    @pytest.mark.asyncio
    async def test_bad_request_becomes_message_rejected(self, started_bot):
        started_bot._app.bot.send_message.side_effect = BadRequest("Can't parse entities")

        with pytest.raises(MessageRejectedError) as exc_info:
            await started_bot.send_message(1, "*broken", parse_mode="Markdown")

        assert exc_info.value.pending_text is None

    @pytest.mark.asyncio
    async def test_rejected_later_chunk_reports_pending_text(self, started_bot):
        first = "a" * 3000
        second = "b" * 3000
        started_bot._app.bot.send_message.side_effect = [
            None,
            BadRequest("Can't parse entities"),
        ]

        with pytest.raises(MessageRejectedError) as exc_info:
            await started_bot.send_message(1, f"{first}\n{second}", parse_mode="Markdown")

        assert exc_info.value.pending_text == second

    def test_username_unknown_before_start(self, bot):
        assert bot.username is None

    def test_username_from_started_bot(self, started_bot):
        started_bot._app.bot.username = "RelayBot"

        assert started_bot.username == "RelayBot"

    @pytest.mark.asyncio
    async def test_network_error_becomes_transport_error(self, started_bot):
        started_bot._app.bot.send_message.side_effect = NetworkError("connection reset")

        with pytest.raises(TransportError) as exc_info:
            await started_bot.send_message(1, "hello")

        assert not isinstance(exc_info.value, MessageRejectedError)
        assert exc_info.value.service == "telegram"

    @pytest.mark.asyncio
    async def test_download_saves_under_target_dir(self, started_bot, tmp_path: Path):
        remote = MagicMock()
        remote.file_path = "voice/file_7.oga"
        remote.file_unique_id = "uniq7"
        remote.download_to_drive = AsyncMock()
        started_bot._app.bot.get_file.return_value = remote

        path = await started_bot.download_file("file-7", tmp_path / "media")

        assert path == tmp_path / "media" / "uniq7.oga"
        assert (tmp_path / "media").is_dir()
        remote.download_to_drive.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_download_failure_raises_download_error(self, started_bot, tmp_path: Path):
        started_bot._app.bot.get_file.side_effect = NetworkError("timed out")

        with pytest.raises(DownloadError):
            await started_bot.download_file("file-7", tmp_path)

    @pytest.mark.asyncio
    async def test_operations_require_started_bot(self, bot):
        with pytest.raises(RuntimeError):
            await bot.send_message(1, "hello")


class TestSeconds:
    """Tests for duration normalization."""

    def test_int(self):
        assert _seconds(12) == 12

    def test_timedelta(self):
        assert _seconds(timedelta(seconds=9)) == 9

    def test_none(self):
        assert _seconds(None) is None


class TestUpdateNormalization:
    """Telegram updates become TelegramEvents handed to the handler."""

    @pytest.fixture
    def received(self, bot):
        events = []

        async def handler(event):
            events.append(event)

        bot.on_event(handler)
        return events

    @pytest.mark.asyncio
    async def test_voice_update(self, bot, received):
        update = MagicMock()
        update.effective_chat.id = 10
        update.message.voice.file_id = "v-1"
        update.message.voice.duration = timedelta(seconds=5)
        update.message.voice.file_size = 900

        await bot._handle_voice(update, MagicMock())

        (event,) = received
        assert event.is_voice
        assert event.chat_id == 10
        assert event.file_id == "v-1"
        assert event.duration == 5

    @pytest.mark.asyncio
    async def test_callback_update(self, bot, received):
        update = MagicMock()
        update.callback_query.id = "q-9"
        update.callback_query.data = "set_lang:ar"
        update.callback_query.message.chat_id = 10
        update.callback_query.message.message_id = 321
        update.callback_query.from_user.id = 5

        await bot._handle_callback(update, MagicMock())

        (event,) = received
        assert event.callback_id == "q-9"
        assert event.callback_value == "ar"
        assert event.message_id == 321

    @pytest.mark.asyncio
    async def test_unsupported_update_detects_kind(self, bot, received):
        update = MagicMock()
        update.effective_chat.id = 10
        update.message.photo = [object()]

        await bot._handle_unsupported(update, MagicMock())

        (event,) = received
        assert event.event_type == "unsupported"
        assert event.payload["kind"] == "photo"

    @pytest.mark.asyncio
    async def test_handler_errors_are_contained(self, bot):
        async def failing(event):
            raise RuntimeError("boom")

        bot.on_event(failing)
        update = MagicMock()
        update.effective_chat.id = 10
        update.message.text = "hello"

        # Should not raise
        await bot._handle_text(update, MagicMock())
