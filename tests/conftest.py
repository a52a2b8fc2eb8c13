"""Shared pytest fixtures for all test types."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from relaybot.lib.config import reset_all_configs
from relaybot.models.transcript import TranscriptResult
from relaybot.services.dispatcher import Dispatcher
from relaybot.services.preferences.store import PreferenceStore
from relaybot.services.presentation.error_handler import reset_error_presentation_layer

CHAT_ID = 12345


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached configs and the global error layer between tests."""
    reset_all_configs()
    reset_error_presentation_layer()
    yield
    reset_all_configs()
    reset_error_presentation_layer()


@pytest.fixture
def chat_id() -> int:
    return CHAT_ID


@pytest.fixture
def downloads_dir(tmp_path: Path) -> Path:
    """Scratch directory for downloaded media."""
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def chat(downloads_dir: Path) -> AsyncMock:
    """Chat gateway double; download_file writes a small fake voice file."""
    gateway = AsyncMock()

    async def download(file_id: str, target_dir: Path) -> Path:
        path = Path(target_dir) / f"{file_id}.oga"
        path.write_bytes(b"OggS fake voice payload")
        return path

    gateway.download_file = AsyncMock(side_effect=download)
    return gateway


@pytest.fixture
def preferences() -> PreferenceStore:
    return PreferenceStore()


@pytest.fixture
def transcriber() -> MagicMock:
    """Transcription service stub returning an English transcript."""
    service = MagicMock()
    service.transcribe = AsyncMock(
        return_value=TranscriptResult(
            text="What is fasting?",
            language_code="en",
            language_confidence=0.97,
            transcript_id="tr_1",
        )
    )
    return service


@pytest.fixture
def completer() -> MagicMock:
    """Completion client stub returning a canned answer."""
    client = MagicMock()
    client.complete = AsyncMock(return_value="Answer: fasting is abstaining from food.")
    return client


@pytest.fixture
def dispatcher(chat, preferences, transcriber, completer, downloads_dir) -> Dispatcher:
    return Dispatcher(
        chat=chat,
        preferences=preferences,
        transcriber=transcriber,
        completer=completer,
        downloads_dir=downloads_dir,
    )
