"""AssemblyAI transcription service using httpx.

The upload/create/poll cycle:
1. POST /upload with the raw audio bytes -> upload_url
2. POST /transcript with the upload_url -> transcript id
3. GET /transcript/{id} every poll interval until the status is
   "completed" or "error", or until the deadline passes
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import httpx

from relaybot.lib.config import TranscriptionConfig
from relaybot.lib.exceptions import TranscriptionError
from relaybot.models.transcript import TranscriptResult
from relaybot.services.transcription.base import TranscriptionService

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"


class AssemblyAITranscriptionService(TranscriptionService):
    """
    Transcription via the AssemblyAI REST API.

    Language detection is always requested, so completed results carry
    a language code and confidence when the service could determine them.

    Environment Variables:
        ASSEMBLY_API_KEY: Required per call. Your AssemblyAI API key.
        ASSEMBLY_BASE_URL: Optional. API base URL.
    """

    def __init__(
        self,
        config: TranscriptionConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the AssemblyAI service.

        Args:
            config: Transcription configuration (key, base URL, poll interval, timeout)
            http_client: Optional client to use; one is created on first use otherwise
            clock: Monotonic clock used for the poll deadline
            sleep: Coroutine used to wait between polls
        """
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None
        self._clock = clock
        self._sleep = sleep
        self._base_url = config.base_url.rstrip("/")

    async def transcribe(
        self,
        audio: bytes,
        timeout: Optional[float] = None,
    ) -> TranscriptResult:
        """
        Upload audio, create a transcript job and wait for it to finish.

        Raises:
            TranscriptionError: On missing key, error status, timeout or transport failure
        """
        if not self.config.api_key:
            raise TranscriptionError("ASSEMBLY_API_KEY not set")

        if not audio:
            raise TranscriptionError("Audio payload is empty")

        timeout = timeout if timeout is not None else self.config.timeout_seconds

        upload_url = await self._upload(audio)
        transcript_id = await self._create_transcript(upload_url)
        logger.info(f"Transcript {transcript_id} created ({len(audio)} bytes uploaded)")

        result = await self._wait_for_completion(transcript_id, timeout)
        logger.debug(
            f"Transcript {transcript_id} completed: {len(result.text)} chars, "
            f"language={result.language_code} confidence={result.language_confidence}"
        )
        return result

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # API calls

    async def _upload(self, audio: bytes) -> str:
        data = await self._request(
            "POST",
            "/upload",
            content=audio,
            headers={"Content-Type": "application/octet-stream"},
        )
        upload_url = data.get("upload_url")
        if not upload_url:
            raise TranscriptionError("Upload response did not include upload_url")
        return upload_url

    async def _create_transcript(self, upload_url: str) -> str:
        data = await self._request(
            "POST",
            "/transcript",
            json={
                "audio_url": upload_url,
                "punctuate": True,
                "format_text": True,
                "language_detection": True,
            },
        )
        transcript_id = data.get("id")
        if not transcript_id:
            raise TranscriptionError("Transcript response did not include an id")
        return transcript_id

    async def _poll_transcript(self, transcript_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/transcript/{transcript_id}")

    async def _wait_for_completion(self, transcript_id: str, timeout: float) -> TranscriptResult:
        """
        Poll until the transcript reaches a terminal status.

        Exactly one outcome per call: completed result, error status or
        timeout. The deadline is checked after every non-terminal poll.
        """
        deadline = self._clock() + timeout
        polls = 0

        while True:
            data = await self._poll_transcript(transcript_id)
            polls += 1
            status = data.get("status")

            if status == STATUS_COMPLETED:
                return TranscriptResult.from_api(data)

            if status == STATUS_ERROR:
                error = data.get("error") or "AssemblyAI transcription error"
                raise TranscriptionError(f"Transcript {transcript_id} failed: {error}")

            if self._clock() >= deadline:
                raise TranscriptionError(
                    f"Transcript {transcript_id} timed out after {timeout:.0f}s ({polls} polls)",
                    timed_out=True,
                )

            logger.debug(f"Transcript {transcript_id} status={status}, poll {polls}")
            await self._sleep(self.config.poll_interval_seconds)

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        client = self._get_client()
        headers = {"Authorization": self.config.api_key, **kwargs.pop("headers", {})}

        try:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                headers=headers,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            raise TranscriptionError(
                f"Request to {path} timed out after {self.config.request_timeout_seconds}s",
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            raise TranscriptionError(
                f"Network error: {e}",
                original_error=e,
            ) from e

        if response.status_code >= 400:
            raise TranscriptionError(
                f"API error on {path}: HTTP {response.status_code} {_error_detail(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TranscriptionError(
                f"Invalid JSON from {path}",
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise TranscriptionError(f"Unexpected response from {path}")
        return data

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
            self._owns_client = True
        return self._client


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        return str(data.get("error", ""))
    return ""
