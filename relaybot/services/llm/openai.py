"""OpenAI LLM Provider implementation using httpx."""

import logging
import os
from typing import Optional

import httpx

from relaybot.lib.exceptions import CompletionError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """
    OpenAI LLM provider using the Chat Completions API.

    Implements the LLMProvider Protocol. Other OpenAI-compatible services
    subclass this and override the defaults.

    Environment Variables:
        OPENAI_API_KEY: Required. Your OpenAI API key.
        OPENAI_MODEL: Optional. Model to use (default: gpt-4o-mini).
        OPENAI_BASE_URL: Optional. API base URL (default: https://api.openai.com/v1).
    """

    NAME = "openai"
    ENV_PREFIX = "OPENAI"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TIMEOUT = 60
    DEFAULT_TEMPERATURE = 0.3
    DEFAULT_MAX_TOKENS = 800

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: int | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the provider.

        Args:
            api_key: API key (or from <PREFIX>_API_KEY env var)
            model: Model to use
            timeout: Request timeout in seconds (default: 60)
            base_url: API base URL
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the reply
            http_client: Optional shared client; closing it stays with the caller
        """
        prefix = self.ENV_PREFIX
        self._api_key = api_key or os.environ.get(f"{prefix}_API_KEY")
        self._model = model or os.environ.get(f"{prefix}_MODEL", self.DEFAULT_MODEL)
        self._timeout = timeout or self.DEFAULT_TIMEOUT
        self._base_url = base_url or os.environ.get(f"{prefix}_BASE_URL", self.DEFAULT_BASE_URL)
        self._api_url = f"{self._base_url.rstrip('/')}/chat/completions"
        self._temperature = self.DEFAULT_TEMPERATURE if temperature is None else temperature
        self._max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def provider_name(self) -> str:
        """Return the provider identifier."""
        return self.NAME

    @property
    def model(self) -> str:
        """Model sent with every request."""
        return self._model

    async def complete(self, system_prompt: str, user_content: str) -> str:
        """
        Send a system prompt and user message and return the completion.

        Returns:
            str: The completion text ("" if the service returned empty content)

        Raises:
            CompletionError: On any failure
        """
        if not self._api_key:
            raise CompletionError(
                provider=self.provider_name, message=f"{self.ENV_PREFIX}_API_KEY not set"
            )

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        try:
            response = await self._get_client().post(
                self._api_url, headers=headers, json=payload, timeout=self._timeout
            )
        except httpx.TimeoutException as e:
            raise CompletionError(
                provider=self.provider_name,
                message=f"Request timed out after {self._timeout}s",
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            raise CompletionError(
                provider=self.provider_name,
                message=f"Network error: {str(e)}",
                original_error=e,
            ) from e

        if response.status_code != 200:
            raise CompletionError(
                provider=self.provider_name,
                message=f"API error: {_error_message(response)}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(
                provider=self.provider_name,
                message="Invalid JSON in response",
                original_error=e,
            ) from e

        if not isinstance(data, dict) or not data.get("choices"):
            raise CompletionError(provider=self.provider_name, message="No choices in response")

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionError(
                provider=self.provider_name,
                message="Malformed choice in response",
                original_error=e,
            ) from e

        if content is None:
            content = ""

        usage = data.get("usage") or {}
        logger.debug(
            f"{self.provider_name} completion: {len(content)} chars, "
            f"tokens={usage.get('total_tokens')}"
        )
        return content

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client


def _error_message(response: httpx.Response) -> str:
    try:
        error_data = response.json() if response.text else {}
    except ValueError:
        error_data = {}
    error = error_data.get("error") if isinstance(error_data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"HTTP {response.status_code}"
