"""Contract tests for LLM providers and the CompletionClient."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from relaybot.lib.config import CompletionConfig
from relaybot.lib.exceptions import CompletionError
from relaybot.models.language import Language
from relaybot.services.llm import (
    CompletionClient,
    DeepSeekProvider,
    LLMProvider,
    OpenAIProvider,
    create_completion_client,
    get_provider,
    register_provider,
)


def _chat_response(content, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={
            "id": "chatcmpl-1",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
            "usage": {"total_tokens": 42},
        },
    )


def _provider(handler, cls=OpenAIProvider, **kwargs) -> OpenAIProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("api_key", "sk-test")
    return cls(http_client=client, **kwargs)


class TestLLMProviderProtocol:
    """Protocol compliance."""

    def test_openai_is_llm_provider(self):
        assert isinstance(OpenAIProvider(api_key="sk-test"), LLMProvider)

    def test_deepseek_is_llm_provider(self):
        provider = DeepSeekProvider(api_key="sk-test")

        assert isinstance(provider, LLMProvider)
        assert provider.provider_name == "deepseek"
        assert provider.model == "deepseek-chat"

    def test_get_provider_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("nonexistent")

    def test_register_provider(self):
        class EchoProvider(OpenAIProvider):
            NAME = "echo"

        register_provider("echo", EchoProvider)

        assert get_provider("echo", api_key="k").provider_name == "echo"


class TestOpenAIProviderWireFormat:
    """Requests and responses of the chat completions endpoint."""

    @pytest.mark.asyncio
    async def test_request_payload(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return _chat_response("Fasting is abstaining from food.")

        provider = _provider(handler, model="gpt-test", temperature=0.1, max_tokens=100)

        answer = await provider.complete("SYSTEM", "What is fasting?")

        assert answer == "Fasting is abstaining from food."
        (request,) = requests
        assert request.url == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-test"
        assert body["messages"] == [
            {"role": "system", "content": "SYSTEM"},
            {"role": "user", "content": "What is fasting?"},
        ]
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == 100

    @pytest.mark.asyncio
    async def test_deepseek_base_url(self):
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return _chat_response("ok")

        provider = _provider(handler, cls=DeepSeekProvider)

        await provider.complete("SYSTEM", "hi")

        assert urls == ["https://api.deepseek.com/chat/completions"]

    @pytest.mark.asyncio
    async def test_null_content_returns_empty_string(self):
        provider = _provider(lambda request: _chat_response(None))

        assert await provider.complete("SYSTEM", "hi") == ""


class TestOpenAIProviderFailures:
    """Every failure surfaces as CompletionError."""

    @pytest.mark.asyncio
    async def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        provider = OpenAIProvider(http_client=MagicMock())

        with pytest.raises(CompletionError, match="OPENAI_API_KEY"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_non_200_uses_error_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        provider = _provider(handler)

        with pytest.raises(CompletionError, match="Rate limit reached") as exc_info:
            await provider.complete("SYSTEM", "hi")

        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_non_200_without_body(self):
        provider = _provider(lambda request: httpx.Response(503))

        with pytest.raises(CompletionError, match="HTTP 503"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_no_choices(self):
        provider = _provider(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(CompletionError, match="No choices"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_malformed_choice(self):
        provider = _provider(lambda request: httpx.Response(200, json={"choices": [{}]}))

        with pytest.raises(CompletionError, match="Malformed"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(CompletionError, match="Invalid JSON"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_non_object_json(self):
        provider = _provider(lambda request: httpx.Response(200, json=["unexpected"]))

        with pytest.raises(CompletionError, match="No choices"):
            await provider.complete("SYSTEM", "hi")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        provider = _provider(handler, timeout=5)

        with pytest.raises(CompletionError, match="timed out after 5s"):
            await provider.complete("SYSTEM", "hi")


class TestOpenAIProviderClientLifecycle:
    """Ownership of the HTTP client."""

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: _chat_response("ok")))
        provider = OpenAIProvider(api_key="sk-test", http_client=client)

        assert await provider.complete("SYSTEM", "hi") == "ok"
        await provider.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_own_client_created_once_and_closed(self):
        provider = OpenAIProvider(api_key="sk-test")

        client = provider._get_client()
        assert provider._get_client() is client

        await provider.close()

        assert client.is_closed


class TestCompletionClient:
    """CompletionClient builds the prompt and wraps provider errors."""

    def _client(self, answer="Answer") -> tuple[CompletionClient, MagicMock]:
        provider = MagicMock()
        provider.provider_name = "stub"
        provider.complete = AsyncMock(return_value=answer)
        provider.close = AsyncMock()
        return CompletionClient(provider), provider

    @pytest.mark.asyncio
    async def test_prompt_pins_target_language(self):
        client, provider = self._client()

        answer = await client.complete("  What is fasting?  ", Language.ARABIC)

        assert answer == "Answer"
        system_prompt, user_content = provider.complete.await_args.args
        assert "Always answer in Arabic" in system_prompt
        assert user_content == "What is fasting?"

    @pytest.mark.asyncio
    async def test_detected_language_adds_hint_only(self):
        client, provider = self._client()

        await client.complete("What is fasting?", Language.ARABIC, detected_language="en")

        system_prompt = provider.complete.await_args.args[0]
        assert "Always answer in Arabic" in system_prompt
        assert "detected as 'en'" in system_prompt

    @pytest.mark.asyncio
    async def test_empty_content_rejected(self):
        client, provider = self._client()

        with pytest.raises(CompletionError):
            await client.complete("   ", Language.ENGLISH)

        provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self):
        client, provider = self._client()
        provider.complete.side_effect = RuntimeError("socket closed")

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("hi", Language.ENGLISH)

        assert isinstance(exc_info.value.original_error, RuntimeError)
        assert exc_info.value.provider == "stub"

    @pytest.mark.asyncio
    async def test_completion_error_passes_through(self):
        client, provider = self._client()
        original = CompletionError("HTTP 500", provider="stub")
        provider.complete.side_effect = original

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("hi", Language.ENGLISH)

        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_close_closes_provider(self):
        client, provider = self._client()

        await client.close()

        provider.close.assert_awaited_once()


class TestCreateCompletionClient:
    """Factory wiring from CompletionConfig."""

    def test_builds_configured_provider(self, monkeypatch):
        monkeypatch.delenv("DEEPSEEK_MODEL", raising=False)
        config = CompletionConfig(
            LLM_PROVIDER="deepseek", DEEPSEEK_API_KEY="sk-ds", LLM_MODEL="deepseek-reasoner"
        )

        client = create_completion_client(config)

        assert isinstance(client.provider, DeepSeekProvider)
        assert client.provider.model == "deepseek-reasoner"

    def test_unknown_provider_raises(self):
        config = CompletionConfig(LLM_PROVIDER="llama")

        with pytest.raises(ValueError):
            create_completion_client(config)
