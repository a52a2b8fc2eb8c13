"""LLM provider abstraction layer."""

from relaybot.lib.config import CompletionConfig
from relaybot.services.llm.base import LLMProvider, CompletionError
from relaybot.services.llm.completion_client import CompletionClient
from relaybot.services.llm.deepseek import DeepSeekProvider
from relaybot.services.llm.openai import OpenAIProvider

_PROVIDERS: dict[str, type] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
}


def get_provider(name: str, **kwargs) -> LLMProvider:
    """
    Get an LLM provider instance by name.

    Args:
        name: Provider identifier (e.g., "openai", "deepseek")
        **kwargs: Provider-specific configuration

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If provider name is not registered
    """
    if name not in _PROVIDERS:
        available = ", ".join(_PROVIDERS.keys())
        raise ValueError(f"Unknown provider '{name}'. Available: {available}")

    return _PROVIDERS[name](**kwargs)


def register_provider(name: str, provider_class: type) -> None:
    """Register a new provider class."""
    _PROVIDERS[name] = provider_class


def create_completion_client(config: CompletionConfig) -> CompletionClient:
    """Build a CompletionClient for the configured provider."""
    provider = get_provider(
        config.provider,
        api_key=config.get_api_key(),
        model=config.model,
        timeout=config.timeout_seconds,
        base_url=config.base_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    return CompletionClient(provider)


__all__ = [
    "LLMProvider",
    "CompletionError",
    "CompletionClient",
    "OpenAIProvider",
    "DeepSeekProvider",
    "get_provider",
    "register_provider",
    "create_completion_client",
]
