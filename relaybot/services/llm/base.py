"""LLM Provider Protocol and base error class."""

from typing import Protocol, runtime_checkable

from relaybot.lib.exceptions import CompletionError


@runtime_checkable
class LLMProvider(Protocol):
    """
    Contract for chat-completion provider implementations.

    Example:
        >>> provider = get_provider("openai")
        >>> answer = await provider.complete("You are helpful.", "What is fasting?")
    """

    @property
    def provider_name(self) -> str:
        """
        Return the canonical name of this provider.

        Contract:
            - MUST return a non-empty string
            - SHOULD be lowercase, alphanumeric with hyphens
        """
        ...

    async def complete(self, system_prompt: str, user_content: str) -> str:
        """
        Send one system + user exchange and return the generated text.

        Raises:
            CompletionError: On missing credentials, network errors,
                timeouts, non-success responses or malformed bodies.

        Contract:
            - MUST raise CompletionError on any failure (never return None)
            - MAY return "" only when the service itself returned empty content
            - MUST NOT modify the prompts
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


__all__ = ["LLMProvider", "CompletionError"]
