"""Completion client that answers user content in a target language."""

import logging
from typing import Optional

from relaybot.lib.exceptions import CompletionError
from relaybot.lib.prompts import build_system_prompt
from relaybot.models.language import Language
from relaybot.services.llm.base import LLMProvider

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Builds the language-pinned system prompt and forwards one request
    to the configured provider.

    The target language always comes from the caller (the stored
    preference). A detected language only adds a translation hint.
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def complete(
        self,
        user_content: str,
        target_language: Language,
        detected_language: Optional[str] = None,
    ) -> str:
        """
        Generate an answer to user content.

        Args:
            user_content: Text typed by the user, or a transcript
            target_language: Language the answer must be written in
            detected_language: Language code reported by transcription, if any

        Returns:
            Generated answer; "" only if the service itself returned no content

        Raises:
            CompletionError: On empty input or any provider failure
        """
        if not user_content or not user_content.strip():
            raise CompletionError(
                provider=self.provider.provider_name, message="User content cannot be empty"
            )

        system_prompt = build_system_prompt(target_language, detected_language)
        logger.debug(
            f"Requesting completion from {self.provider.provider_name} "
            f"(target={target_language.value}, detected={detected_language})"
        )

        try:
            return await self.provider.complete(system_prompt, user_content.strip())
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(
                provider=self.provider.provider_name,
                message=f"Unexpected error: {type(e).__name__}",
                original_error=e,
            ) from e

    async def close(self) -> None:
        """Release provider resources."""
        await self.provider.close()
