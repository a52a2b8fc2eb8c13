"""In-memory response language preferences, keyed by chat ID."""

import logging
from typing import Optional, Union

from relaybot.models.language import Language

logger = logging.getLogger(__name__)


class PreferenceStore:
    """
    Maps chat IDs to their preferred response language.

    Lives for the process lifetime; nothing is persisted. Writes for the
    same chat are last-write-wins.
    """

    def __init__(self, default: Optional[Language] = None):
        self._default = default or Language.default()
        self._languages: dict[int, Language] = {}

    def get(self, chat_id: int) -> Language:
        """Return the chat's language, or the default if never set."""
        return self._languages.get(chat_id, self._default)

    def set(self, chat_id: int, code: Union[str, Language]) -> bool:
        """
        Set the chat's language.

        Args:
            chat_id: Chat to update
            code: "en" or "ar", case-insensitive

        Returns:
            True if stored, False if the code was rejected (state unchanged)
        """
        language = Language.parse(code)
        if language is None:
            logger.debug(f"Rejected language code {code!r} for chat {chat_id}")
            return False

        self._languages[chat_id] = language
        logger.info(f"Chat {chat_id} reply language set to {language.value}")
        return True

    def has_preference(self, chat_id: int) -> bool:
        """Check whether the chat ever chose a language."""
        return chat_id in self._languages

    def __len__(self) -> int:
        return len(self._languages)
