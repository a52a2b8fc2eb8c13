"""Response language preference."""

from enum import Enum
from typing import Optional


class Language(str, Enum):
    """Language a chat wants replies delivered in."""

    ENGLISH = "en"
    ARABIC = "ar"

    @classmethod
    def default(cls) -> "Language":
        """Language used for chats that never chose one."""
        return cls.ENGLISH

    @classmethod
    def parse(cls, code: Optional[str]) -> Optional["Language"]:
        """
        Parse a language code case-insensitively.

        Args:
            code: Raw code such as "en", " AR ", or a Language value

        Returns:
            Matching Language, or None for anything unrecognised
        """
        if isinstance(code, cls):
            return code
        if not isinstance(code, str):
            return None
        try:
            return cls(code.strip().lower())
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        """Human-readable name in the language itself."""
        return _DISPLAY_NAMES[self]

    @property
    def english_name(self) -> str:
        """Name of the language in English, used in prompts."""
        return _ENGLISH_NAMES[self]


_DISPLAY_NAMES = {
    Language.ENGLISH: "English",
    Language.ARABIC: "العربية",
}

_ENGLISH_NAMES = {
    Language.ENGLISH: "English",
    Language.ARABIC: "Arabic",
}
