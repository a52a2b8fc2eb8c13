"""Keyboard builder module for Telegram inline keyboards.

Button labels are sourced from messages.py; callback data follows
the <action>:<value> format parsed by TelegramEvent.
"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from relaybot.lib.messages import get_button_label
from relaybot.models.language import Language

SET_LANGUAGE_ACTION = "set_lang"


def language_callback_data(language: Language) -> str:
    """Callback data for the button selecting a language."""
    return f"{SET_LANGUAGE_ACTION}:{language.value}"


def build_language_keyboard(current: Language | None = None) -> InlineKeyboardMarkup:
    """Build the reply language menu.

    Args:
        current: Language to mark as selected, if any

    Returns:
        InlineKeyboardMarkup with one button per supported language
    """
    buttons = [
        InlineKeyboardButton(
            text=get_button_label(language, selected=language == current),
            callback_data=language_callback_data(language),
        )
        for language in Language
    ]
    return InlineKeyboardMarkup([buttons])
