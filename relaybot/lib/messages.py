"""Externalized message templates for Telegram replies.

All user-facing texts live here, keyed by message name and language,
so handlers never hardcode wording.
"""

from relaybot.models.language import Language

EN = Language.ENGLISH
AR = Language.ARABIC

# =============================================================================
# Onboarding and language selection
# =============================================================================

WELCOME = {
    EN: (
        "👋 *Welcome!*\n\n"
        "Send me a question as text, a voice message or an audio file and "
        "I will answer it.\n\n"
        "Replies are currently in *{language_name}*. Use /lang to change it."
    ),
    AR: (
        "👋 *أهلاً وسهلاً!*\n\n"
        "أرسل سؤالك كنص أو رسالة صوتية أو ملف صوتي وسأجيب عليه.\n\n"
        "لغة الردود الحالية: *{language_name}*. استخدم /lang لتغييرها."
    ),
}

LANGUAGE_MENU = {
    EN: "🌐 Replies are in {language_name}. Choose the reply language:",
    AR: "🌐 لغة الردود الحالية: {language_name}. اختر لغة الردود:",
}

LANGUAGE_SET = {
    EN: "✅ Reply language set to English.",
    AR: "✅ تم ضبط لغة الردود على العربية.",
}

# =============================================================================
# Media handling
# =============================================================================

VOICE_RECEIVED = {
    EN: "🎙️ Received your voice message ({duration}s). Transcribing...",
    AR: "🎙️ تم استلام رسالتك الصوتية ({duration} ث). جارٍ التفريغ...",
}

AUDIO_RECEIVED = {
    EN: "🎵 Received your audio file.{title} Transcribing...",
    AR: "🎵 تم استلام ملفك الصوتي.{title} جارٍ التفريغ...",
}

AUDIO_TITLE = {
    EN: " Title: {title}.",
    AR: " العنوان: {title}.",
}

NO_SPEECH = {
    EN: "🤔 I could not hear any speech in that recording.",
    AR: "🤔 لم أتمكن من سماع أي كلام في هذا التسجيل.",
}

# =============================================================================
# Fixed notices
# =============================================================================

EMPTY_ANSWER = {
    EN: "🤔 I don't have an answer to that. Please try rephrasing.",
    AR: "🤔 لا أملك إجابة على ذلك. حاول إعادة صياغة السؤال.",
}

UNSUPPORTED = {
    EN: "Send me text or a voice message.",
    AR: "أرسل لي نصاً أو رسالة صوتية.",
}

UNKNOWN_COMMAND = {
    EN: "❓ Unknown command. Use /start or /lang.",
    AR: "❓ أمر غير معروف. استخدم /start أو /lang.",
}

GENERIC_ERROR = {
    EN: "❌ Something went wrong. Please try again.",
    AR: "❌ حدث خطأ ما. يرجى المحاولة مرة أخرى.",
}

# =============================================================================
# Button labels
# =============================================================================

BUTTON_LANGUAGE = {
    EN: "🇬🇧 English",
    AR: "🇸🇦 العربية",
}

BUTTON_SELECTED_MARK = "✓ "


def get_message(key: str, language: Language = EN, **kwargs) -> str:
    """Get a message template with optional formatting.

    Args:
        key: Message key (module-level constant name)
        language: Language of the reply, English when the key lacks it
        **kwargs: Format arguments for the message

    Returns:
        Formatted message string
    """
    templates = globals().get(key)
    if not isinstance(templates, dict):
        templates = GENERIC_ERROR

    message = templates.get(language) or templates[EN]

    if kwargs:
        try:
            return message.format(**kwargs)
        except KeyError:
            return message
    return message


def get_button_label(language: Language, selected: bool = False) -> str:
    """Get the label of a language choice button."""
    label = BUTTON_LANGUAGE[language]
    return f"{BUTTON_SELECTED_MARK}{label}" if selected else label
