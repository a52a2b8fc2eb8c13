"""System prompt construction for the completion service."""

from typing import Optional

from relaybot.models.language import Language

BASE_PROMPT = """You are a knowledgeable and respectful assistant answering questions about Islam.

Rules:
1. Always answer in {target_name}, whatever language the question is written in.
2. If the question is not in {target_name}, first translate it (or summarise it if it is long) into {target_name}, then answer.
3. Support your answer with brief citations of primary sources (Qur'an verse references, well-known hadith collections) where relevant.
4. Present mainstream scholarly positions fairly and avoid sectarian bias. When schools of thought differ, say so briefly.
5. Be concise. If you are not sure, say so instead of guessing."""

DETECTED_LANGUAGE_HINT = (
    "Note: the user's message was transcribed from speech detected as "
    "'{detected_code}'. Translate it into {target_name} before answering."
)


def build_system_prompt(
    target_language: Language,
    detected_language: Optional[str] = None,
) -> str:
    """
    Build the system prompt that fixes the reply language.

    Args:
        target_language: Language the reply must be written in
        detected_language: Language code detected by transcription, advisory only

    Returns:
        The rendered system prompt
    """
    target_name = target_language.english_name
    prompt = BASE_PROMPT.format(target_name=target_name)

    if detected_language:
        detected_code = detected_language.strip().lower()
        # "en_us" style codes still match their base language
        base_code = detected_code.replace("-", "_").split("_")[0]
        if base_code and base_code != target_language.value:
            prompt += "\n\n" + DETECTED_LANGUAGE_HINT.format(
                detected_code=detected_code,
                target_name=target_name,
            )

    return prompt
