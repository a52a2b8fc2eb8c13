"""DeepSeek LLM Provider implementation using httpx."""

from relaybot.services.llm.openai import OpenAIProvider


class DeepSeekProvider(OpenAIProvider):
    """
    DeepSeek LLM provider using the Chat Completions API.

    DeepSeek uses an OpenAI-compatible API format.

    Environment Variables:
        DEEPSEEK_API_KEY: Required. Your DeepSeek API key.
        DEEPSEEK_MODEL: Optional. Model to use (default: deepseek-chat).
        DEEPSEEK_BASE_URL: Optional. API base URL (default: https://api.deepseek.com).
    """

    NAME = "deepseek"
    ENV_PREFIX = "DEEPSEEK"
    DEFAULT_BASE_URL = "https://api.deepseek.com"
    DEFAULT_MODEL = "deepseek-chat"
