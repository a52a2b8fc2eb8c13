"""Configuration management via environment variables and pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from relaybot.lib.exceptions import ConfigurationError


class TelegramConfig(BaseSettings):
    """Configuration for the Telegram chat platform."""

    bot_token: str = Field(
        default="",
        alias="TELEGRAM_BOT_TOKEN",
        description="Telegram bot token from @BotFather",
    )

    downloads_dir: str = Field(
        default="./downloads",
        alias="DOWNLOADS_DIR",
        description="Scratch directory for downloaded voice and audio files",
    )

    download_timeout: int = Field(
        default=60,
        alias="TELEGRAM_DOWNLOAD_TIMEOUT",
        description="Timeout for media file downloads in seconds",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def is_configured(self) -> bool:
        """Check if Telegram is properly configured."""
        return bool(self.bot_token)

    def require_token(self) -> None:
        """
        Validate the primary credential.

        Raises:
            ConfigurationError: If TELEGRAM_BOT_TOKEN is missing
        """
        if not self.is_configured():
            raise ConfigurationError(
                "Missing TELEGRAM_BOT_TOKEN environment variable. Set it before running."
            )

    @property
    def downloads_path(self) -> Path:
        """Get downloads directory as Path."""
        return Path(self.downloads_dir)


class TranscriptionConfig(BaseSettings):
    """Configuration for the AssemblyAI transcription service."""

    api_key: str | None = Field(
        default=None,
        alias="ASSEMBLY_API_KEY",
        description="AssemblyAI API key",
    )

    base_url: str = Field(
        default="https://api.assemblyai.com/v2",
        alias="ASSEMBLY_BASE_URL",
        description="AssemblyAI REST API base URL",
    )

    poll_interval_seconds: float = Field(
        default=3.0,
        alias="ASSEMBLY_POLL_INTERVAL",
        description="Seconds between transcript status polls",
    )

    timeout_seconds: float = Field(
        default=300.0,
        alias="ASSEMBLY_TIMEOUT",
        description="Total time allowed for a transcript to complete",
    )

    request_timeout_seconds: float = Field(
        default=60.0,
        alias="ASSEMBLY_REQUEST_TIMEOUT",
        description="Timeout for a single HTTP request (upload, create, poll)",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)


class CompletionConfig(BaseSettings):
    """
    Configuration for the chat-completion provider.

    LLM_MODEL and LLM_BASE_URL are optional overrides; when unset each
    provider falls back to its own defaults.
    """

    provider: str = Field(
        default="openai",
        alias="LLM_PROVIDER",
        description="Completion provider to use: openai, deepseek",
    )

    openai_api_key: str | None = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key"
    )

    deepseek_api_key: str | None = Field(
        default=None, alias="DEEPSEEK_API_KEY", description="DeepSeek API key"
    )

    model: str | None = Field(
        default=None, alias="LLM_MODEL", description="Model override for the provider"
    )

    base_url: str | None = Field(
        default=None, alias="LLM_BASE_URL", description="API base URL override"
    )

    temperature: float = Field(
        default=0.3, alias="LLM_TEMPERATURE", description="Sampling temperature"
    )

    max_tokens: int = Field(
        default=800, alias="LLM_MAX_TOKENS", description="Maximum tokens in a reply"
    )

    timeout_seconds: int = Field(
        default=60,
        alias="LLM_TIMEOUT_SECONDS",
        description="Timeout for completion API requests in seconds",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def get_api_key(self, provider: str | None = None) -> str | None:
        """Get the API key for the specified or configured provider."""
        provider = provider or self.provider

        if provider == "openai":
            return self.openai_api_key
        elif provider == "deepseek":
            return self.deepseek_api_key

        return None

    def validate_provider_config(self, provider: str | None = None) -> None:
        """
        Validate that the provider has required configuration.

        Raises:
            ConfigurationError: If required configuration is missing
        """
        provider = provider or self.provider

        if provider not in ("openai", "deepseek"):
            raise ConfigurationError(f"Unknown LLM provider '{provider}'.")

        if not self.get_api_key(provider):
            env_var = f"{provider.upper()}_API_KEY"
            raise ConfigurationError(
                f"Missing API key for provider '{provider}'. "
                f"Set the {env_var} environment variable."
            )


# Config instances (lazy loaded)
_telegram_config: TelegramConfig | None = None
_transcription_config: TranscriptionConfig | None = None
_completion_config: CompletionConfig | None = None


def get_telegram_config() -> TelegramConfig:
    """Get the Telegram configuration instance."""
    global _telegram_config
    if _telegram_config is None:
        _telegram_config = TelegramConfig()
    return _telegram_config


def get_transcription_config() -> TranscriptionConfig:
    """Get the transcription configuration instance."""
    global _transcription_config
    if _transcription_config is None:
        _transcription_config = TranscriptionConfig()
    return _transcription_config


def get_completion_config() -> CompletionConfig:
    """Get the completion configuration instance."""
    global _completion_config
    if _completion_config is None:
        _completion_config = CompletionConfig()
    return _completion_config


def reset_all_configs() -> None:
    """Reset all configuration instances (useful for testing)."""
    global _telegram_config, _transcription_config, _completion_config
    _telegram_config = None
    _transcription_config = None
    _completion_config = None
