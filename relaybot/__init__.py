"""Telegram relay bot: transcribes voice, answers with an LLM."""

__version__ = "0.1.0"
