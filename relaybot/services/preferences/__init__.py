"""Per-chat preference storage."""

from relaybot.services.preferences.store import PreferenceStore

__all__ = ["PreferenceStore"]
