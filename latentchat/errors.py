"""
Error taxonomy.

Everything raised by the core derives from ChatError. The boundary layer
(bridge.py) turns these into display strings; str() of each is what the
user sees.
"""

from __future__ import annotations


class ChatError(Exception):
    pass


class ConfigReadError(ChatError):
    """Config file missing or malformed. Logged by the store, never surfaced."""


class ConfigWriteError(ChatError):
    pass


class NotConfigured(ChatError):
    def __init__(self, provider_name: str) -> None:
        super().__init__(f"Set your API key for {provider_name} in Settings.")
        self.provider_name = provider_name


class UnknownProvider(ChatError):
    def __init__(self, provider_id: str) -> None:
        super().__init__(f"Unknown provider: {provider_id!r}")
        self.provider_id = provider_id


class ProviderError(ChatError):
    """Failure reported by (or while talking to) a remote provider."""

    def __init__(self, provider_name: str, message: str) -> None:
        super().__init__(f"{provider_name}: {message}")
        self.provider_name = provider_name
        self.message = message


class AuthError(ProviderError):
    pass


class NetworkError(ProviderError):
    pass


class ProviderRejected(ProviderError):
    pass
