"""Built-in provider definitions (static, drives the settings dialog)."""

from __future__ import annotations

from typing import Dict, List

from .errors import UnknownProvider
from .models import ModelDescriptor, ProviderMetadata
from .utils import logger

GOOGLE = ProviderMetadata(
    id="google",
    name="Google Gemini",
    key_label="Gemini API Key",
    help_text="Create a key at https://aistudio.google.com/app/apikey",
    models=(
        ModelDescriptor("gemini-2.0-flash", "Gemini 2.0 Flash"),
        ModelDescriptor("gemini-1.5-flash", "Gemini 1.5 Flash"),
        ModelDescriptor("gemini-1.5-pro", "Gemini 1.5 Pro"),
    ),
)

OPENAI = ProviderMetadata(
    id="openai",
    name="OpenAI",
    key_label="OpenAI API Key",
    help_text="Create a key at https://platform.openai.com/api-keys",
    models=(
        ModelDescriptor("gpt-4o-mini", "GPT-4o mini"),
        ModelDescriptor("gpt-4o", "GPT-4o"),
        ModelDescriptor("gpt-4-turbo", "GPT-4 Turbo"),
        ModelDescriptor("gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ),
)

# provider_id -> metadata, in display order
PROVIDERS: Dict[str, ProviderMetadata] = {
    GOOGLE.id: GOOGLE,
    OPENAI.id: OPENAI,
}


def describe(provider_id: str) -> ProviderMetadata:
    try:
        return PROVIDERS[provider_id]
    except KeyError:
        raise UnknownProvider(provider_id) from None


def list_providers() -> List[ProviderMetadata]:
    return list(PROVIDERS.values())


def default_model(provider_id: str) -> str:
    """First listed model is the default selection."""
    return describe(provider_id).models[0].id


def is_known_model(provider_id: str, model_id: str) -> bool:
    """
    Soft check against the built-in list. Provider catalogs move faster than
    this list, so callers should warn rather than refuse on False.
    """
    known = model_id in describe(provider_id).model_ids
    if not known:
        logger.warning("Model %r not in built-in list for %s", model_id, provider_id)
    return known
