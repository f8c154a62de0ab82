"""
ChatGateway: the one object the UI shell talks to.

Owns the in-memory Config and the live provider client. The client is
rebuilt synchronously whenever the active provider's settings change, so
the next send() always runs against what was just saved.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .api_client import ProviderAdapter, ProviderClient, default_adapters
from .errors import NotConfigured, UnknownProvider
from .models import ChatMessage, Config, coerce_history
from .registry import describe, is_known_model
from .store import ConfigStore, migrate_legacy
from .utils import logger


@dataclass
class GatewayState:
    config: Config
    adapter: Optional[ProviderAdapter] = None
    client: Optional[ProviderClient] = None

    @property
    def ready(self) -> bool:
        return self.client is not None

    @property
    def status(self) -> str:
        return "ready" if self.ready else "uninitialized"


class ChatGateway:
    def __init__(
        self,
        store: ConfigStore,
        adapters: Optional[Dict[str, ProviderAdapter]] = None,
    ) -> None:
        self.store = store
        self.adapters = adapters if adapters is not None else default_adapters()
        self.state = GatewayState(config=store.load())
        self._rebuild()

    # ---- queries ----
    def get_config(self) -> Config:
        return copy.deepcopy(self.state.config)

    def has_credential(self) -> bool:
        return bool(self.state.config.active().api_key)

    # ---- mutations (save first, then swap in memory) ----
    def save_config(self, cfg: Config) -> None:
        describe(cfg.active_provider)
        # round-trip through the migration to backfill missing providers
        self._commit(migrate_legacy(cfg.to_dict()), rebuild=True)

    def set_active_provider(self, provider_id: str) -> None:
        describe(provider_id)
        cfg = self.get_config()
        cfg.active_provider = provider_id
        self._commit(cfg, rebuild=True)

    def set_credential(self, provider_id: str, api_key: str) -> None:
        describe(provider_id)
        cfg = self.get_config()
        cfg.providers[provider_id].api_key = (api_key or "").strip()
        self._commit(cfg, rebuild=provider_id == cfg.active_provider)

    def set_model(self, provider_id: str, model_id: str) -> None:
        describe(provider_id)
        is_known_model(provider_id, model_id)
        cfg = self.get_config()
        cfg.providers[provider_id].selected_model = model_id
        self._commit(cfg, rebuild=provider_id == cfg.active_provider)

    def _commit(self, cfg: Config, rebuild: bool) -> None:
        self.store.save(cfg)
        self.state.config = cfg
        if rebuild:
            self._rebuild()

    def _rebuild(self) -> None:
        cfg = self.state.config
        settings = cfg.active()
        if not settings.api_key:
            self.state.adapter = None
            self.state.client = None
            logger.info("No API key for %s; gateway uninitialized.", cfg.active_provider)
            return
        adapter = self.adapters.get(cfg.active_provider)
        if adapter is None:
            raise UnknownProvider(cfg.active_provider)
        is_known_model(cfg.active_provider, settings.selected_model)
        self.state.client = adapter.initialize(settings.api_key, settings.selected_model)
        self.state.adapter = adapter
        logger.info("Client ready: %s / %s", cfg.active_provider, settings.selected_model)

    # ---- chat ----
    async def send(self, message: str, history: Iterable[ChatMessage] = ()) -> str:
        """
        One round-trip through the active provider. Raises NotConfigured
        without touching the network when no key is set.
        """
        adapter, client = self.state.adapter, self.state.client
        if client is None or adapter is None:
            raise NotConfigured(describe(self.state.config.active_provider).name)
        logger.info("Send -> %s len=%d", client.provider_id, len(message))
        return await adapter.converse(client, coerce_history(history), message)
