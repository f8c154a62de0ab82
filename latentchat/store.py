"""
Reading and writing config.json.

Two on-disk shapes are accepted:

    current:  {"activeProvider": "google",
               "providers": {"google": {"apiKey": "...", "selectedModel": "..."},
                             "openai": {...}}}
    legacy:   {"GOOGLE_API_KEY": "...", "SELECTED_MODEL": "..."}

Both are folded into a Config by migrate_legacy(). Saves always write the
current shape.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from .config import CONFIG_FILENAME, DEFAULT_PROVIDER, GOOGLE_API_KEY_ENV
from .errors import ConfigReadError, ConfigWriteError
from .models import Config, ProviderConfig
from .registry import PROVIDERS, default_model
from .utils import app_data_dir, get_legacy_api_key, logger

LEGACY_KEY_FIELD = "GOOGLE_API_KEY"
LEGACY_MODEL_FIELD = "SELECTED_MODEL"


def default_config(google_api_key: str = "") -> Config:
    """One entry per known provider, empty keys, default models."""
    providers = {pid: ProviderConfig(api_key="", selected_model=default_model(pid)) for pid in PROVIDERS}
    providers[DEFAULT_PROVIDER].api_key = google_api_key
    return Config(active_provider=DEFAULT_PROVIDER, providers=providers)


def _merge_provider(target: ProviderConfig, raw: Any) -> None:
    if not isinstance(raw, dict):
        return
    if isinstance(raw.get("apiKey"), str):
        target.api_key = raw["apiKey"]
    if isinstance(raw.get("selectedModel"), str) and raw["selectedModel"]:
        target.selected_model = raw["selectedModel"]


def migrate_legacy(raw: Any) -> Config:
    """
    Build a well-formed Config from any parsed JSON document.

    Legacy flat keys are applied first and structured providers second, so
    a structured value wins when a document carries both.
    """
    cfg = default_config()
    if not isinstance(raw, dict):
        return cfg

    google = cfg.providers["google"]
    if isinstance(raw.get(LEGACY_KEY_FIELD), str):
        google.api_key = raw[LEGACY_KEY_FIELD]
    if isinstance(raw.get(LEGACY_MODEL_FIELD), str) and raw[LEGACY_MODEL_FIELD]:
        google.selected_model = raw[LEGACY_MODEL_FIELD]

    providers = raw.get("providers")
    if isinstance(providers, dict):
        for pid, value in providers.items():
            if pid not in cfg.providers:
                logger.warning("Dropping unknown provider %r from config", pid)
                continue
            _merge_provider(cfg.providers[pid], value)

    active = raw.get("activeProvider", DEFAULT_PROVIDER)
    if active in cfg.providers:
        cfg.active_provider = active
    else:
        logger.warning("Unknown activeProvider %r, using %s", active, DEFAULT_PROVIDER)
    return cfg


def seeded_default_config() -> Config:
    """Defaults for a first run: env var first, then the old keyring entry."""
    key = os.getenv(GOOGLE_API_KEY_ENV) or get_legacy_api_key() or ""
    return default_config(google_api_key=key.strip())


class ConfigStore:
    """Single-writer store for one config.json."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path else app_data_dir() / CONFIG_FILENAME

    def _read_raw(self) -> Any:
        if not self.path.is_file():
            raise ConfigReadError(f"No config at {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            raise ConfigReadError(f"Unreadable config at {self.path}: {exc}") from exc

    def load(self) -> Config:
        """Never raises; falls back to seeded defaults and writes nothing."""
        try:
            raw = self._read_raw()
        except ConfigReadError as exc:
            if self.path.exists():
                logger.error("Config load failed: %s", exc, exc_info=True)
            else:
                logger.info("%s", exc)
            return seeded_default_config()
        return migrate_legacy(raw)

    def save(self, cfg: Config) -> None:
        """Replace the file atomically (temp file + rename in the same dir)."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".config-", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(cfg.to_dict(), fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Config save failed: %s", exc, exc_info=True)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigWriteError(f"Could not save settings: {exc}") from exc
        logger.info("Config saved (active=%s).", cfg.active_provider)
