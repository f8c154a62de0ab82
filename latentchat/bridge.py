"""
Boundary operations for the UI shell.

Every handler here returns plain values; failures come back as display
strings, never as exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Union

from .errors import ChatError
from .gateway import ChatGateway
from .models import ChatMessage, Config
from .store import migrate_legacy
from .utils import logger

HistoryItem = Union[ChatMessage, Dict[str, Any]]


class ChatBridge:
    def __init__(self, gateway: ChatGateway) -> None:
        self.gateway = gateway

    def get_config(self) -> Dict[str, Any]:
        """Current config in its on-disk shape, keys unmasked."""
        return self.gateway.get_config().to_dict()

    def save_config(self, data: Union[Config, Dict[str, Any]]) -> Dict[str, Any]:
        cfg = data if isinstance(data, Config) else migrate_legacy(data)
        try:
            self.gateway.save_config(cfg)
        except ChatError as exc:
            logger.error("save-config failed: %s", exc)
            return {"success": False, "error": str(exc)}
        return {"success": True, "error": None}

    def check_api_key(self) -> bool:
        return self.gateway.has_credential()

    async def send_to_ai(self, message: str, history: Iterable[HistoryItem] = ()) -> Dict[str, Any]:
        try:
            reply = await self.gateway.send(message, history)
        except ChatError as exc:
            logger.error("send-to-ai failed: %s", exc)
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "reply": reply}

    async def send_to_gemini(self, message: str, history: Iterable[HistoryItem] = ()) -> Dict[str, Any]:
        """Old name kept for 1.0 callers; same result as send_to_ai."""
        return await self.send_to_ai(message, history)
