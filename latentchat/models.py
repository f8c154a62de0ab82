"""
Data model: persisted Config, chat messages, and static provider metadata.

On disk the config uses the camelCase keys the Electron build wrote
(activeProvider, apiKey, selectedModel); to_dict/from_dict translate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .config import SEED_MODEL_TEXT, SEED_USER_TEXT

USER = "user"
MODEL = "model"


@dataclass
class ProviderConfig:
    api_key: str
    selected_model: str

    def to_dict(self) -> Dict[str, str]:
        return {"apiKey": self.api_key, "selectedModel": self.selected_model}


@dataclass
class Config:
    """Build fresh ones with store.default_config(); it fills every provider."""

    active_provider: str
    providers: Dict[str, ProviderConfig]

    def active(self) -> ProviderConfig:
        return self.providers[self.active_provider]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeProvider": self.active_provider,
            "providers": {pid: pc.to_dict() for pid, pc in self.providers.items()},
        }


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    name: str


@dataclass(frozen=True)
class ProviderMetadata:
    id: str
    name: str
    key_label: str
    help_text: str
    models: Tuple[ModelDescriptor, ...]

    @property
    def model_ids(self) -> List[str]:
        return [m.id for m in self.models]


@dataclass
class ChatMessage:
    role: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        """
        Accepts {role, text} as well as the Gemini-style
        {role, parts: [{text}, ...]} the old renderer kept in its history.
        """
        role = data.get("role", USER)
        if role == "assistant":
            role = MODEL
        if "text" in data:
            text = str(data["text"])
        else:
            text = "".join(str(p.get("text", "")) for p in data.get("parts") or [])
        return cls(role=role, text=text)


def coerce_history(history) -> List[ChatMessage]:
    return [m if isinstance(m, ChatMessage) else ChatMessage.from_dict(m) for m in history or []]


class ChatSession:
    """
    In-memory transcript for one app run.

    Starts with a scripted user/model pair that the UI shows as a greeting.
    Only turns after that pair are handed to providers.
    """

    def __init__(self) -> None:
        self.history: List[ChatMessage] = [
            ChatMessage(USER, SEED_USER_TEXT),
            ChatMessage(MODEL, SEED_MODEL_TEXT),
        ]
        self._seed_len = len(self.history)

    @property
    def greeting(self) -> str:
        return self.history[self._seed_len - 1].text

    def outgoing(self) -> List[ChatMessage]:
        return list(self.history[self._seed_len:])

    def record(self, user_text: str, reply: str) -> None:
        self.history.append(ChatMessage(USER, user_text))
        self.history.append(ChatMessage(MODEL, reply))
