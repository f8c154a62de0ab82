"""
Provider adapters: turn the internal chat history into one provider's
request, make a single HTTP call with aiohttp, and pull the reply text out.

No retries here. A call either returns text or raises a ProviderError
subclass (AuthError, NetworkError, ProviderRejected).
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

import aiohttp

from .config import GEMINI_ENDPOINT, HTTP_TIMEOUT_SECS, OPENAI_ENDPOINT, USER_AGENT
from .errors import AuthError, NetworkError, ProviderRejected
from .models import MODEL, ChatMessage
from .registry import describe
from .utils import logger


@dataclass(frozen=True)
class ProviderClient:
    """One credential bound to one model. Building it is offline."""

    provider_id: str
    api_key: str
    model: str


class ProviderAdapter:
    provider_id = ""
    # internal "model" role -> provider's assistant role
    assistant_role = MODEL

    @property
    def name(self) -> str:
        return describe(self.provider_id).name

    def initialize(self, api_key: str, model_id: str) -> ProviderClient:
        if not api_key:
            raise AuthError(self.name, "API key is missing.")
        return ProviderClient(self.provider_id, api_key, model_id)

    def build_request(
        self, client: ProviderClient, history: Sequence[ChatMessage], message: str
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        raise NotImplementedError

    def parse_response(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    def is_auth_failure(self, status: int, body: str) -> bool:
        return status in (401, 403)

    def _role(self, msg: ChatMessage) -> str:
        return self.assistant_role if msg.role == MODEL else "user"

    async def converse(
        self, client: ProviderClient, history: Sequence[ChatMessage], message: str
    ) -> str:
        url, headers, payload = self.build_request(client, history, message)
        logger.info("[%s] POST model=%s turns=%d", self.provider_id, client.model, len(history) + 1)
        data = await self._post(url, headers, payload)
        try:
            return self.parse_response(data)
        except (AttributeError, TypeError, IndexError, KeyError) as exc:
            logger.error("[%s] Unexpected response shape: %s", self.provider_id, exc)
            raise ProviderRejected(self.name, "Malformed response.") from exc

    async def _post(self, url: str, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "User-Agent": USER_AGENT, **headers}
        timeout = aiohttp.ClientTimeout(total=HTTP_TIMEOUT_SECS)
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
                async with session.post(url, json=payload) as resp:
                    status = resp.status
                    text_body = await resp.text()
        except aiohttp.ClientError as exc:
            raise NetworkError(self.name, f"Network error: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise NetworkError(self.name, "Request timed out.") from exc
        except UnicodeDecodeError as exc:
            raise ProviderRejected(self.name, "Response was not valid text.") from exc

        logger.info("[%s] HTTP %s body[0:200]=%r", self.provider_id, status, text_body[:200])

        if self.is_auth_failure(status, text_body):
            raise AuthError(self.name, f"Authentication failed ({status}): {_error_message(text_body)}")
        if status >= 300:
            raise ProviderRejected(self.name, f"HTTP {status}: {_error_message(text_body)}")
        try:
            data = json.loads(text_body)
        except json.JSONDecodeError:
            raise ProviderRejected(self.name, "Response was not JSON.") from None
        if not isinstance(data, dict):
            raise ProviderRejected(self.name, "Malformed response.")
        return data


def _error_message(text_body: str) -> str:
    try:
        data = json.loads(text_body)
        msg = data["error"]["message"]
        if msg:
            return str(msg)
    except (ValueError, KeyError, TypeError):
        pass
    return text_body[:200] or "no details"


class GoogleAdapter(ProviderAdapter):
    """Gemini generateContent (v1beta REST)."""

    provider_id = "google"
    assistant_role = "model"

    def is_auth_failure(self, status: int, body: str) -> bool:
        # Gemini answers a bad key with 400 + reason API_KEY_INVALID
        return status in (401, 403) or (status == 400 and "API_KEY_INVALID" in body)

    def build_request(self, client, history, message):
        contents: List[Dict[str, Any]] = [
            {"role": self._role(m), "parts": [{"text": m.text}]} for m in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        url = GEMINI_ENDPOINT.format(model=client.model)
        return url, {"x-goog-api-key": client.api_key}, {"contents": contents}

    def parse_response(self, data):
        block = (data.get("promptFeedback") or {}).get("blockReason")
        if block:
            raise ProviderRejected(self.name, f"Prompt blocked ({block}).")
        candidates = data.get("candidates") or []
        if not candidates:
            raise ProviderRejected(self.name, "Malformed response: no candidates.")
        first = candidates[0]
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            reason = first.get("finishReason")
            if reason == "SAFETY":
                raise ProviderRejected(self.name, "Reply blocked by safety filters.")
            raise ProviderRejected(self.name, "Empty response from model.")
        return text


class OpenAIAdapter(ProviderAdapter):
    """OpenAI Chat Completions."""

    provider_id = "openai"
    assistant_role = "assistant"

    def build_request(self, client, history, message):
        messages: List[Dict[str, str]] = [
            {"role": self._role(m), "content": m.text} for m in history
        ]
        messages.append({"role": "user", "content": message})
        headers = {"Authorization": f"Bearer {client.api_key}"}
        return OPENAI_ENDPOINT, headers, {"model": client.model, "messages": messages}

    def parse_response(self, data):
        if "error" in data:
            err = data["error"]
            msg = err.get("message", "Unknown API error") if isinstance(err, dict) else err
            raise ProviderRejected(self.name, f"API error: {msg}")
        choices = data.get("choices") or []
        if not choices:
            raise ProviderRejected(self.name, "Malformed response: no choices.")
        content = (choices[0].get("message") or {}).get("content")
        if not content:
            raise ProviderRejected(self.name, "Empty response from assistant.")
        return str(content)


def default_adapters() -> Dict[str, ProviderAdapter]:
    return {a.provider_id: a for a in (GoogleAdapter(), OpenAIAdapter())}
