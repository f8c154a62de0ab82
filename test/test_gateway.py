import json

import pytest

from latentchat.api_client import OpenAIAdapter, ProviderAdapter, ProviderClient
from latentchat.errors import ConfigWriteError, NotConfigured, UnknownProvider
from latentchat.gateway import ChatGateway
from latentchat.models import ChatMessage
from latentchat.store import ConfigStore

from test_api import patch_session


class StubAdapter(ProviderAdapter):
    def __init__(self, provider_id, reply="stub reply"):
        self.provider_id = provider_id
        self.reply = reply
        self.initialized = []
        self.conversations = []

    def initialize(self, api_key, model_id):
        self.initialized.append((api_key, model_id))
        return ProviderClient(self.provider_id, api_key, model_id)

    async def converse(self, client, history, message):
        self.conversations.append((client, list(history), message))
        return self.reply


def write_config(tmp_path, doc):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return ConfigStore(path)


@pytest.fixture
def stubs():
    return {"google": StubAdapter("google"), "openai": StubAdapter("openai")}


@pytest.mark.asyncio
async def test_send_without_key_is_not_configured(tmp_path, stubs):
    gateway = ChatGateway(ConfigStore(tmp_path / "config.json"), adapters=stubs)

    assert gateway.state.status == "uninitialized"
    assert gateway.has_credential() is False
    with pytest.raises(NotConfigured) as ei:
        await gateway.send("hi", [])
    assert "Google Gemini" in str(ei.value)
    assert stubs["google"].initialized == []
    assert stubs["google"].conversations == []


@pytest.mark.asyncio
async def test_set_credential_on_active_provider_rebuilds_client(tmp_path, stubs):
    store = write_config(tmp_path, {"activeProvider": "openai"})
    gateway = ChatGateway(store, adapters=stubs)

    gateway.set_credential("openai", "k")
    reply = await gateway.send("hi", [])

    assert reply == "stub reply"
    client, history, message = stubs["openai"].conversations[-1]
    assert client.api_key == "k"
    assert stubs["openai"].initialized == [("k", "gpt-4o-mini")]
    assert (history, message) == ([], "hi")
    assert store.load().providers["openai"].api_key == "k"


def test_credential_for_inactive_provider_does_not_rebuild(tmp_path, stubs):
    store = write_config(tmp_path, {"providers": {"google": {"apiKey": "g"}}})
    gateway = ChatGateway(store, adapters=stubs)
    assert stubs["google"].initialized == [("g", "gemini-2.0-flash")]

    gateway.set_credential("openai", "sk")

    assert stubs["openai"].initialized == []
    assert gateway.state.client.provider_id == "google"


def test_switching_provider(tmp_path, stubs):
    store = write_config(tmp_path, {"providers": {"google": {"apiKey": "g"}}})
    gateway = ChatGateway(store, adapters=stubs)

    gateway.set_active_provider("openai")
    assert gateway.state.status == "uninitialized"

    gateway.set_credential("openai", "  sk-2  ")
    assert gateway.state.status == "ready"
    assert gateway.state.client == ProviderClient("openai", "sk-2", "gpt-4o-mini")

    with pytest.raises(UnknownProvider):
        gateway.set_active_provider("anthropic")
    assert gateway.get_config().active_provider == "openai"


def test_unlisted_model_is_passed_through(tmp_path, stubs):
    store = write_config(tmp_path, {"providers": {"google": {"apiKey": "g"}}})
    gateway = ChatGateway(store, adapters=stubs)

    gateway.set_model("google", "gemini-9-ultra")

    assert gateway.state.client.model == "gemini-9-ultra"
    assert store.load().providers["google"].selected_model == "gemini-9-ultra"


def test_failed_save_keeps_previous_state(tmp_path, stubs, monkeypatch):
    store = write_config(tmp_path, {"providers": {"google": {"apiKey": "g"}}})
    gateway = ChatGateway(store, adapters=stubs)

    def broken_save(cfg):
        raise ConfigWriteError("Could not save settings: disk full")

    monkeypatch.setattr(store, "save", broken_save)
    with pytest.raises(ConfigWriteError):
        gateway.set_credential("google", "other")

    assert gateway.get_config().providers["google"].api_key == "g"
    assert gateway.state.client.api_key == "g"


def test_get_config_returns_a_copy(tmp_path, stubs):
    gateway = ChatGateway(ConfigStore(tmp_path / "config.json"), adapters=stubs)
    cfg = gateway.get_config()
    cfg.providers["google"].api_key = "tampered"
    assert gateway.has_credential() is False


@pytest.mark.asyncio
async def test_history_dicts_are_normalized(tmp_path, stubs):
    store = write_config(tmp_path, {"providers": {"google": {"apiKey": "g"}}})
    gateway = ChatGateway(store, adapters=stubs)

    await gateway.send("next", [
        {"role": "user", "parts": [{"text": "q"}]},
        {"role": "model", "text": "a"},
    ])

    _, history, _ = stubs["google"].conversations[-1]
    assert history == [ChatMessage("user", "q"), ChatMessage("model", "a")]


@pytest.mark.asyncio
async def test_openai_config_sends_one_user_message(tmp_path, monkeypatch):
    store = write_config(tmp_path, {
        "activeProvider": "openai",
        "providers": {"openai": {"apiKey": "sk-1", "selectedModel": "gpt-4o"}},
    })
    calls = patch_session(monkeypatch, body='{"choices": [{"message": {"content": "  verbatim reply\\n"}}]}')
    gateway = ChatGateway(store, adapters={"openai": OpenAIAdapter()})

    reply = await gateway.send("hi", [])

    assert reply == "  verbatim reply\n"
    assert calls[1]["json"] == {"model": "gpt-4o", "messages": [{"role": "user", "content": "hi"}]}
