import pytest

from latentchat.errors import UnknownProvider
from latentchat.models import ChatMessage, ChatSession
from latentchat.registry import default_model, describe, is_known_model, list_providers


def test_message_from_gemini_parts():
    msg = ChatMessage.from_dict({"role": "model", "parts": [{"text": "a"}, {"text": "b"}]})
    assert msg == ChatMessage("model", "ab")


def test_assistant_role_is_normalized():
    assert ChatMessage.from_dict({"role": "assistant", "text": "x"}).role == "model"


def test_session_keeps_seed_out_of_outgoing():
    session = ChatSession()
    assert session.greeting == "Welcome to Latent Chat! How can I assist you?"
    assert session.outgoing() == []

    session.record("hi", "hello")
    assert session.outgoing() == [ChatMessage("user", "hi"), ChatMessage("model", "hello")]
    assert len(session.history) == 4


def test_registry_lookup():
    assert [p.id for p in list_providers()] == ["google", "openai"]
    meta = describe("openai")
    assert meta.name == "OpenAI"
    assert "gpt-4o" in meta.model_ids
    assert default_model("google") == "gemini-2.0-flash"


def test_registry_unknown_provider():
    with pytest.raises(UnknownProvider):
        describe("anthropic")


def test_unknown_model_is_soft():
    assert is_known_model("openai", "gpt-4o") is True
    assert is_known_model("openai", "gpt-5") is False
