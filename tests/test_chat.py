"""
Tests for the streaming assistant chat.
"""

from types import SimpleNamespace

import pytest

from bridgehead.analysis.chat import AssistantChat, ChatMessage
from bridgehead.analysis.errors import UpstreamError
from bridgehead.analysis.prompts import ASSISTANT_GREETING, ASSISTANT_SYSTEM_INSTRUCTION


async def _stream(*texts):
    for text in texts:
        yield SimpleNamespace(text=text)


@pytest.fixture
def chat(gateway):
    return AssistantChat(gateway)


class TestAssistantChat:
    def test_starts_with_greeting(self, chat):
        assert chat.history == [ChatMessage(role="model", text=ASSISTANT_GREETING)]

    def test_uses_chat_model_and_system_instruction(self, chat, settings):
        assert chat.options.model == settings.gemini_chat_model
        assert chat.options.system_instruction == ASSISTANT_SYSTEM_INSTRUCTION

    @pytest.mark.asyncio
    async def test_streams_reply_and_records_turns(self, chat, genai_client):
        genai_client.aio.models.generate_content_stream.return_value = _stream("1. Open ", "the map")

        chunks = [c async for c in chat.send("  How do I post a demand? ")]

        assert chunks == ["1. Open ", "the map"]
        assert chat.history[1:] == [
            ChatMessage(role="user", text="How do I post a demand?"),
            ChatMessage(role="model", text="1. Open the map"),
        ]

        contents = genai_client.aio.models.generate_content_stream.call_args.kwargs["contents"]
        assert [c.role for c in contents] == ["model", "user"]
        assert contents[1].parts[0].text == "How do I post a demand?"

    @pytest.mark.asyncio
    async def test_sends_full_history(self, chat, genai_client):
        genai_client.aio.models.generate_content_stream.side_effect = [
            _stream("First answer"),
            _stream("Second answer"),
        ]

        [c async for c in chat.send("first")]
        [c async for c in chat.send("second")]

        contents = genai_client.aio.models.generate_content_stream.call_args.kwargs["contents"]
        assert [c.role for c in contents] == ["model", "user", "model", "user"]

    @pytest.mark.asyncio
    async def test_failure_keeps_user_turn_only(self, chat, genai_client):
        genai_client.aio.models.generate_content_stream.side_effect = ConnectionError("down")

        with pytest.raises(UpstreamError):
            [c async for c in chat.send("hello")]

        assert [m.role for m in chat.history] == ["model", "user"]

    @pytest.mark.asyncio
    async def test_blank_message(self, chat, genai_client):
        with pytest.raises(ValueError):
            [c async for c in chat.send("   ")]
        genai_client.aio.models.generate_content_stream.assert_not_awaited()
        assert len(chat.history) == 1

    @pytest.mark.asyncio
    async def test_reset(self, chat, genai_client):
        genai_client.aio.models.generate_content_stream.return_value = _stream("hi")
        [c async for c in chat.send("hello")]

        chat.reset()

        assert chat.history == [ChatMessage(role="model", text=ASSISTANT_GREETING)]

    def test_history_is_a_copy(self, chat):
        chat.history.append(ChatMessage(role="user", text="sneaky"))
        assert len(chat.history) == 1
