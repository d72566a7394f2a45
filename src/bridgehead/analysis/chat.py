"""
Bridgehead assistant chat.

Keeps the conversation locally and sends the full history on every
turn, streaming the model answer back chunk by chunk.
"""

from dataclasses import dataclass
from typing import AsyncIterator

import structlog
from google.genai import types

from bridgehead.analysis.gateway import AIGateway, GenerationOptions
from bridgehead.analysis.prompts import ASSISTANT_GREETING, ASSISTANT_SYSTEM_INSTRUCTION

logger = structlog.get_logger()


@dataclass
class ChatMessage:
    role: str  # "user" or "model"
    text: str


class AssistantChat:
    """Streaming assistant that answers questions about the app."""

    def __init__(self, gateway: AIGateway):
        self.gateway = gateway
        self.options = GenerationOptions.for_text(
            gateway.settings.gemini_chat_model,
            system_instruction=ASSISTANT_SYSTEM_INSTRUCTION,
        )
        self._history: list[ChatMessage] = []
        self.reset()

    @property
    def history(self) -> list[ChatMessage]:
        return list(self._history)

    def reset(self) -> None:
        self._history = [ChatMessage(role="model", text=ASSISTANT_GREETING)]

    def _contents(self) -> list[types.Content]:
        return [
            types.Content(role=m.role, parts=[types.Part(text=m.text)])
            for m in self._history
        ]

    async def send(self, message: str) -> AsyncIterator[str]:
        """
        Send a user message and stream the reply.

        The model turn is recorded only once the stream completes; on
        UpstreamError the user turn stays and the error propagates.
        """
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        self._history.append(ChatMessage(role="user", text=message.strip()))

        chunks: list[str] = []
        async for chunk in self.gateway.stream_content(self._contents(), self.options):
            chunks.append(chunk)
            yield chunk

        reply = "".join(chunks)
        self._history.append(ChatMessage(role="model", text=reply))
        logger.debug("Assistant replied", chars=len(reply), turns=len(self._history))
