"""
Interactive assistant chat in the terminal.

Usage:
    python -m bridgehead.scripts.run_chat
"""

import asyncio
import sys

import structlog

from bridgehead.analysis import AIGateway, AssistantChat, BridgeheadError, UpstreamError
from bridgehead.config import get_settings
from bridgehead.scripts import configure_logging

logger = structlog.get_logger()

CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


async def chat_loop() -> None:
    chat = AssistantChat(AIGateway(get_settings()))
    print(chat.history[0].text)

    while True:
        try:
            message = await asyncio.to_thread(input, "> ")
        except EOFError:
            return
        if not message.strip():
            continue
        if message.strip().lower() in ("exit", "quit"):
            return

        try:
            async for chunk in chat.send(message):
                print(chunk, end="", flush=True)
            print()
        except UpstreamError:
            print(CHAT_ERROR_MESSAGE)


def main():
    """Script entry point."""
    configure_logging(get_settings())

    try:
        asyncio.run(chat_loop())
    except KeyboardInterrupt:
        sys.exit(130)
    except BridgeheadError as e:
        logger.error("Fatal error in chat", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
