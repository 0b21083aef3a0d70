"""
Terminal chat with the travel assistant.

Reads prompts from stdin and prints the reply as it streams in.
"""

from __future__ import annotations

import asyncio
import sys

from .chat_session import ChatSession
from .client import AssistantClient
from .config import Configuration
from .logging_utils import configure_logging, get_logger
from .payments import pay_now_url

logger = get_logger(__name__)

PAY_COMMAND = "/pay"


def pay_command(text: str, config: Configuration) -> str:
    """Answer `/pay <amount>` with the UPI link for that amount."""
    amount = text[len(PAY_COMMAND):].strip()
    try:
        return pay_now_url(amount, config)
    except ArithmeticError:
        return f"Usage: {PAY_COMMAND} <amount>"


def print_delta(chunk: str) -> None:
    sys.stdout.write(chunk)
    sys.stdout.flush()


async def main() -> None:
    """Run the interactive chat loop until EOF or 'exit'."""
    config = Configuration()
    configure_logging(config.get_logging_config())

    async with AssistantClient.from_configuration(config) as client:
        session = ChatSession(
            client,
            greeting=config.get_chat_config().get("greeting"),
            on_update=print_delta,
        )
        if session.last_reply:
            print(session.last_reply)

        while True:
            try:
                text = await asyncio.to_thread(input, "\n> ")
            except EOFError:
                break
            if text.strip().lower() in {"exit", "quit"}:
                break
            if text.startswith(PAY_COMMAND):
                print(pay_command(text, config))
                continue

            await session.send(text)
            if session.last_error:
                print(f"\nError: {session.last_error}", file=sys.stderr)
            else:
                print()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Chat interrupted")


if __name__ == "__main__":
    run()
