"""Interactive terminal front end for the assistant."""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from leetcode_assistant.ai.llm_base import LLMError
from leetcode_assistant.ai.llm_factory import get_llm_provider
from leetcode_assistant.ai.problem_ref import guess_difficulty
from leetcode_assistant.ai.prompts import QUICK_ACTION_PROMPTS
from leetcode_assistant.client.api_client import ChatApiClient
from leetcode_assistant.client.conversation import Conversation, ConversationStatus
from leetcode_assistant.config import settings
from leetcode_assistant.models.conversation import Speaker, Turn
from leetcode_assistant.services.chat_service import LocalChatBackend
from leetcode_assistant.services.response_normalizer import CodeBlock, split_segments

HELP_TEXT = """Commands:
  /pin <url>     set the current LeetCode problem
  /announce      tell the assistant about the pinned problem
  /explain       explain the algorithm step by step
  /complexity    ask for the optimal complexity
  /solution      ask for a commented solution
  /raw           show the raw text of the last answer
  /history       list the conversation so far
  /help          show this message
  /quit          leave
Anything else is sent as a message. Paste a problem URL to pin it."""


def render_turn(turn: Turn, out: TextIO) -> None:
    """Print a turn, framing code blocks with their language."""
    if turn.speaker is Speaker.USER:
        out.write(f"\nyou> {turn.text}\n")
        return

    out.write("\nbot>\n")
    if turn.error:
        out.write(f"[error] {turn.text}\n")
        if turn.error_detail:
            out.write(f"        ({turn.error_detail})\n")
        return
    for segment in split_segments(turn.text):
        if isinstance(segment, CodeBlock):
            out.write(f"--- {segment.language or 'code'} ---\n{segment.code}\n---\n")
        else:
            out.write(segment.text)
    out.write("\n")


def describe_pin(conversation: Conversation) -> str:
    reference = conversation.pinned_reference
    if reference is None:
        return "No problem pinned."
    # Title-based guess only; the catalog is never consulted.
    return (
        f"Pinned: {reference.display_title} <{reference.source_url}> "
        f"(difficulty guess: {guess_difficulty(reference.display_title)})"
    )


async def handle_line(line: str, conversation: Conversation, out: TextIO) -> bool:
    """Process one input line. Returns False when the user wants to quit."""
    line = line.strip()
    command, _, argument = line.partition(" ")

    if command in {"/quit", "/exit"}:
        return False
    if command == "/help":
        out.write(HELP_TEXT + "\n")
        return True
    if command == "/pin":
        if conversation.pin_reference(argument.strip()) is None:
            out.write("That does not look like a LeetCode problem URL.\n")
        out.write(describe_pin(conversation) + "\n")
        return True
    if command == "/raw":
        last = conversation.last_assistant_turn()
        out.write((last.raw_text or "(no raw text)") if last else "(no answer yet)")
        out.write("\n")
        return True
    if command == "/history":
        for turn in conversation.turns:
            render_turn(turn, out)
        return True

    if command == "/announce":
        reply = await conversation.announce_reference()
        if reply is None:
            out.write("Pin a problem first with /pin <url>.\n")
    elif command.startswith("/") and command[1:] in QUICK_ACTION_PROMPTS:
        reply = await conversation.quick_action(QUICK_ACTION_PROMPTS[command[1:]])
    elif command.startswith("/"):
        out.write(f"Unknown command {command}. Try /help.\n")
        return True
    else:
        reply = await conversation.submit(line)

    if reply is not None:
        render_turn(reply, out)
    return True


async def run_session(conversation: Conversation, stream: TextIO, out: TextIO) -> None:
    def on_status(status: ConversationStatus) -> None:
        if status is ConversationStatus.SENDING:
            out.write("(thinking...)\n")
            out.flush()

    conversation.subscribe(on_status)
    out.write("LeetCode Assistant. Type /help for commands.\n")
    loop = asyncio.get_running_loop()
    while True:
        out.write("> ")
        out.flush()
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            break
        if not await handle_line(line, conversation, out):
            break


async def _main(args: argparse.Namespace) -> None:
    if args.local:
        conversation = Conversation(LocalChatBackend(get_llm_provider(settings)))
        await run_session(conversation, sys.stdin, sys.stdout)
        return

    async with ChatApiClient(args.base_url) as client:
        await run_session(Conversation(client), sys.stdin, sys.stdout)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Chat with the LeetCode assistant.")
    parser.add_argument(
        "--base-url",
        default=settings.backend_base_url,
        help="Backend base URL (default: BACKEND_BASE_URL or %(default)s)",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        help="Run the pipeline in-process instead of calling the backend",
    )
    parser.add_argument("--verbose", action="store_true", help="Log to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )
    try:
        asyncio.run(_main(args))
    except LLMError as exc:
        parser.exit(1, f"error: {exc}\n")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
