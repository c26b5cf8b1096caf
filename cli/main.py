#!/usr/bin/env python3
"""
Health dialogue CLI

Small developer tool around the dialogue core.

Commands:

1) classify
   - Show the intent a message gets in a given state:
       python -m cli.main classify "I have a fever" --state main_menu --language en

2) normalize
   - Strip native-script characters from a transliterated reply:
       python -m cli.main normalize "Aapko (बुखार) bukhar hai" --language hi

3) chat
   - Interactive conversation against the full controller. Uses the OpenAI
     oracle when OPENAI_API_KEY is set, otherwise an offline echo oracle:
       python -m cli.main chat --user demo

The HTTP runtime is started separately, e.g.:

    uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import configure_logging, settings
from core.interpreter.intent_classifier import classify
from core.interpreter.models import DialogueState
from core.synthesis.script_normalizer import normalize_script


def cmd_classify(text: str, state: str, language: str, media: bool) -> None:
    intent = classify(text, DialogueState(state), language, media=media)
    print(intent.value)


def cmd_normalize(text: str, language: str) -> None:
    print(normalize_script(text, language))


async def _chat_loop(user_id: str, persist: bool) -> None:
    from core.api.openai_client import EchoOracle, OpenAIGenerationOracle
    from runtime.api.server import build_controller
    from runtime.models.session_models import Message
    from runtime.transport.formatter import render_numbered

    if settings.has_openai_api_key:
        oracle = OpenAIGenerationOracle()
    else:
        print("[CLI] OPENAI_API_KEY not set; using the offline echo oracle.")
        oracle = EchoOracle()

    controller = build_controller(oracle=oracle, persist=persist)
    print(f"[CLI] Chatting as {user_id!r}. Ctrl-D or 'quit' to exit.")

    while True:
        try:
            line = await asyncio.to_thread(input, "you> ")
        except EOFError:
            print()
            return
        if line.strip().lower() in ("quit", "exit"):
            return

        outcome = await controller.handle_turn(user_id, Message(content=line))
        print(f"[{outcome.intent.value} | {outcome.previous_state.value} -> {outcome.state.value}]")
        for reply in outcome.replies:
            text = render_numbered(reply) if reply.options else (reply.text or "")
            print(f"bot> {text}\n")


def cmd_chat(user_id: str, persist: bool) -> None:
    try:
        asyncio.run(_chat_loop(user_id, persist))
    except KeyboardInterrupt:
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Health dialogue CLI")
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Logging level (default: {settings.log_level})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # classify
    p_classify = subparsers.add_parser("classify", help="Classify a message in a given state")
    p_classify.add_argument("text", help="Inbound message text")
    p_classify.add_argument(
        "--state",
        default=DialogueState.MAIN_MENU.value,
        choices=[state.value for state in DialogueState],
        help="Current dialogue state (default: main_menu)",
    )
    p_classify.add_argument("--language", default="en", help="User language code")
    p_classify.add_argument(
        "--media",
        action="store_true",
        help="Treat the message as an image / audio attachment",
    )

    # normalize
    p_normalize = subparsers.add_parser(
        "normalize",
        help="Remove native-script characters from a transliterated reply",
    )
    p_normalize.add_argument("text", help="Reply text")
    p_normalize.add_argument("--language", required=True, help="Language code (hi, te, ta, or)")

    # chat
    p_chat = subparsers.add_parser("chat", help="Interactive conversation with the bot")
    p_chat.add_argument("--user", default="cli-user", help="User identity for the session")
    p_chat.add_argument(
        "--persist",
        action="store_true",
        help=f"Persist sessions under {settings.runtime_data_dir}",
    )

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    configure_logging(args.log_level)
    command: str = args.command

    if command == "classify":
        cmd_classify(text=args.text, state=args.state, language=args.language, media=args.media)
    elif command == "normalize":
        cmd_normalize(text=args.text, language=args.language)
    elif command == "chat":
        cmd_chat(user_id=args.user, persist=args.persist)
    else:
        parser.error(f"Unknown command: {command}")


if __name__ == "__main__":
    main()
