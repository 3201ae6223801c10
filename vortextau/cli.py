"""
VortexTau command line.

    vortextau serve            run the HTTP service
    vortextau chat             interactive terminal chat against a running service
    vortextau models           list installed models
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .client import (
    Chat,
    ChatAPI,
    ChatStore,
    JsonFileStorage,
    MemoryStorage,
    TurnOrchestrator,
    build_classifier,
    pick_default_model,
)
from .config import runtime_config
from .errors import VortexError
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  /new            start a new chat
  /list           list chats
  /open <id>      switch to a chat
  /rename <text>  rename the current chat
  /delete         delete the current chat
  /share          share the current chat
  /load <id>      load a shared chat
  /quit           exit"""


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "vortextau.main:app",
        host=args.host or runtime_config.host,
        port=args.port or runtime_config.port,
        reload=args.reload,
        log_level=runtime_config.log_level.lower(),
    )
    return 0


async def _list_models(api: ChatAPI) -> int:
    models = await api.list_models()
    if not models:
        print(f"No models under {runtime_config.model_namespace!r}")
        return 1
    for model in models:
        details = model.get("details") or {}
        print(f"{model.get('name')}  ({details.get('parameter_size', '?')}, {details.get('quantization_level', '?')})")
    return 0


def cmd_models(args: argparse.Namespace) -> int:
    api = ChatAPI(args.api_url or runtime_config.api_base_url)
    try:
        return asyncio.run(_list_models(api))
    except VortexError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def _print_fragment(fragment: str) -> None:
    print(fragment, end="", flush=True)


async def _handle_command(line: str, store: ChatStore, api: ChatAPI) -> bool:
    """Run a slash command. Returns False when the session should end."""
    name, _, arg = line[1:].partition(" ")
    arg = arg.strip()

    if name in ("quit", "exit"):
        return False
    if name == "new":
        chat = store.create()
        print(f"[chat {chat.id}]")
    elif name == "list":
        for chat in store.chats:
            marker = "*" if chat.id == store.active_id else " "
            print(f"{marker} {chat.id}  {chat.title}  ({len(chat.messages)} messages)")
    elif name == "open":
        chat = store.select(arg)
        for message in chat.messages:
            print(f"{message.role}> {message.content}")
    elif name == "rename" and store.active_id:
        store.rename(store.active_id, arg)
    elif name == "delete" and store.active_id:
        store.delete(store.active_id)
        print("[deleted]")
    elif name == "share" and store.active is not None:
        share_id = await api.share_chat(store.active.to_dict())
        print(f"[shared as {share_id}]")
    elif name == "load":
        chat = store.add_shared(Chat.from_dict(await api.load_shared_chat(arg)))
        print(f"[chat {chat.id}: {chat.title}]")
    else:
        print(HELP_TEXT)
    return True


async def _chat_session(args: argparse.Namespace) -> int:
    api = ChatAPI(args.api_url or runtime_config.api_base_url, timeout=runtime_config.llm_timeout)
    store = ChatStore(
        durable=JsonFileStorage(Path(runtime_config.client_storage_path).expanduser()),
        session=MemoryStorage(),
        key=runtime_config.client_storage_key,
    )
    store.load_all()
    for warning in store.warnings:
        print(f"[warning] {warning}")

    model = args.model
    if not model:
        model = pick_default_model(await api.list_models(), runtime_config.default_model)
    if not model:
        print("No models available", file=sys.stderr)
        return 1

    strategy = args.retrieval or runtime_config.retrieval_strategy
    orchestrator = TurnOrchestrator(
        api,
        store,
        model=model,
        classifier=build_classifier(strategy, api, model=model, ttl_s=runtime_config.classifier_cache_ttl_s),
        system_prompt=args.system_prompt,
        max_input_length=runtime_config.max_input_length,
        on_fragment=_print_fragment,
    )
    print(f"VortexTau chat ({model}, retrieval: {strategy}). /help for commands.")

    while True:
        try:
            line = await asyncio.to_thread(input, "you> ")
        except EOFError:
            break
        if line.startswith("/"):
            try:
                if not await _handle_command(line, store, api):
                    break
            except VortexError as e:
                print(f"[error] {e.message}")
            continue

        try:
            print("assistant> ", end="", flush=True)
            await orchestrator.handle_turn(line)
            print()
        except VortexError as e:
            print(f"\n[error] {e.message}")
            continue
        if orchestrator.error:
            print(f"[error] {orchestrator.error}")
    return 0


def cmd_chat(args: argparse.Namespace) -> int:
    try:
        return asyncio.run(_chat_session(args))
    except KeyboardInterrupt:
        print()
        return 0
    except VortexError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vortextau", description="Chat with locally hosted models")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_serve = subparsers.add_parser("serve", help="Run the HTTP service")
    p_serve.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    p_serve.add_argument("--port", type=int, help="Port (default: PORT or 3000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    p_chat = subparsers.add_parser("chat", help="Interactive terminal chat")
    p_chat.add_argument("--api-url", help="Service URL (default: VORTEXTAU_API_URL)")
    p_chat.add_argument("--model", help="Model id (default: preferred model if installed, else the first)")
    p_chat.add_argument("--system-prompt", help="Override the service's default system prompt")
    p_chat.add_argument(
        "--retrieval",
        choices=["classifier", "keyword", "off"],
        help="Web search strategy (default: RETRIEVAL_STRATEGY)",
    )
    p_chat.set_defaults(func=cmd_chat)

    p_models = subparsers.add_parser("models", help="List installed models")
    p_models.add_argument("--api-url", help="Service URL (default: VORTEXTAU_API_URL)")
    p_models.set_defaults(func=cmd_models)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != "serve":
        setup_logging(logging.WARNING)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
