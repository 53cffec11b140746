"""CLI parser construction for the ``voxchat`` command.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` and ``cli_shell``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import DEFAULT_MODEL_ID, DEFAULT_STREAMING


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    ``None`` (flag given without a value) maps to ``True``.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_stream_flags(parser: argparse.ArgumentParser, default: bool | None = DEFAULT_STREAMING) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream false``);
    ``--no-stream`` is the explicit negation.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=default)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def _add_model_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--model", default=DEFAULT_MODEL_ID, help="catalog model id")
    parser.add_argument(
        "--provider",
        default=None,
        help="provider kind for a model missing from the catalog (openai, anthropic, local, other)",
    )
    parser.add_argument("--local", action="store_true", help="treat an uncatalogued model as local")
    parser.add_argument("--base-url", default=None, help="override the backend base URL")
    parser.add_argument("--system", default=None, help="system prompt sent before the conversation")
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--max-tokens", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``models``, ``chat`` and ``shell``.

    No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="voxchat", description="Chat with cloud or local language models")
    sub = p.add_subparsers(dest="cmd")

    p_models = sub.add_parser("models", help="List the selectable models")
    p_models.add_argument("--json", action="store_true")

    p_chat = sub.add_parser("chat", help="Send one prompt and print the reply")
    p_chat.add_argument("prompt", help="user message text")
    _add_model_flags(p_chat)
    add_stream_flags(p_chat)
    p_chat.add_argument("--json", action="store_true", help="print the reply as a JSON object")

    p_shell = sub.add_parser("shell", help="Interactive chat session (history kept in memory only)")
    _add_model_flags(p_shell)
    add_stream_flags(p_shell)

    return p


__all__ = ["build_parser", "add_stream_flags"]
