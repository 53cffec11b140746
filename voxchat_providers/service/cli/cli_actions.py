"""CLI action handlers.

Purpose
-------
Resolve the model, credentials and generation settings selected on the
command line and drive the completion gateway for the ``models`` and
``chat`` subcommands. The interactive shell reuses :func:`run_turn`.

Fallback & Error Semantics
--------------------------
- Gateway errors are printed as JSON to stderr and mapped to exit codes:
  ``2`` for setup problems (unknown model, missing key), ``1`` for failures
  of the call itself.
- Every handler accepts an injected gateway and output stream so tests run
  without network access.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional, TextIO, Tuple

from ...base.dto import GenerationParameters
from ...base.errors import GatewayError, MissingCredentialsError, UnsupportedProviderError
from ...base.logging import get_logger, log_event
from ...base.models import ChatTurn, CompletionCredentials, ModelDescriptor
from ...base.normalizer import build_normalized_request
from ...config import load_credentials
from ...config.catalog import find_model, list_models
from ...config.defaults import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE
from ...gateway import CompletionGateway
from ...registry import parse_provider_kind


def resolve_target(args: argparse.Namespace) -> Tuple[ModelDescriptor, CompletionCredentials]:
    """Return the descriptor and credentials selected by ``args``.

    Raises:
        UnsupportedProviderError: the model is not in the catalog and no
            ``--provider`` describes it.
    """
    desc = find_model(args.model)
    if desc is None:
        if not args.provider:
            raise UnsupportedProviderError(
                f"unknown model '{args.model}'; pass --provider to describe it", model=args.model
            )
        desc = ModelDescriptor(
            id=args.model,
            display_name=args.model,
            provider_kind=args.provider.lower().strip(),
            locality="local" if args.local else "cloud",
        )
    kind = parse_provider_kind(desc.provider_kind)
    if kind is None:
        return desc, CompletionCredentials(base_url_override=args.base_url)
    return desc, load_credentials(kind.value, {"base_url": args.base_url})


def generation_params(args: argparse.Namespace) -> GenerationParameters:
    return GenerationParameters(
        temperature=args.temperature if args.temperature is not None else DEFAULT_TEMPERATURE,
        max_output_tokens=args.max_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
        streaming_requested=bool(args.stream),
    )


def run_turn(
    gateway: CompletionGateway,
    turns: List[ChatTurn],
    descriptor: ModelDescriptor,
    credentials: CompletionCredentials,
    params: GenerationParameters,
    *,
    out: Optional[TextIO] = None,
) -> str:
    """Send ``turns`` and return the assistant reply.

    When streaming, chunks are written to ``out`` as they arrive (followed
    by a newline); blocking replies are returned without printing.
    """
    request = build_normalized_request(turns, descriptor.id, params)
    if not params.streaming_requested:
        return gateway.complete(request, descriptor, credentials).text

    collected: List[str] = []

    def _on_chunk(text: str) -> None:
        if out is not None:
            out.write(text)
            out.flush()

    gateway.stream_complete(request, descriptor, credentials, _on_chunk, collected.append)
    if out is not None:
        out.write("\n")
    return collected[0] if collected else ""


def report_error(exc: GatewayError, *, err: Optional[TextIO] = None) -> int:
    """Print ``exc`` as JSON and return the matching exit code."""
    payload = {"error": exc.message, "code": exc.code.value}
    if status := getattr(exc, "status_code", None):
        payload["status_code"] = status
    print(json.dumps(payload), file=err or sys.stderr)
    log_event(get_logger("voxchat.cli"), "cli.error", code=exc.code.value, error=exc.message)
    return 2 if isinstance(exc, (UnsupportedProviderError, MissingCredentialsError)) else 1


def handle_models(args: argparse.Namespace, *, out: Optional[TextIO] = None) -> int:
    """Print the model catalog, one model per line (or JSON with ``--json``)."""
    out = out or sys.stdout
    models = list_models()
    if args.json:
        print(json.dumps([m.to_dict() for m in models], indent=2), file=out)
        return 0
    for m in models:
        print(f"{m.id:20s} {m.display_name:20s} {m.provider_kind:10s} {m.locality}", file=out)
    return 0


def handle_chat(
    args: argparse.Namespace,
    *,
    gateway: Optional[CompletionGateway] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Send one prompt (plus optional system prompt) and print the reply."""
    out = out or sys.stdout
    gateway = gateway or CompletionGateway()
    turns: List[ChatTurn] = []
    if args.system:
        turns.append(ChatTurn(role="system", content=args.system))
    turns.append(ChatTurn(role="user", content=args.prompt))
    try:
        descriptor, credentials = resolve_target(args)
        params = generation_params(args)
        live = None if args.json else out
        text = run_turn(gateway, turns, descriptor, credentials, params, out=live)
    except GatewayError as exc:
        return report_error(exc, err=err)
    if args.json:
        print(json.dumps({"model": descriptor.id, "text": text}, ensure_ascii=False), file=out)
    elif not params.streaming_requested:
        print(text, file=out)
    return 0


__all__ = [
    "resolve_target",
    "generation_params",
    "run_turn",
    "report_error",
    "handle_models",
    "handle_chat",
]
