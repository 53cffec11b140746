"""Interactive chat shell.

Keeps the conversation in memory for the lifetime of the session only; no
history is written anywhere. Lines starting with ``/`` are shell commands:

    /help            list commands
    /models          list the catalog
    /model <id>      switch model (conversation is kept)
    /stream on|off   toggle streaming
    /reset           forget the conversation
    /exit, /quit     leave the shell
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, TextIO

from ...base.errors import GatewayError
from ...base.models import ChatTurn
from ...config.catalog import list_models
from ...gateway import CompletionGateway
from .cli_actions import generation_params, report_error, resolve_target, run_turn

_HELP = (
    "/help, /models, /model <id>, /stream on|off, /reset, /exit"
)


class ChatShell:
    """Read-eval-print loop around one gateway and an in-memory conversation."""

    def __init__(
        self,
        args: argparse.Namespace,
        gateway: CompletionGateway,
        *,
        out: TextIO,
        err: TextIO,
    ) -> None:
        self.args = args
        self.gateway = gateway
        self.out = out
        self.err = err
        self.turns: List[ChatTurn] = []
        self.reset()

    def reset(self) -> None:
        self.turns = []
        if self.args.system:
            self.turns.append(ChatTurn(role="system", content=self.args.system))

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def command(self, line: str) -> bool:
        """Run a ``/`` command; return False when the shell should exit."""
        name, _, rest = line[1:].partition(" ")
        rest = rest.strip()
        if name in ("exit", "quit"):
            return False
        if name == "reset":
            self.reset()
            self._print("conversation cleared")
        elif name == "models":
            for m in list_models():
                self._print(f"- {m.id} ({m.display_name})")
        elif name == "model":
            if rest:
                self.args.model = rest
            self._print(f"model: {self.args.model}")
        elif name == "stream":
            if rest:
                self.args.stream = rest.lower() in ("on", "true", "1", "yes")
            self._print(f"stream: {'on' if self.args.stream else 'off'}")
        else:
            self._print(_HELP)
        return True

    def send(self, text: str) -> None:
        """Append a user turn, run it and append the reply.

        On failure the user turn is withdrawn so the conversation stays
        alternating.
        """
        self.turns.append(ChatTurn(role="user", content=text))
        try:
            descriptor, credentials = resolve_target(self.args)
            params = generation_params(self.args)
            reply = run_turn(self.gateway, self.turns, descriptor, credentials, params, out=self.out)
        except GatewayError as exc:
            self.turns.pop()
            report_error(exc, err=self.err)
            return
        if not params.streaming_requested:
            self._print(reply)
        self.turns.append(ChatTurn(role="assistant", content=reply))

    def run(self, read_line: Callable[[str], str]) -> int:
        self._print(f"voxchat shell, model {self.args.model} (/help for commands)")
        while True:
            try:
                line = read_line("> ").strip()
            except (EOFError, KeyboardInterrupt):
                self._print("")
                return 0
            if not line:
                continue
            if line.startswith("/"):
                if not self.command(line):
                    return 0
                continue
            self.send(line)


def handle_shell(
    args: argparse.Namespace,
    *,
    gateway: Optional[CompletionGateway] = None,
    read_line: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run the interactive shell until ``/exit`` or end of input."""
    shell = ChatShell(args, gateway or CompletionGateway(), out=out or sys.stdout, err=err or sys.stderr)
    return shell.run(read_line)


__all__ = ["ChatShell", "handle_shell"]
