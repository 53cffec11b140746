"""voxchat command-line client.

``voxchat models`` lists the catalog, ``voxchat chat PROMPT`` sends one
prompt, ``voxchat shell`` opens an interactive session. A bare prompt
(``voxchat "hello"``) is shorthand for ``chat``.

Exit codes: 0 success, 1 failed call, 2 usage or setup error.
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_chat, handle_models
from .cli_parser import build_parser
from .cli_shell import handle_shell

_HANDLERS = {
	"models": handle_models,
	"chat": handle_chat,
	"shell": handle_shell,
}


def main(argv: Optional[list[str]] = None) -> int:
	"""Parse ``argv`` (default ``sys.argv[1:]``) and run the subcommand."""
	parser = build_parser()
	words = list(sys.argv[1:] if argv is None else argv)
	if words and words[0] not in _HANDLERS and words[0] not in ("-h", "--help"):
		words.insert(0, "chat")
	args = parser.parse_args(words)
	handler = _HANDLERS.get(args.cmd)
	if handler is None:
		parser.print_help()
		return 2
	return handler(args)


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
