"""Incremental line splitting over raw response bytes.

Network reads arrive in arbitrary sizes: one read may hold several events,
half an event, or half of a multi-byte UTF-8 character. ``LineBuffer`` keeps
undecoded bytes until a ``\\n`` completes a line, so the lines it yields do
not depend on where the reads were split.
"""

from __future__ import annotations

from typing import List


class LineBuffer:
    """Accumulate bytes and release complete, decoded lines."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._pending = bytearray()
        self._encoding = encoding

    def _decode(self, raw: bytes) -> str:
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(self._encoding, errors="replace")

    def feed(self, data: bytes) -> List[str]:
        """Append ``data`` and return every line it completed (without EOL)."""
        if not data:
            return []
        self._pending.extend(data)
        lines: List[str] = []
        while (idx := self._pending.find(b"\n")) != -1:
            raw = bytes(self._pending[:idx])
            del self._pending[: idx + 1]
            lines.append(self._decode(raw))
        return lines

    def flush(self) -> List[str]:
        """Release a trailing unterminated line (connection closed)."""
        if not self._pending:
            return []
        raw = bytes(self._pending)
        self._pending.clear()
        return [self._decode(raw)]

    @property
    def pending_bytes(self) -> int:
        return len(self._pending)


__all__ = ["LineBuffer"]
