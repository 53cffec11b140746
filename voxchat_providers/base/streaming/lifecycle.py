"""Per-call streaming state machine.

``IDLE -> CONNECTING -> STREAMING -> {COMPLETED | FAILED}``; a call may also
fail while still connecting. ``STREAMING`` re-enters itself on every chunk.
``COMPLETED`` and ``FAILED`` are terminal. Instances are never shared between
calls.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional


class StreamState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED: Dict[StreamState, FrozenSet[StreamState]] = {
    StreamState.IDLE: frozenset({StreamState.CONNECTING}),
    StreamState.CONNECTING: frozenset({StreamState.STREAMING, StreamState.FAILED}),
    StreamState.STREAMING: frozenset(
        {StreamState.STREAMING, StreamState.COMPLETED, StreamState.FAILED}
    ),
    StreamState.COMPLETED: frozenset(),
    StreamState.FAILED: frozenset(),
}


class StreamLifecycle:
    """Track and validate the state of one streaming call.

    ``on_change`` is invoked with ``(previous, current)`` whenever the state
    actually changes; re-entering ``STREAMING`` does not notify.
    """

    def __init__(
        self, on_change: Optional[Callable[[StreamState, StreamState], None]] = None
    ) -> None:
        self._state = StreamState.IDLE
        self._history: List[StreamState] = [StreamState.IDLE]
        self._on_change = on_change

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def history(self) -> List[StreamState]:
        """States visited so far, without repeated ``STREAMING`` entries."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return self._state in (StreamState.COMPLETED, StreamState.FAILED)

    def transition(self, target: StreamState) -> None:
        """Move to ``target``.

        Raises:
            RuntimeError: when the transition is not allowed from the
                current state.
        """
        if target not in _ALLOWED[self._state]:
            raise RuntimeError(
                f"illegal stream transition {self._state.value} -> {target.value}"
            )
        previous = self._state
        self._state = target
        if previous is target:
            return
        self._history.append(target)
        if self._on_change is not None:
            self._on_change(previous, target)

    def fail(self) -> None:
        """Move to ``FAILED`` unless the call already ended."""
        if not self.is_terminal:
            self.transition(StreamState.FAILED)


__all__ = ["StreamState", "StreamLifecycle"]
