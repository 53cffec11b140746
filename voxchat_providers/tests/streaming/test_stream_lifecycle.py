"""Streaming state machine transitions."""

from __future__ import annotations

import pytest

from voxchat_providers.base.streaming import StreamLifecycle, StreamState


def test_happy_path_and_reentry():
    changes = []
    lc = StreamLifecycle(on_change=lambda a, b: changes.append((a, b)))
    lc.transition(StreamState.CONNECTING)
    lc.transition(StreamState.STREAMING)
    lc.transition(StreamState.STREAMING)
    lc.transition(StreamState.STREAMING)
    lc.transition(StreamState.COMPLETED)
    assert lc.state is StreamState.COMPLETED
    assert lc.is_terminal
    assert lc.history == [
        StreamState.IDLE,
        StreamState.CONNECTING,
        StreamState.STREAMING,
        StreamState.COMPLETED,
    ]
    assert len(changes) == 3


def test_connecting_may_fail():
    lc = StreamLifecycle()
    lc.transition(StreamState.CONNECTING)
    lc.transition(StreamState.FAILED)
    assert lc.state is StreamState.FAILED


@pytest.mark.parametrize(
    "path",
    [
        [StreamState.STREAMING],
        [StreamState.COMPLETED],
        [StreamState.CONNECTING, StreamState.COMPLETED],
        [StreamState.CONNECTING, StreamState.STREAMING, StreamState.COMPLETED, StreamState.STREAMING],
        [StreamState.CONNECTING, StreamState.FAILED, StreamState.CONNECTING],
    ],
)
def test_illegal_transitions_raise(path):
    lc = StreamLifecycle()
    with pytest.raises(RuntimeError):
        for state in path:
            lc.transition(state)


def test_fail_is_noop_once_terminal():
    lc = StreamLifecycle()
    lc.transition(StreamState.CONNECTING)
    lc.transition(StreamState.STREAMING)
    lc.transition(StreamState.COMPLETED)
    lc.fail()
    assert lc.state is StreamState.COMPLETED
