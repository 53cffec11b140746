"""Stream decoding: boundary independence, sentinel and leniency."""

from __future__ import annotations

import json
import logging

import pytest

from voxchat_providers.adapters import AnthropicMessagesAdapter, OpenAICompatibleAdapter
from voxchat_providers.base.errors import TransportError
from voxchat_providers.base.log_support import LogContext
from voxchat_providers.base.logging import get_logger
from voxchat_providers.base.models import NormalizedChunk, StreamSignal
from voxchat_providers.base.streaming import StreamDecoder, accumulate_chunks


def _event(text: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]}, ensure_ascii=False)


STREAM = (
    "\n\n".join([_event("Hel"), _event("lo, "), _event("wörld 🌍"), "data: [DONE]"]) + "\n\n"
).encode("utf-8")


def _texts(decoder: StreamDecoder, parts) -> list[str]:
    return [c.text for c in decoder.decode(parts)]


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def test_single_buffer():
    assert _texts(StreamDecoder(OpenAICompatibleAdapter()), [STREAM]) == ["Hel", "lo, ", "wörld 🌍"]


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 16, 64])
def test_chunk_boundaries_do_not_matter(size):
    decoder = StreamDecoder(OpenAICompatibleAdapter())
    assert _texts(decoder, _split(STREAM, size)) == ["Hel", "lo, ", "wörld 🌍"]


def test_every_two_way_split_matches():
    expected = _texts(StreamDecoder(OpenAICompatibleAdapter()), [STREAM])
    for cut in range(1, len(STREAM)):
        got = _texts(StreamDecoder(OpenAICompatibleAdapter()), [STREAM[:cut], STREAM[cut:]])
        assert got == expected, f"split at {cut}"


def test_sentinel_stops_before_later_lines():
    data = (_event("a") + "\ndata: [DONE]\n" + _event("never") + "\n").encode()
    decoder = StreamDecoder(OpenAICompatibleAdapter())
    assert _texts(decoder, [data]) == ["a"]
    assert decoder.ended is True


def test_connection_close_without_sentinel_flushes_last_line():
    data = (_event("a") + "\n" + _event("b")).encode()
    decoder = StreamDecoder(OpenAICompatibleAdapter())
    assert _texts(decoder, [data]) == ["a", "b"]
    assert decoder.ended is False


def test_malformed_line_is_logged_and_skipped(capsys):
    logger = get_logger("voxchat.test.decoder")
    data = (_event("A") + "\ndata: {not json\n" + _event("B") + "\ndata: [DONE]\n").encode()
    decoder = StreamDecoder(OpenAICompatibleAdapter(), logger, LogContext(provider="openai", model="m"))
    assert _texts(decoder, [data]) == ["A", "B"]
    assert decoder.skipped_lines == 1
    lines = [json.loads(x) for x in capsys.readouterr().err.strip().splitlines()]
    errors = [x for x in lines if x.get("event") == "stream.decode_error"]
    assert len(errors) == 1
    assert errors[0]["level"] == logging.getLevelName(logging.WARNING)
    assert errors[0]["line"] == "data: {not json"
    assert errors[0]["provider"] == "openai"


def test_non_data_and_empty_events_are_skipped():
    data = (
        ": comment\nevent: message\n\n"
        + 'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
        + _event("x")
        + "\n"
    ).encode()
    assert _texts(StreamDecoder(OpenAICompatibleAdapter()), [data]) == ["x"]


def test_data_marker_must_start_the_line():
    adapter = OpenAICompatibleAdapter()
    assert adapter.decode_stream_event("  " + _event("x")) is StreamSignal.SKIP
    assert adapter.decode_stream_event(_event("x") + "\r\n") == NormalizedChunk(text="x")
    data = ("  " + _event("no") + "\n\t" + _event("nope") + "\n" + _event("yes") + "\r\n").encode()
    assert _texts(StreamDecoder(adapter), [data]) == ["yes"]


def test_anthropic_stream():
    events = [
        "event: message_start",
        'data: {"type":"message_start","message":{"id":"m1"}}',
        "event: content_block_delta",
        'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"Hi"}}',
        'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":" you"}}',
        'data: {"type":"message_stop"}',
        'data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"late"}}',
    ]
    data = ("\n".join(events) + "\n").encode()
    decoder = StreamDecoder(AnthropicMessagesAdapter())
    assert _texts(decoder, _split(data, 9)) == ["Hi", " you"]


def test_error_event_propagates():
    data = b'data: {"type":"error","error":{"message":"boom"}}\n'
    with pytest.raises(TransportError):
        list(StreamDecoder(AnthropicMessagesAdapter()).decode([data]))


def test_accumulate_chunks():
    chunks = [NormalizedChunk("Hel"), NormalizedChunk("lo")]
    assert accumulate_chunks(chunks).text == "Hello"
    assert accumulate_chunks([]).text == ""
