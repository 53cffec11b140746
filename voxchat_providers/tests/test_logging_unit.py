import io
import json
import logging

from voxchat_providers.base.log_support import JsonFormatter, LogContext
from voxchat_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def _lines(err: str):
    return [json.loads(x) for x in err.strip().splitlines() if x.strip()]


def test_json_formatter_hoists_event_keys():
    record = logging.LogRecord("voxchat.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e"
    assert out["n"] == 1
    assert out["level"] == "INFO"
    assert out["logger"] == "voxchat.x"


def test_cli_events_drop_message_copy():
    record = logging.LogRecord("voxchat.cli", logging.ERROR, __file__, 1, json.dumps({"event": "cli.error"}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert "msg" not in out


def test_normalized_keys_always_present(capsys):
    logger = get_logger("voxchat.test")
    ctx = LogContext(provider="openai", model="gpt-4", request_id="abc")
    normalized_log_event(logger, "unit.event", ctx, phase="start", error_code=None, extra_value=3)
    (rec,) = _lines(capsys.readouterr().err)
    for key in REQUIRED_NORMALIZED_KEYS:
        if key != "error_code":
            assert key in rec
    assert "error_code" not in rec
    assert rec["provider"] == "openai"
    assert rec["extra_value"] == 3


def test_log_event_drops_none(capsys):
    logger = get_logger("voxchat.test")
    log_event(logger, "plain", None, a=None, b=2)
    (rec,) = _lines(capsys.readouterr().err)
    assert "a" not in rec
    assert rec["b"] == 2


def test_level_from_env(monkeypatch, capsys):
    monkeypatch.setenv("VOXCHAT_LOG_LEVEL", "warning")
    logger = get_logger("voxchat.test")
    log_event(logger, "quiet")
    log_event(logger, "loud", level=logging.WARNING)
    events = [r["event"] for r in _lines(capsys.readouterr().err)]
    assert events == ["loud"]


def test_configure_logger_file_handler(tmp_path, capsys):
    path = tmp_path / "logs" / "voxchat.log"
    try:
        logger = configure_logger(level="INFO", file_path=str(path))
        log_event(get_logger("voxchat.test"), "to.file")
        for h in logger.handlers:
            h.flush()
        content = path.read_text(encoding="utf-8")
        assert json.loads(content.strip().splitlines()[-1])["event"] == "to.file"
    finally:
        configure_logger(file_path=None)
    capsys.readouterr()


def test_console_handler_replaced_when_stream_closed(capsys):
    logger = get_logger()
    dead = io.StringIO()
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setStream(dead)
    dead.close()
    log_event(get_logger("voxchat.test"), "after.close")
    captured = capsys.readouterr().err
    assert "Logging error" not in captured
    assert [r["event"] for r in _lines(captured)] == ["after.close"]
