import io
import json

import httpx

from voxchat_providers.service.cli import main
from voxchat_providers.service.cli.cli_actions import handle_chat, handle_models
from voxchat_providers.service.cli.cli_parser import build_parser
from voxchat_providers.service.cli.cli_shell import handle_shell


def _reply(text):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def _lines_reader(lines):
    it = iter(lines)

    def read_line(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


def test_parser_defaults():
    args = build_parser().parse_args(["chat", "hello"])
    assert args.model == "gpt-3.5-turbo"
    assert args.stream is True
    assert args.provider is None
    assert build_parser().parse_args(["chat", "hello", "--no-stream"]).stream is False
    assert build_parser().parse_args(["chat", "hello", "--stream", "off"]).stream is False


def test_models_listing():
    out = io.StringIO()
    assert handle_models(build_parser().parse_args(["models"]), out=out) == 0
    lines = out.getvalue().splitlines()
    assert len(lines) == 5
    assert lines[0].startswith("gpt-3.5-turbo")


def test_main_models_json(capsys):
    assert main(["models", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data[2]["id"] == "claude-3-opus"


def test_main_without_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage: voxchat" in capsys.readouterr().out


def test_chat_blocking(make_gateway, recorded, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    gw = make_gateway(lambda req: _reply("Hello!"))
    out = io.StringIO()
    args = build_parser().parse_args(["chat", "Hello", "--no-stream", "--system", "be brief"])
    assert handle_chat(args, gateway=gw, out=out) == 0
    assert out.getvalue() == "Hello!\n"
    sent = json.loads(recorded[0].content)
    assert [m["role"] for m in sent["messages"]] == ["system", "user"]
    assert sent["temperature"] == 0.7
    assert sent["max_tokens"] == 2000


def test_chat_streaming(make_gateway, monkeypatch, sse_body, delta):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    gw = make_gateway(lambda req: httpx.Response(200, content=sse_body(delta("H"), delta("i"), done=True)))
    out = io.StringIO()
    assert handle_chat(build_parser().parse_args(["chat", "Hi"]), gateway=gw, out=out) == 0
    assert out.getvalue() == "Hi\n"


def test_chat_json_output(make_gateway, monkeypatch, sse_body, delta):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    gw = make_gateway(lambda req: httpx.Response(200, content=sse_body(delta("Hi"), done=True)))
    out = io.StringIO()
    assert handle_chat(build_parser().parse_args(["chat", "Hi", "--json"]), gateway=gw, out=out) == 0
    assert json.loads(out.getvalue()) == {"model": "gpt-3.5-turbo", "text": "Hi"}


def test_chat_missing_key_exit_code(make_gateway, recorded):
    gw = make_gateway(lambda req: _reply("x"))
    err = io.StringIO()
    assert handle_chat(build_parser().parse_args(["chat", "Hi"]), gateway=gw, err=err) == 2
    assert json.loads(err.getvalue())["code"] == "auth"
    assert recorded == []


def test_chat_unknown_model_needs_provider(make_gateway, recorded):
    gw = make_gateway(lambda req: _reply("from local"))
    err = io.StringIO()
    args = build_parser().parse_args(["chat", "Hi", "--model", "phi-3", "--no-stream"])
    assert handle_chat(args, gateway=gw, err=err) == 2

    out = io.StringIO()
    args = build_parser().parse_args(
        ["chat", "Hi", "--model", "phi-3", "--provider", "local", "--local", "--no-stream"]
    )
    assert handle_chat(args, gateway=gw, out=out) == 0
    assert out.getvalue() == "from local\n"
    assert str(recorded[0].url) == "http://localhost:11434/v1/chat/completions"


def test_chat_upstream_failure_exit_code(make_gateway, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    gw = make_gateway(lambda req: httpx.Response(500, text="boom"))
    err = io.StringIO()
    assert handle_chat(build_parser().parse_args(["chat", "Hi", "--no-stream"]), gateway=gw, err=err) == 1
    assert json.loads(err.getvalue())["status_code"] == 500


def test_shell_keeps_history(make_gateway, recorded, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    replies = iter(["first reply", "second reply"])
    gw = make_gateway(lambda req: _reply(next(replies)))
    out = io.StringIO()
    args = build_parser().parse_args(["shell", "--no-stream"])
    code = handle_shell(
        args,
        gateway=gw,
        read_line=_lines_reader(["hello", "", "/model gpt-4", "again", "/exit"]),
        out=out,
        err=io.StringIO(),
    )
    assert code == 0
    assert "first reply" in out.getvalue()
    assert "model: gpt-4" in out.getvalue()
    second = json.loads(recorded[1].content)
    assert second["model"] == "gpt-4"
    assert [(m["role"], m["content"]) for m in second["messages"]] == [
        ("user", "hello"),
        ("assistant", "first reply"),
        ("user", "again"),
    ]


def test_shell_failed_turn_is_withdrawn(make_gateway, recorded, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live-1")
    responses = iter([httpx.Response(503, text="busy"), _reply("fine")])
    gw = make_gateway(lambda req: next(responses))
    err = io.StringIO()
    args = build_parser().parse_args(["shell", "--no-stream"])
    handle_shell(args, gateway=gw, read_line=_lines_reader(["one", "two", "/reset"]), out=io.StringIO(), err=err)
    assert json.loads(err.getvalue().splitlines()[0])["status_code"] == 503
    sent = json.loads(recorded[1].content)
    assert [m["content"] for m in sent["messages"]] == ["two"]
