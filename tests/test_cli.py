"""Tests for p5studio.cli (headless session against a mocked server)."""
import asyncio

import httpx

from p5studio import cli


def _patch_transport(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def make_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", make_client)


def test_parser_defaults():
    args = cli.build_parser().parse_args(["a circle"])
    assert args.prompt == "a circle"
    assert args.server == "http://localhost:8000"
    assert args.auto == 0
    assert args.model is None


def test_session_writes_code_and_preview(monkeypatch, tmp_path, capsys):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"code": "function setup() { circle(1, 1, 1); }"})

    _patch_transport(monkeypatch, handler)
    args = cli.build_parser().parse_args(
        ["a circle", "--model", "gemini-2.0-flash-thinking-exp-01-21", "--out", str(tmp_path)]
    )

    assert asyncio.run(cli.run_session(args)) == 0

    assert len(requests) == 1
    assert b'"temperature":0.7' in requests[0].content.replace(b" ", b"")
    code_files = list(tmp_path.glob("p5js-sketch-*.js"))
    assert len(code_files) == 1
    assert code_files[0].read_text() == "function setup() { circle(1, 1, 1); }"
    assert "circle(1, 1, 1)" in (tmp_path / "preview.html").read_text()
    assert "Saved" in capsys.readouterr().out


def test_session_auto_rounds(monkeypatch, tmp_path):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"code": f"circle({len(requests)}, 0, 1);"})

    _patch_transport(monkeypatch, handler)
    args = cli.build_parser().parse_args(["x", "--auto", "2", "--out", str(tmp_path)])

    assert asyncio.run(cli.run_session(args)) == 0
    assert len(requests) == 3
    assert list(tmp_path.glob("*.js"))[0].read_text() == "circle(3, 0, 1);"


def test_session_failure_returns_nonzero(monkeypatch, tmp_path):
    _patch_transport(monkeypatch, lambda request: httpx.Response(500, json={"error": "quota"}))
    args = cli.build_parser().parse_args(["x", "--out", str(tmp_path)])
    assert asyncio.run(cli.run_session(args)) == 1
    assert not list(tmp_path.glob("*.js"))
