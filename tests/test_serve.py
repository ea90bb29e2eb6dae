from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from pagewire import serve
from pagewire.config import ServerConfig


def test_run_app_builds_and_serves(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []

    def fake_run(app: Any, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(serve.uvicorn, "run", fake_run)
    monkeypatch.setenv("PAGEWIRE_PORT", "9123")

    serve.run_app(lambda b: b.page("P").text("hi"))

    assert len(calls) == 1
    assert isinstance(calls[0]["app"], FastAPI)
    assert calls[0]["app"].state.pagewire_app.schema.pages[0].title == "P"
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["port"] == 9123


def test_run_app_explicit_host_and_port_win(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(serve.uvicorn, "run", lambda app, **kw: calls.append(kw))

    serve.run_app(
        lambda b: b.page("P").text("hi"),
        host="0.0.0.0",
        port=0,
        config=ServerConfig.model_validate({"network": {"port": 9000}}),
    )
    assert calls == [{"host": "0.0.0.0", "port": 0}]
