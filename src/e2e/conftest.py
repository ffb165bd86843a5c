# src/e2e/conftest.py
from __future__ import annotations

import threading
from pathlib import Path

import pytest
from flask import Flask, jsonify, request
from werkzeug.serving import make_server

HEADER = "rank,title,genre,description,director,actors,year,runtime,rating,votes,revenue,metascore"

MOVIES = [
    ("The Matrix", "8.7"),
    ("The Matrix Reloaded", "7.2"),
    ("The Matrix Revolutions", "6.7"),
    ("The Dark Knight", "9.0"),
    ("Inception", "8.8"),
]


def write_dataset(path: Path, movies=MOVIES) -> str:
    lines = [HEADER]
    for i, (title, rating) in enumerate(movies, start=1):
        lines.append(f'{i},"{title}",Action,desc,someone,"a, b",1999,136,{rating},100,1.0,70')
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def dataset(tmp_path: Path) -> str:
    return write_dataset(tmp_path / "imdb-movies.csv")


class FakeInference:
    """
    Stand-in for the inference service, served over real HTTP:
      GET /ping -> 200 once `ready` is True, 503 before
      GET /q    -> {"items": items}; every call is recorded in `calls`
    """

    def __init__(self) -> None:
        self.ready = True
        self.items: list[str] = []
        self.status = 200
        self.calls: list[dict] = []
        self.pings = 0
        self.app = Flask("fake-inference")
        self.app.add_url_rule("/ping", "ping", self._ping)
        self.app.add_url_rule("/q", "q", self._q)

    def _ping(self):
        self.pings += 1
        return ("ok", 200) if self.ready else ("loading", 503)

    def _q(self):
        self.calls.append({"query": request.args.get("query"), "n": request.args.get("n", type=int)})
        if self.status != 200:
            return jsonify({"error": "boom"}), self.status
        return jsonify({"items": self.items})


@pytest.fixture
def inference():
    """Run FakeInference on an ephemeral port; yields (service, 'host:port')."""
    svc = FakeInference()
    server = make_server("127.0.0.1", 0, svc.app, threaded=True)
    t = threading.Thread(target=server.serve_forever, daemon=True)
    t.start()
    try:
        yield svc, f"127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        t.join(timeout=5)


class StubOracle:
    """Deterministic oracle: table lookup, identity otherwise. Records calls."""

    def __init__(self, table: dict[str, str] | None = None):
        self.table = table or {}
        self.calls: list[str] = []

    def suggest(self, token, frequencies):
        self.calls.append(token)
        return self.table.get(token, token)


class FakeRemote:
    """Remote client double: returns `items` (or raises `error`), records (query, n)."""

    def __init__(self, items=None, error: Exception | None = None):
        self.items = list(items or [])
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def fetch(self, query, count):
        self.calls.append((query, count))
        if self.error is not None:
            raise self.error
        return list(self.items)
