import json
from pathlib import Path

import pytest

from prompter.__main__ import main


@pytest.mark.e2e
def test_single_query_json(dataset, inference, capsys):
    svc, host = inference
    svc.items = ["the matrix reloaded"]
    rc = main(["--dataset", dataset, "--host", host, "--interval", "0.02",
               "--ready-timeout", "5", "--q", "teh matrix", "--json"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    # partial prompt equals the query; only the full correction is offered
    assert out == {"items": ["the matrix", "the matrix reloaded"], "status": "ok"}
    assert svc.calls == [{"query": "the matrix", "n": 4}]


@pytest.mark.e2e
def test_repl_select_prompt_reruns_it(dataset, inference, capsys, monkeypatch):
    svc, host = inference
    svc.items = ["the dark knight"]
    lines = iter(["the matriks", ":1", ":9", ""])
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(lines))
    rc = main(["--dataset", dataset, "--host", host, "--no-wait"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "1  the matrix" in out
    assert "(no such prompt)" in out
    assert [c["query"] for c in svc.calls] == ["the matrix", "the matrix"]


@pytest.mark.e2e
def test_never_ready_exits_nonzero(dataset, inference):
    svc, host = inference
    svc.ready = False
    rc = main(["--dataset", dataset, "--host", host, "--interval", "0.02", "--ready-timeout", "0.2", "--q", "x"])
    assert rc == 1


def test_missing_dataset_exits_before_session(tmp_path: Path, caplog):
    rc = main(["--dataset", str(tmp_path / "none.csv"), "--no-wait", "--q", "x"])
    assert rc == 1
    assert "cannot open" in caplog.text


@pytest.mark.e2e
def test_degraded_flag_prints_local_prompts(dataset, capsys):
    rc = main(["--dataset", dataset, "--host", "127.0.0.1:9", "--timeout", "0.5",
               "--no-wait", "--degraded", "--q", "the matriks"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "1  the matrix" in out
    assert "local prompts only" in out
