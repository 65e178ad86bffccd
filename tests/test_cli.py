import json

import pytest

from tour_provisioning.__main__ import main
from tour_provisioning.config import reset_config
from tour_provisioning.container import reset_container


@pytest.fixture(autouse=True)
def fresh_container(monkeypatch):
    monkeypatch.delenv("TP_STORE_BACKEND", raising=False)
    reset_config()
    reset_container()
    yield
    reset_container()
    reset_config()


def write_tour(tmp_path, **fields):
    data = {
        "title": "Summer Run",
        "departments": ["sound"],
        "dates": [
            {"date": "2024-07-10", "location": "Venue A"},
            {"date": "2024-07-08", "location": "Venue B"},
        ],
    }
    data.update(fields)
    path = tmp_path / "tour.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_creates_tour(tmp_path, capsys):
    exit_code = main([str(write_tour(tmp_path))])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Tour created:" in out
    assert "(Summer Run, 2024-07-08 -> 2024-07-10)" in out


def test_invalid_input_exits_with_error(tmp_path, capsys):
    exit_code = main([str(write_tour(tmp_path, title=""))])

    err = capsys.readouterr().err
    assert exit_code == 1
    assert "Please enter a title for the tour" in err


def test_idempotency_key(tmp_path, capsys):
    path = write_tour(tmp_path)

    main([str(path), "--idempotency-key", "abc"])
    first = capsys.readouterr().out
    main([str(path), "--idempotency-key", "abc"])
    second = capsys.readouterr().out

    assert first == second


def test_missing_store_credentials_exit_with_error(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("TP_STORE_BACKEND", "supabase")
    monkeypatch.delenv("TP_STORE_SUPABASE_URL", raising=False)
    monkeypatch.delenv("TP_STORE_SUPABASE_KEY", raising=False)
    reset_config()

    exit_code = main([str(write_tour(tmp_path))])

    err = capsys.readouterr().err
    assert exit_code == 1
    assert "Supabase URL is not configured" in err
