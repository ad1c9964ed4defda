"""CLI tests: serve, users, secret (click CliRunner, no server)."""

import json

import pytest
from click.testing import CliRunner

from usergate.cli.main import main
from usergate.config import get_settings


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def store_file(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({
        "users": [
            {"id": "u1", "account": "a1", "password": "secret_pw", "name": "Alice", "mail": "a1@x.com"},
            {"id": "u2", "account": "b2", "password": "other_pw", "name": "Bob", "mail": "b2@x.com", "head": "b.png"},
        ],
        "products": [],
    }))
    return path


@pytest.fixture()
def clean_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_secret(runner):
    r1 = runner.invoke(main, ["secret"])
    r2 = runner.invoke(main, ["secret"])
    assert r1.exit_code == 0
    assert len(r1.output.strip()) >= 40
    assert r1.output != r2.output


def test_users_table(runner, store_file):
    r = runner.invoke(main, ["users", "--store", str(store_file)])
    assert r.exit_code == 0
    assert "a1" in r.output
    assert "Bob" in r.output
    assert "secret_pw" not in r.output


def test_users_json(runner, store_file):
    r = runner.invoke(main, ["users", "--store", str(store_file), "--json"])
    assert r.exit_code == 0
    users = json.loads(r.output)
    assert [u["id"] for u in users] == ["u1", "u2"]
    assert all("password" not in u for u in users)


def test_users_store_from_env(runner, store_file, monkeypatch):
    monkeypatch.setenv("USERGATE_STORE_PATH", str(store_file))
    r = runner.invoke(main, ["users", "--json"])
    assert r.exit_code == 0
    assert len(json.loads(r.output)) == 2


def test_users_missing_store(runner, tmp_path):
    r = runner.invoke(main, ["users", "--store", str(tmp_path / "nope.json")])
    assert r.exit_code == 1
    assert "not found" in r.output


def test_users_corrupt_store(runner, tmp_path):
    path = tmp_path / "db.json"
    path.write_text("{broken")
    r = runner.invoke(main, ["users", "--store", str(path)])
    assert r.exit_code == 1
    assert "Error" in r.output


def test_serve_without_secret(runner, monkeypatch, clean_settings):
    monkeypatch.delenv("USERGATE_JWT_SECRET", raising=False)
    r = runner.invoke(main, ["serve"])
    assert r.exit_code == 1
    assert "USERGATE_JWT_SECRET" in r.output


def test_serve_runs_uvicorn_factory(runner, monkeypatch, clean_settings):
    import uvicorn

    calls = []
    monkeypatch.setenv("USERGATE_JWT_SECRET", "cli-secret")
    monkeypatch.setenv("USERGATE_PORT", "4000")
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    r = runner.invoke(main, ["serve", "--host", "127.0.0.1"])
    assert r.exit_code == 0, r.output
    assert calls == [
        (
            "usergate.main:create_app",
            {"factory": True, "host": "127.0.0.1", "port": 4000, "reload": False},
        )
    ]


def test_version(runner):
    r = runner.invoke(main, ["--version"])
    assert r.exit_code == 0
    assert "usergate" in r.output


def test_log_level_option(runner, store_file):
    r = runner.invoke(main, ["--log-level", "error", "users", "--store", str(store_file), "--json"])
    assert r.exit_code == 0
    assert len(json.loads(r.output)) == 2

    r = runner.invoke(main, ["--log-level", "chatty", "users", "--store", str(store_file)])
    assert r.exit_code == 2
