from __future__ import annotations

import json

import httpx
from click.testing import CliRunner
from conftest import write_config

import navlib.clients as clients
from navctl.cli import cli
from navlib.errors import FetchError


def fake_listing(**overrides):
    result = {
        "path": "/livingroom",
        "children": [
            {"name": "lamp", "has_children": True},
            {"name": "on", "has_children": False},
        ],
        "range": {"is_range": False, "extras": []},
        "auth_required": False,
    }
    result.update(overrides)
    return result


def test_ls_json(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    seen = []

    def fake_list_path(_cfg, segments):
        seen.append(segments)
        return fake_listing()

    monkeypatch.setattr("navlib.clients.list_path", fake_list_path)

    runner = CliRunner()
    res = runner.invoke(cli, ["--json-output", "ls", "/livingroom"])  # type: ignore[arg-type]
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert [c["name"] for c in data["children"]] == ["lamp", "on"]
    assert seen == [("livingroom",)]


def test_ls_table(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    monkeypatch.setattr("navlib.clients.list_path", lambda _cfg, _seg: fake_listing())

    res = CliRunner().invoke(cli, ["ls", "#/livingroom"])

    assert res.exit_code == 0, res.output
    assert "NAME" in res.output and "CHILDREN" in res.output
    assert "lamp" in res.output and "yes" in res.output


def test_ls_range_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    monkeypatch.setattr(
        "navlib.clients.list_path",
        lambda _cfg, _seg: fake_listing(range={"is_range": True, "extras": ["off"]}),
    )

    res = CliRunner().invoke(cli, ["ls", "/dimmer"])

    assert res.exit_code == 0, res.output
    assert "numeric range 0-100" in res.output
    assert "EXTRA" in res.output and "off" in res.output


def test_ls_failure_exits_2(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))

    def failing(_cfg, _seg):
        raise FetchError("/missing", 404, "404 on /missing: not found")

    monkeypatch.setattr("navlib.clients.list_path", failing)

    res = CliRunner().invoke(cli, ["-v", "ls", "/missing"])

    assert res.exit_code == 2
    assert "Path '/missing' not found" in res.output
    assert "Troubleshooting suggestions" in res.output


def test_exec_prints_status_channel(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    calls = []

    def fake_run_command(_cfg, segments, code, value):
        calls.append((segments, code, value))
        return {
            "label": "POST http://api.test/v2/livingroom?code=on&value=42",
            "response": '{"ok": true}',
            "auth_required": False,
        }

    monkeypatch.setattr("navlib.clients.run_command", fake_run_command)

    res = CliRunner().invoke(cli, ["exec", "/livingroom", "on", "--value", "42"])

    assert res.exit_code == 0, res.output
    assert calls == [(("livingroom",), "on", "42")]
    assert "POST http://api.test/v2/livingroom?code=on&value=42" in res.output


def test_ls_end_to_end_with_mock_transport(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    routes = {
        "/v2/": {"data": ["livingroom", "garage"]},
        "/v2/livingroom": {"data": ["lamp"]},
    }

    def handler(request):
        body = routes.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, json=body)

    real_build = clients.build_navigator
    monkeypatch.setattr(
        "navlib.clients.build_navigator",
        lambda cfg: real_build(cfg, transport=httpx.MockTransport(handler)),
    )

    res = CliRunner().invoke(cli, ["--json-output", "ls"])

    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert data["children"] == [
        {"name": "livingroom", "has_children": True},
        {"name": "garage", "has_children": False},
    ]
    cached = json.loads((tmp_path / "cache" / "listings.json").read_text())
    assert cached["/"] == ["livingroom", "garage"]
    assert cached["/livingroom"] == ["lamp"]

    res = CliRunner().invoke(cli, ["cache", "show"])
    assert res.exit_code == 0, res.output
    assert "/livingroom" in res.output


def test_cache_clear(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))
    store = tmp_path / "cache" / "listings.json"
    store.parent.mkdir()
    store.write_text(json.dumps({"/": ["a"]}))

    res = CliRunner().invoke(cli, ["--json-output", "cache", "clear"])

    assert res.exit_code == 0, res.output
    assert json.loads(res.output) == {"cleared": True, "persisted": "saved"}
    assert json.loads(store.read_text()) == {}


def test_auth_set_and_clear(tmp_path, monkeypatch):
    monkeypatch.setenv("NAVCTL_CONFIG", str(write_config(tmp_path)))

    res = CliRunner().invoke(cli, ["auth", "set", "--username", "me", "--password", "pw"])
    assert res.exit_code == 0, res.output
    creds = json.loads((tmp_path / "credentials.json").read_text())
    assert creds == {"username": "me", "password": "pw"}

    res = CliRunner().invoke(cli, ["auth", "clear"])
    assert res.exit_code == 0, res.output
    assert not (tmp_path / "credentials.json").exists()
