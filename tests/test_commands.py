from __future__ import annotations

import asyncio
import json

from conftest import FakeGateway

from navlib.commands import CommandDispatcher, build_query


def test_build_query():
    assert build_query(["livingroom"], "on") == "/livingroom?code=on"
    assert build_query(["livingroom"], "on", "") == "/livingroom?code=on"
    assert build_query(["livingroom"], "on", "42") == "/livingroom?code=on&value=42"
    assert build_query([], "a b", "x&y") == "/?code=a%20b&value=x%26y"


def test_execute_posts_and_records_json_body():
    gw = FakeGateway({"/livingroom?code=on": (200, {"status": "on"})})
    dispatcher = CommandDispatcher(gw)

    entry = asyncio.run(dispatcher.execute(["livingroom"], "on"))

    assert gw.calls == [("POST", "/livingroom?code=on")]
    assert entry.label == "POST http://api.test/v2/livingroom?code=on"
    assert json.loads(entry.text) == {"status": "on"}
    assert gw.status.text == entry.text


def test_execute_records_plain_text_body():
    gw = FakeGateway({"/tv?code=vol&value=10": (200, "done")})
    entry = asyncio.run(CommandDispatcher(gw).execute(["tv"], "vol", "10"))

    assert entry.text == "done"


def test_failure_is_recorded_not_raised():
    gw = FakeGateway({"/tv?code=off": (500, "server on fire")})
    dispatcher = CommandDispatcher(gw)

    entry = asyncio.run(dispatcher.execute(["tv"], "off"))

    assert entry.label == "POST http://api.test/v2/tv?code=off"
    assert entry.text == "500 server on fire"
    assert gw.status.label == entry.label
