from __future__ import annotations

import asyncio
import base64

import httpx

from navlib.auth import AuthState
from navlib.commands import CommandDispatcher
from navlib.gateway import Gateway
from navlib.status import StatusChannel


def make_gateway(handler, auth=None):
    return Gateway(
        "http://api.test/v2/",
        auth=auth or AuthState(),
        status=StatusChannel(),
        transport=httpx.MockTransport(handler),
    )


def send(gw, *args, **kwargs):
    async def _run():
        async with gw:
            return await gw.send(*args, **kwargs)

    return asyncio.run(_run())


def test_send_parses_json():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": ["a", "b"]})

    res = send(make_gateway(handler), "/rooms")

    assert res.ok is True
    assert res.status == 200
    assert res.json == {"data": ["a", "b"]}
    assert res.url == "http://api.test/v2/rooms"
    assert str(seen[0].url) == "http://api.test/v2/rooms"
    assert "authorization" not in seen[0].headers


def test_non_json_body_keeps_text():
    res = send(make_gateway(lambda r: httpx.Response(200, text="hello")), "/x")

    assert res.json is None
    assert res.text == "hello"


def test_credentials_are_sent_as_basic_auth():
    seen = []

    def handler(request):
        seen.append(request.headers.get("authorization"))
        return httpx.Response(200, json={"data": []})

    auth = AuthState()
    auth.set_credentials("  user ", "pw")
    send(make_gateway(handler, auth), "/")

    assert seen == ["Basic " + base64.b64encode(b"user:pw").decode()]


def test_unauthorized_raises_prompt_and_logs():
    prompts = []
    auth = AuthState()
    auth.on_prompt(lambda: prompts.append(True))
    gw = make_gateway(lambda r: httpx.Response(401), auth)

    res = send(gw, "/private")

    assert res.ok is False
    assert res.status == 401
    assert auth.prompt_required is True
    assert prompts == [True]
    assert gw.status.label == "GET http://api.test/v2/private"
    assert gw.status.text == "401 (no body)"


def test_transport_error_becomes_status_zero():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    gw = make_gateway(handler)
    res = send(gw, "/x")

    assert res.ok is False
    assert res.status == 0
    assert "connection refused" in res.text
    assert gw.status.label == "GET http://api.test/v2/x"


def test_command_requests_carry_code_and_optional_value():
    seen = []

    def handler(request):
        seen.append((request.method, str(request.url)))
        return httpx.Response(200, json={"ok": True})

    gw = make_gateway(handler)
    dispatcher = CommandDispatcher(gw)

    async def _run():
        async with gw:
            await dispatcher.execute(["livingroom"], "on", None)
            await dispatcher.execute(["livingroom"], "on", "42")

    asyncio.run(_run())

    assert seen == [
        ("POST", "http://api.test/v2/livingroom?code=on"),
        ("POST", "http://api.test/v2/livingroom?code=on&value=42"),
    ]
