import asyncio

import httpx

from adapters.account_probe import fallback_reachable, probe_account_api


def test_probe_ok_on_success(make_settings):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    result = asyncio.run(probe_account_api(make_settings(), transport=httpx.MockTransport(handler)))

    assert result.ok is True
    assert str(seen[0].url) == "http://127.0.0.1:9465/users"
    assert "X-Ops-UserId" not in seen[0].headers


def test_probe_connection_refused_is_unreachable(make_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(probe_account_api(make_settings(), transport=httpx.MockTransport(handler)))

    assert result.ok is False
    assert "refused" in result.detail


def test_probe_timeout_is_unreachable(make_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert asyncio.run(fallback_reachable(make_settings(), transport=httpx.MockTransport(handler))) is False


def test_probe_error_status_is_unreachable(make_settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))

    assert asyncio.run(fallback_reachable(make_settings(), transport=transport)) is False


def test_fallback_reachable_true(make_settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))

    assert asyncio.run(fallback_reachable(make_settings(), transport=transport)) is True
