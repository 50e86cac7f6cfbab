"""Client startup: configuration validation, single-shot mode and the forever loop."""

import asyncio

import httpx
import pytest

from version_watch.client import entrypoint
from version_watch.client.checker import CheckResult, PollOutcome
from version_watch.core.compat import parse_range
from version_watch.core.config import ClientSettings
from version_watch.main import app


@pytest.fixture
def client_env(monkeypatch):
    for name in ("SERVER_URL", "SUPPORTED_VERSIONS", "POLL_INTERVAL_SECONDS", "FETCH_TIMEOUT_SECONDS", "DOCKER"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_invalid_range_is_fatal(client_env, caplog):
    client_env.setenv("SUPPORTED_VERSIONS", ">=0.1")
    assert entrypoint.main([]) == entrypoint.EXIT_CONFIG
    assert any(">=0.1" in r.getMessage() for r in caplog.records)


def test_invalid_url_is_fatal(client_env):
    client_env.setenv("SERVER_URL", "not a url")
    assert entrypoint.main(["--once"]) == entrypoint.EXIT_CONFIG


@pytest.mark.parametrize(
    "outcome,code",
    [
        (PollOutcome.compatible, entrypoint.EXIT_OK),
        (PollOutcome.incompatible, entrypoint.EXIT_INCOMPATIBLE),
        (PollOutcome.fetch_error, entrypoint.EXIT_INCOMPATIBLE),
        (PollOutcome.parse_error, entrypoint.EXIT_INCOMPATIBLE),
    ],
)
def test_once_exit_codes(client_env, outcome, code):
    seen = {}

    async def fake_run_once(settings, constraint):
        seen["settings"] = settings
        seen["constraint"] = constraint
        return CheckResult(outcome, "scripted")

    client_env.setattr(entrypoint, "run_once", fake_run_once)
    client_env.setenv("SUPPORTED_VERSIONS", ">=0.1.0 <0.2.0")
    assert entrypoint.main(["--once"]) == code
    assert seen["constraint"].expression == ">=0.1.0 <0.2.0"


@pytest.mark.asyncio
async def test_run_once_against_server_app(served_version):
    served_version("v0.1.1-dev")
    settings = ClientSettings(server_url="http://testserver/info")
    result = await entrypoint.run_once(settings, parse_range(">=0.1.0"), transport=httpx.ASGITransport(app=app))
    assert result.outcome is PollOutcome.compatible
    assert result.raw_version == "v0.1.1-dev"


@pytest.mark.asyncio
async def test_run_once_unreachable_server():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    settings = ClientSettings(server_url="http://127.0.0.1:9/info")
    result = await entrypoint.run_once(settings, parse_range(">=0.1.0"), transport=httpx.MockTransport(handler))
    assert result.outcome is PollOutcome.fetch_error


@pytest.mark.asyncio
@pytest.mark.timeout(10)
async def test_run_forever_keeps_polling():
    requests = []

    def handler(request):
        requests.append(request)
        if len(requests) % 2:
            return httpx.Response(200, json={"version": "garbage"})
        return httpx.Response(200, json={"version": "v0.1.1"})

    settings = ClientSettings(server_url="http://server.test/info", poll_interval=0.01)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(
            entrypoint.run_forever(settings, parse_range(">=0.1.0"), transport=httpx.MockTransport(handler)),
            timeout=0.3,
        )
    assert len(requests) >= 3
