from __future__ import annotations

import asyncio
import json

import httpx

from cultivate.adapters.http_resilience import ResilientClient, build_retry
from cultivate.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy


def test_retries_are_off_by_default() -> None:
    assert build_retry(RetryPolicy()).total == 0


def test_client_retries_when_policy_allows() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        _ = request
        calls.append(1)
        return httpx.Response(503 if len(calls) == 1 else 200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.test/",
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )

    async def call() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.post("ping")

    response = asyncio.run(call())

    assert response.status_code == 200
    assert len(calls) == 2


def test_post_sends_json_body_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(name="test", base_url="https://api.test/v1/")

    async def call() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.post(
                "chat/completions", json={"model": "m"}, headers={"Authorization": "Bearer k"}
            )

    response = asyncio.run(call())

    assert response.json() == {"ok": True}
    (request,) = seen
    assert str(request.url) == "https://api.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer k"
    assert json.loads(request.read()) == {"model": "m"}
