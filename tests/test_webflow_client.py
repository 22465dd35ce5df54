"""Tests for the Webflow collection items client."""

from __future__ import annotations

import json
from typing import cast

import httpx
import pytest

from app.errors import WebflowError
from app.services.webflow import WebflowClient

BASE_URL = "https://webflow.example.com"


def test_client_requires_token(make_settings) -> None:
    with pytest.raises(ValueError, match="Webflow API token is required"):
        WebflowClient(make_settings(WF_API_KEY=None), cast(httpx.AsyncClient, object()))


@pytest.mark.anyio("asyncio")
async def test_create_item_posts_fields_to_collection(make_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"_id": "item-1", "name": "Arrival", "slug": "arrival"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(), http_client)
        item = await client.create_item("collection-9", {"name": "Arrival", "_draft": False})

    assert item.id == "item-1"
    assert item.name == "Arrival"
    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/collections/collection-9/items"
    assert request.headers["Authorization"] == "Bearer webflow-token"
    assert request.headers["accept-version"] == "1.0.0"
    assert json.loads(request.content) == {"fields": {"name": "Arrival", "_draft": False}}


@pytest.mark.anyio("asyncio")
async def test_validation_errors_raise_webflow_error(make_settings) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"msg": "Validation Failure", "code": 400, "problems": ["Field 'slug': required"]},
        )

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(), http_client)
        with pytest.raises(WebflowError, match="Validation Failure") as excinfo:
            await client.create_item("collection-9", {"name": "Broken"})

    assert excinfo.value.status_code == 400


@pytest.mark.anyio("asyncio")
async def test_rate_limit_responses_are_not_retried_by_default(make_settings) -> None:
    calls = 0

    def handler(_: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(429, json={"msg": "Rate limit hit"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(), http_client)
        with pytest.raises(WebflowError) as excinfo:
            await client.create_item("collection-9", {"name": "Busy"})

    assert excinfo.value.status_code == 429
    assert calls == 1


@pytest.mark.anyio("asyncio")
async def test_server_errors_on_create_are_not_retried(make_settings, monkeypatch) -> None:
    calls = 0

    monkeypatch.setattr("app.services.http.backoff_delay", lambda attempt: 0)

    def handler(_: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(502, text="bad gateway")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(HTTP_MAX_RETRIES=3), http_client)
        with pytest.raises(WebflowError) as excinfo:
            await client.create_item("collection-9", {"name": "Once"})

    assert excinfo.value.status_code == 502
    assert calls == 1


@pytest.mark.anyio("asyncio")
async def test_transport_errors_on_create_are_not_retried(make_settings, monkeypatch) -> None:
    calls = 0

    monkeypatch.setattr("app.services.http.backoff_delay", lambda attempt: 0)

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ReadTimeout("timed out", request=request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(HTTP_MAX_RETRIES=3), http_client)
        with pytest.raises(WebflowError, match="timed out"):
            await client.create_item("collection-9", {"name": "Once"})

    assert calls == 1


@pytest.mark.anyio("asyncio")
async def test_rate_limited_create_is_retried_when_enabled(make_settings, monkeypatch) -> None:
    calls = 0

    monkeypatch.setattr("app.services.http.backoff_delay", lambda attempt: 0)

    def handler(_: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(429, json={"msg": "Rate limit hit"})
        return httpx.Response(200, json={"_id": "item-2", "name": "Later"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as http_client:
        client = WebflowClient(make_settings(HTTP_MAX_RETRIES=3), http_client)
        item = await client.create_item("collection-9", {"name": "Later"})

    assert item.id == "item-2"
    assert calls == 2
