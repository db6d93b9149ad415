"""Vendor client against a mocked transport."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from crowecode_ai.client import VendorClient
from crowecode_ai.errors import MalformedEnvelopeError, VendorError
from crowecode_ai.provider import Provider

from .conftest import FakeVendor, envelope


def _complete(vendor: FakeVendor, provider: Provider, payload: dict) -> dict:
    async def run() -> dict:
        client = VendorClient(timeout=5.0, transport=httpx.MockTransport(vendor.handler))
        try:
            return await client.complete(provider, payload)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_posts_payload_with_bearer_token(vendor: FakeVendor, primary_provider: Provider) -> None:
    payload = {"model": "vendor-model-1", "messages": [], "temperature": 0.7, "max_tokens": 2048}

    data = _complete(vendor, primary_provider, payload)

    assert data == envelope("Hello from CroweCode")
    request = vendor.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://vendor.test/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test-primary"
    assert request.headers["content-type"] == "application/json"
    assert vendor.last_payload == payload


def test_non_2xx_raises_vendor_error(vendor: FakeVendor, primary_provider: Provider) -> None:
    vendor.status_code = 429
    vendor.body = {"error": {"message": "rate limited"}}

    with pytest.raises(VendorError) as exc_info:
        _complete(vendor, primary_provider, {"messages": []})

    assert exc_info.value.status_code == 429


def test_transport_failure_raises_vendor_error(vendor: FakeVendor, primary_provider: Provider) -> None:
    vendor.error = httpx.ConnectError("connection refused")

    with pytest.raises(VendorError) as exc_info:
        _complete(vendor, primary_provider, {"messages": []})

    assert exc_info.value.status_code is None


def test_non_json_body_is_malformed(vendor: FakeVendor, primary_provider: Provider) -> None:
    vendor.body = b"<html>gateway</html>"

    with pytest.raises(MalformedEnvelopeError):
        _complete(vendor, primary_provider, {"messages": []})
