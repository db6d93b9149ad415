"""Shared fixtures: settings, registries and a fake upstream vendor."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from crowecode_ai.config import Settings
from crowecode_ai.provider import Provider, ProviderRegistry
from crowecode_ai.server import create_app


def make_settings(**overrides: Any) -> Settings:
    """Settings with every credential blank unless overridden."""
    values: dict[str, Any] = {
        "xai_api_key": "",
        "anthropic_api_key": "",
        "openai_api_key": "",
        "active_provider": "primary",
        "log_path": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def envelope(content: Optional[str]) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeVendor:
    """Records outbound requests and answers with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = envelope("Hello from CroweCode")
        self.error: Optional[Exception] = None

    def reply(self, content: Optional[str]) -> None:
        self.body = envelope(content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture()
def primary_provider() -> Provider:
    return Provider(
        key="primary",
        name="CroweCode Neural Engine",
        endpoint="https://vendor.test/v1/chat/completions",
        model="vendor-model-1",
        api_key="sk-test-primary",
    )


@pytest.fixture()
def registry(primary_provider: Provider) -> ProviderRegistry:
    reg = ProviderRegistry(active_key="primary")
    reg.register("primary", primary_provider)
    return reg


@pytest.fixture()
def vendor() -> FakeVendor:
    return FakeVendor()


@pytest.fixture()
def app_factory(vendor: FakeVendor) -> Callable[..., TestClient]:
    def _make(registry: Optional[ProviderRegistry] = None, **settings: Any) -> TestClient:
        app = create_app(
            settings=make_settings(**settings),
            registry=registry,
            transport=httpx.MockTransport(vendor.handler),
        )
        return TestClient(app)

    return _make


@pytest.fixture()
def client(app_factory, registry: ProviderRegistry) -> TestClient:
    return app_factory(registry=registry)
