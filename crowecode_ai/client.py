"""
Vendor client - one chat-completion POST per call.

Any vendor that accepts {model, messages, temperature, max_tokens} with a
bearer token and answers with {choices: [{message: {content}}]} works here.
"""
import json
import time
import logging
from typing import Optional

import httpx

from .errors import MalformedEnvelopeError, VendorError
from .provider import Provider

logger = logging.getLogger(__name__)


class VendorClient:
    """HTTP client for upstream chat-completion vendors."""

    def __init__(self, timeout: float = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info("Vendor client initialized (timeout=%.0fs)", timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def complete(self, provider: Provider, payload: dict) -> dict:
        """
        Send `payload` to the provider endpoint and return the decoded envelope.

        Raises:
            VendorError: non-2xx status or transport failure
            MalformedEnvelopeError: 2xx reply whose body isn't JSON
        """
        start_time = time.time()

        logger.debug(
            "Vendor request: provider=%s, messages=%d, temp=%.2f",
            provider.key, len(payload.get("messages", [])), payload.get("temperature", 0.0)
        )

        try:
            response = await self._client.post(
                provider.endpoint,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {provider.api_key}",
                },
            )
        except httpx.HTTPError as e:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error("Provider %s transport error after %dms: %s", provider.key, latency_ms, e)
            raise VendorError(f"Transport error: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            logger.error(
                "Provider %s error: HTTP %d after %dms: %s",
                provider.key, response.status_code, latency_ms, response.text[:200]
            )
            raise VendorError(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            logger.error("Provider %s returned a non-JSON body: %s", provider.key, response.text[:200])
            raise MalformedEnvelopeError(f"Vendor body is not JSON: {e}") from e

        logger.debug("Vendor response: provider=%s, latency=%dms", provider.key, latency_ms)
        return data
