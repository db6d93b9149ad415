"""
CroweCode Intelligence - branded, provider-abstracted AI chat and code analysis.

This package provides:
- Provider registry with lock-guarded active selection
- Request translation (brand system prompt, analysis prompt)
- Vendor response normalization with best-effort analysis parsing
- FastAPI app factory with the chat, capability and status endpoints
"""

from .config import Settings, get_settings
from .errors import CroweCodeError, MalformedEnvelopeError, ProviderNotConfiguredError, VendorError
from .provider import Provider, ProviderRegistry, PROVIDER_SLOTS
from .server import create_app

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "CroweCodeError",
    "MalformedEnvelopeError",
    "ProviderNotConfiguredError",
    "VendorError",
    # Providers
    "Provider",
    "ProviderRegistry",
    "PROVIDER_SLOTS",
    # App factory
    "create_app",
]
