"""
Exception types raised inside the CroweCode Intelligence service.

None of these messages are shown to callers. The server maps each type to a
fixed branded message; the details here are for the logs only.
"""
from typing import Optional


class CroweCodeError(Exception):
    """Base class for service errors."""


class ProviderNotConfiguredError(CroweCodeError):
    """No active provider resolves in the registry."""


class VendorError(CroweCodeError):
    """The upstream vendor call failed.

    status_code is the upstream HTTP status, or None when the request never
    got a response (connection refused, timeout, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedEnvelopeError(CroweCodeError):
    """The vendor reply is missing choices[0].message.content."""
