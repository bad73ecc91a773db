"""Purge failure types."""
from __future__ import annotations

from cf_pdf_purge.models.purge import ErrorKind


class PurgeError(Exception):
    kind: ErrorKind

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ConfigurationError(PurgeError):
    """Zone ID or API token missing."""

    kind = ErrorKind.CONFIGURATION


class TransportError(PurgeError):
    """Couldn't reach the Cloudflare API (DNS, TLS, timeout, refused)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str):
        super().__init__(f"transport: {message}")


class CdnRejection(PurgeError):
    """Non-2xx status, or a body without a truthy `success`."""

    kind = ErrorKind.REJECTION

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP Status: {status_code}\nResponse Body:\n{body}")
        self.status_code = status_code
        self.body = body
