import json

import httpx
import pytest

from cf_pdf_purge.adapter import PurgeOnReplace
from cf_pdf_purge.cms import StaticMediaLibrary, StaticSite
from cf_pdf_purge.stores import MemorySettingsStore, MemoryThrottleStore

ADMIN_EMAIL = "admin@example.org"
PDF_URL = "https://example.org/wp-content/uploads/2024/05/report.pdf"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.current = now

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordingMailer:
    def __init__(self, result: bool = True, error: Exception | None = None):
        self.sent = []
        self.result = result
        self.error = error

    def send(self, to: str, subject: str, body: str) -> bool:
        self.sent.append((to, subject, body))
        if self.error is not None:
            raise self.error
        return self.result


class CloudflareStub:
    """Handler for httpx.MockTransport that records requests."""

    def __init__(self, status_code: int = 200, body=None, error: Exception | None = None):
        self.status_code = status_code
        self.body = {"success": True, "errors": [], "messages": [], "result": {"id": "x"}} \
            if body is None else body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    @property
    def payloads(self) -> list:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def cloudflare():
    return CloudflareStub()


@pytest.fixture
def site():
    return StaticSite(name="Docs Site", url="https://example.org", admin_email=ADMIN_EMAIL)


@pytest.fixture
def media():
    library = StaticMediaLibrary()
    library.add(42, mime_type="application/pdf", url=PDF_URL)
    library.add(43, mime_type="image/png", url="https://example.org/wp-content/uploads/a.png")
    library.add(44, mime_type="application/pdf", url=None)
    return library


@pytest.fixture
def settings_store():
    return MemorySettingsStore(
        {
            "zone_id": "023e105f4ecef8ad9ca31a8372d0c353",
            "api_token": "secret-token",
            "notify_email": "ops@example.org",
            "enable_email": 1,
            "email_throttle_minutes": 15,
        },
        admin_email=ADMIN_EMAIL,
    )


@pytest.fixture
def throttle_store():
    return MemoryThrottleStore()


@pytest.fixture
def service(site, media, settings_store, throttle_store, mailer, cloudflare, clock):
    return PurgeOnReplace.create(
        site=site,
        media=media,
        settings=settings_store,
        throttle=throttle_store,
        mailer=mailer,
        client=cloudflare.client(),
        clock=clock,
    )
