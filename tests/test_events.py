import pytest

from cf_pdf_purge.adapter import HOOK_UPDATE_ATTACHMENT_METADATA, HOOK_UPDATED_POST_META
from cf_pdf_purge.dispatcher import HookDispatcher
from cf_pdf_purge.events import ATTACHED_FILE_META_KEY, TRIGGER_ATTACHED_FILE, TRIGGER_METADATA
from cf_pdf_purge.models.purge import ChangeEvent, PurgeStatus

from conftest import PDF_URL


@pytest.mark.parametrize(
    "mime",
    ["image/png", "application/PDF", "application/pdf; charset=binary", "", "text/plain"],
)
def test_should_purge_ignores_non_pdf(service, mime):
    event = ChangeEvent(resource_id=42, mime_type=mime, resource_url=PDF_URL, trigger_name="t")
    assert service.events.should_purge(event) is None


def test_should_purge_pdf(service):
    event = ChangeEvent(resource_id=42, mime_type="application/pdf", trigger_name="t")
    assert service.events.should_purge(event) == PDF_URL


def test_should_purge_prefers_event_url(service):
    url = "https://cdn.example.org/report.pdf"
    event = ChangeEvent(resource_id=42, mime_type="application/pdf", resource_url=url,
                        trigger_name="t")
    assert service.events.should_purge(event) == url


def test_should_purge_unresolvable(service):
    event = ChangeEvent(resource_id=44, mime_type="application/pdf", trigger_name="t")
    assert service.events.should_purge(event) is None


def test_updated_post_meta_purges(service, cloudflare, mailer):
    service.events.on_updated_post_meta(1, 42, ATTACHED_FILE_META_KEY, "2024/05/report.pdf")

    assert cloudflare.payloads == [{"files": [PDF_URL]}]
    assert not mailer.sent


@pytest.mark.parametrize("meta_key", ["_wp_attachment_metadata", "_edit_lock", ""])
def test_updated_post_meta_other_keys(service, cloudflare, meta_key):
    service.events.on_updated_post_meta(1, 42, meta_key, "x")
    assert not cloudflare.requests


def test_updated_post_meta_not_attachment(service, media, cloudflare):
    media.add(50, mime_type="application/pdf", url=PDF_URL, post_type="page")
    service.events.on_updated_post_meta(1, 50, ATTACHED_FILE_META_KEY, "x")
    assert not cloudflare.requests


@pytest.mark.parametrize("post_id", [43, 44, 999])
def test_updated_post_meta_skips(service, cloudflare, mailer, post_id):
    service.events.on_updated_post_meta(1, post_id, ATTACHED_FILE_META_KEY, "x")
    assert not cloudflare.requests
    assert not mailer.sent


def test_updated_post_meta_failure_notifies(service, cloudflare, mailer):
    cloudflare.status_code = 500
    cloudflare.body = "upstream error"

    service.events.on_updated_post_meta(1, 42, ATTACHED_FILE_META_KEY, "x")

    assert len(mailer.sent) == 1
    assert f"Trigger: {TRIGGER_ATTACHED_FILE}" in mailer.sent[0][2]


def test_metadata_filter_passes_through(service, cloudflare):
    data = {"file": "2024/05/report.pdf", "filesize": 1234}

    result = service.events.on_attachment_metadata_updated(data, 42)

    assert result is data
    assert result == {"file": "2024/05/report.pdf", "filesize": 1234}
    assert len(cloudflare.requests) == 1


@pytest.mark.parametrize("data", [{"file": "a.png"}, False, None, []])
def test_metadata_filter_non_pdf_passes_through(service, cloudflare, data):
    assert service.events.on_attachment_metadata_updated(data, 43) is data
    assert not cloudflare.requests


def test_metadata_filter_failure_passes_through(service, cloudflare, mailer):
    cloudflare.status_code = 403
    cloudflare.body = {"success": False}
    data = {"file": "x"}

    assert service.events.on_attachment_metadata_updated(data, 42) is data
    assert f"Trigger: {TRIGGER_METADATA}" in mailer.sent[0][2]


class BrokenMedia:
    def get_post_type(self, post_id):
        return "attachment"

    def get_mime_type(self, post_id):
        raise RuntimeError("database gone")

    def get_attachment_url(self, post_id):
        raise RuntimeError("database gone")


def test_hooks_never_raise(service):
    service.events.media = BrokenMedia()
    data = {"file": "x"}

    service.events.on_updated_post_meta(1, 42, ATTACHED_FILE_META_KEY, "x")
    assert service.events.on_attachment_metadata_updated(data, 42) is data


def test_handle_outcomes(service):
    pdf = ChangeEvent(resource_id=42, mime_type="application/pdf", trigger_name="t")
    png = ChangeEvent(resource_id=43, mime_type="image/png", trigger_name="t")

    assert service.events.handle(pdf).status is PurgeStatus.SUCCESS
    assert service.events.handle(png).status is PurgeStatus.SKIPPED


def test_registered_hooks(service, cloudflare):
    dispatcher = service.register(HookDispatcher())
    data = {"file": "x"}

    dispatcher.do_action(HOOK_UPDATED_POST_META, 1, 42, ATTACHED_FILE_META_KEY, "x")
    assert dispatcher.apply_filters(HOOK_UPDATE_ATTACHMENT_METADATA, data, 42) is data

    assert len(cloudflare.requests) == 2
