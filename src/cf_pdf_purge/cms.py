"""Collaborators provided by the content platform."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Protocol

from cf_pdf_purge.utils import uris


class Site(Protocol):
    name: str
    admin_email: str

    def admin_url(self, path: str, **params: object) -> str:
        ...


class MediaLibrary(Protocol):
    def get_post_type(self, post_id: int) -> str | None:
        ...

    def get_mime_type(self, post_id: int) -> str | None:
        ...

    def get_attachment_url(self, post_id: int) -> str | None:
        ...


class Clock(Protocol):
    def now(self) -> float:
        ...


class SystemClock:
    def now(self) -> float:
        return time.time()


@dataclass
class StaticSite:
    name: str
    url: str
    admin_email: str = ""

    def admin_url(self, path: str, **params: object) -> str:
        return uris.with_query(uris.join(self.url, "wp-admin", path), **params)


@dataclass
class Attachment:
    mime_type: str
    url: str | None = None
    post_type: str = "attachment"


@dataclass
class StaticMediaLibrary:
    """Media library backed by a dict of post id to attachment."""

    attachments: dict[int, Attachment] = field(default_factory=dict)

    def add(self, post_id: int, mime_type: str, url: str | None = None,
            post_type: str = "attachment") -> Attachment:
        attachment = Attachment(mime_type=mime_type, url=url, post_type=post_type)
        self.attachments[post_id] = attachment
        return attachment

    def get_post_type(self, post_id: int) -> str | None:
        attachment = self.attachments.get(post_id)
        return attachment.post_type if attachment else None

    def get_mime_type(self, post_id: int) -> str | None:
        attachment = self.attachments.get(post_id)
        return attachment.mime_type if attachment else None

    def get_attachment_url(self, post_id: int) -> str | None:
        attachment = self.attachments.get(post_id)
        return attachment.url if attachment else None
