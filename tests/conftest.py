from __future__ import annotations

import os
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pytest
from PIL import Image

from wikiart_catalog.config import Artist, CatalogConfig
from wikiart_catalog.models import (
    ArtworkRecord,
    Candidate,
    NotFound,
    Outcome,
    Success,
    TransientError,
)

ARTIST = Artist("claude-monet", "Claude Monet")
ORIGIN = "https://www.wikiart.org"
MIRRORS = ("mirror-a.example.org", "mirror-b.example.org")

Response = Union[str, bytes, NotFound, TransientError]


def make_image_bytes(width: int = 64, height: int = 48, fmt: str = "JPEG") -> bytes:
    image = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def detail_page(image_url: str) -> str:
    return (
        "<html><head>"
        f'<meta property="og:image" content="{image_url}">'
        "</head><body></body></html>"
    )


def image_url(slug: str, artist_id: str = ARTIST.id) -> str:
    return f"https://uploads4.wikiart.org/images/{artist_id}/{slug}.jpg"


def complete_record(title: str, year: str = "1872", artist_id: str = ARTIST.id) -> ArtworkRecord:
    filename = f"{year} - 64x48 - {title}.jpg"
    return ArtworkRecord(
        title=title,
        year=year,
        dimensions="64x48",
        storage_path=f"quilts/{artist_id}/{filename}",
        thumbnail_path=f"quilts/{artist_id}/thumbnails/{filename}",
    )


class FakeHttpClient:
    """Serves canned responses by URL and records every call."""

    def __init__(
        self,
        pages: Optional[Dict[str, Response]] = None,
        files: Optional[Dict[str, Response]] = None,
        existing: Iterable[str] = (),
    ) -> None:
        self.pages: Dict[str, Response] = dict(pages or {})
        self.files: Dict[str, Response] = dict(files or {})
        self.existing = set(existing)
        self.calls: List[Tuple[str, str]] = []

    @staticmethod
    def _answer(table: Dict[str, Response], url: str) -> Outcome:
        value = table.get(url)
        if value is None:
            return NotFound(f"HTTP 404 for {url}")
        if isinstance(value, (str, bytes)):
            return Success(value)
        return value

    async def fetch_text(self, url: str) -> Outcome:
        self.calls.append(("GET", url))
        return self._answer(self.pages, url)

    async def fetch_bytes(self, url: str) -> Outcome:
        self.calls.append(("GET", url))
        return self._answer(self.files, url)

    async def probe(self, url: str) -> bool:
        self.calls.append(("HEAD", url))
        return url in self.existing

    def requested(self, method: str = "GET") -> List[str]:
        return [url for verb, url in self.calls if verb == method]


class FakeBlobStore:
    """In-memory blob store; keys containing a failing marker are rejected."""

    def __init__(self, prefix: str = "quilts", failing: Iterable[str] = ()) -> None:
        self.prefix = prefix
        self.failing = tuple(failing)
        self.objects: Dict[str, Tuple[bytes, str]] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> Outcome:
        if any(marker in key for marker in self.failing):
            return TransientError(f"upload of {key} failed")
        self.objects[key] = (data, content_type)
        return Success(key)


def serve_artwork(
    client: FakeHttpClient,
    candidate: Candidate,
    data: Optional[bytes] = None,
    artist_id: str = ARTIST.id,
) -> str:
    """Register a detail page, original and thumbnail for a candidate."""
    url = image_url(candidate.slug, artist_id)
    client.pages[f"{ORIGIN}{candidate.path}"] = detail_page(url + "!Large.jpg")
    client.files[url] = data if data is not None else make_image_bytes()
    client.files[url + "!PinterestSmall.jpg"] = make_image_bytes(16, 12)
    return url


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def config(tmp_path: Path) -> CatalogConfig:
    return CatalogConfig(
        catalog_path=tmp_path / "artists.json",
        artists=(ARTIST,),
        batch_delay=0.0,
        origin=ORIGIN,
        mirror_hosts=MIRRORS,
    )


@pytest.fixture
def client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture
def storage() -> FakeBlobStore:
    return FakeBlobStore()
