import asyncio

from conftest import ARTIST, MIRRORS, ORIGIN, FakeHttpClient

from wikiart_catalog.models import Candidate, NotFound, Success, TransientError
from wikiart_catalog.resolver import ImageResolver, clean_image_url, mirror_url

CANDIDATE = Candidate(
    path="/en/claude-monet/impression-sunrise",
    slug="impression-sunrise",
    title="Impression, sunrise",
    year="1872",
)
DETAIL_URL = f"{ORIGIN}{CANDIDATE.path}"


def resolve(client, config):
    return asyncio.run(ImageResolver(client, config).resolve(ARTIST.id, CANDIDATE))


def test_clean_image_url_strips_size_variant() -> None:
    assert clean_image_url("https://u.example/images/a/b.jpg!Large.jpg") == "https://u.example/images/a/b.jpg"
    assert clean_image_url("https://u.example/images/a/b.PNG!Blog.jpg") == "https://u.example/images/a/b.PNG"


def test_clean_image_url_appends_default_extension() -> None:
    assert clean_image_url("https://u.example/images/a/b") == "https://u.example/images/a/b.jpg"
    assert clean_image_url("https://u.example/images/a/b!Large") == "https://u.example/images/a/b.jpg"


def test_metadata_tag_wins_over_structured_data(config) -> None:
    page = (
        '<meta property="og:image" content="https://uploads1.wikiart.org/images/claude-monet/meta.jpg!Large.jpg">'
        '<script>{"image": "https://uploads2.wikiart.org/images/claude-monet/json.jpg"}</script>'
    )
    client = FakeHttpClient(pages={DETAIL_URL: page})

    outcome = resolve(client, config)

    assert isinstance(outcome, Success)
    assert outcome.value.original_url == "https://uploads1.wikiart.org/images/claude-monet/meta.jpg"
    assert outcome.value.thumbnail_url == (
        "https://uploads1.wikiart.org/images/claude-monet/meta.jpg!PinterestSmall.jpg"
    )
    assert outcome.value.strategy == "meta-tag"
    assert client.requested("HEAD") == []


def test_later_strategies_used_when_meta_tag_missing(config) -> None:
    page = '<div itemprop="image" content="https://uploads3.wikiart.org/images/claude-monet/x.jpg"></div>'
    client = FakeHttpClient(pages={DETAIL_URL: page})

    outcome = resolve(client, config)

    assert isinstance(outcome, Success)
    assert outcome.value.strategy == "itemprop"


def test_mirrors_probed_in_order_when_detail_page_fails(config) -> None:
    second = mirror_url(MIRRORS[1], ARTIST.id, CANDIDATE.slug)
    client = FakeHttpClient(
        pages={DETAIL_URL: TransientError("HTTP 503")},
        existing=[second],
    )

    outcome = resolve(client, config)

    assert isinstance(outcome, Success)
    assert outcome.value.original_url == f"https://{MIRRORS[1]}/images/claude-monet/impression-sunrise.jpg"
    assert outcome.value.strategy == f"mirror:{MIRRORS[1]}"
    assert client.requested("HEAD") == [
        mirror_url(MIRRORS[0], ARTIST.id, CANDIDATE.slug),
        second,
    ]


def test_mirrors_probed_when_page_has_no_reference(config) -> None:
    first = mirror_url(MIRRORS[0], ARTIST.id, CANDIDATE.slug)
    client = FakeHttpClient(pages={DETAIL_URL: "<html></html>"}, existing=[first])

    outcome = resolve(client, config)

    assert isinstance(outcome, Success)
    assert client.requested("HEAD") == [first]


def test_exhausted_chain_reports_not_found(config) -> None:
    client = FakeHttpClient()

    outcome = resolve(client, config)

    assert isinstance(outcome, NotFound)
    assert client.requested("GET") == [DETAIL_URL]
    assert len(client.requested("HEAD")) == len(MIRRORS)
