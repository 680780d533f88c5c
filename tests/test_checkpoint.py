import json
import logging
from dataclasses import replace

import pytest
from conftest import complete_record

from wikiart_catalog.checkpoint import CheckpointWriter
from wikiart_catalog.models import ArtistCatalog, CatalogState


def test_missing_file_starts_empty(tmp_path) -> None:
    state = CheckpointWriter(tmp_path / "artists.json").load()

    assert state == CatalogState()


def test_written_document_layout(tmp_path) -> None:
    path = tmp_path / "artists.json"
    done = complete_record("Poplars")
    pending = replace(complete_record("Haystacks"), thumbnail_path=None)
    state = CatalogState(
        artists=[
            ArtistCatalog("claude-monet", "Claude Monet", {"Poplars": done, "Haystacks": pending}),
            ArtistCatalog("paul-cezanne", "Paul Cézanne"),
        ]
    )

    CheckpointWriter(path).write(state)
    payload = json.loads(path.read_text(encoding="utf-8"))

    assert [artist["id"] for artist in payload["artists"]] == ["claude-monet", "paul-cezanne"]
    assert payload["artists"][1] == {"id": "paul-cezanne", "name": "Paul Cézanne", "artworks": []}
    artworks = payload["artists"][0]["artworks"]
    assert artworks[0] == {
        "title": "Poplars",
        "year": "1872",
        "dimensions": "64x48",
        "path": done.storage_path,
        "thumbnailPath": done.thumbnail_path,
    }
    assert "thumbnailPath" not in artworks[1]
    assert CheckpointWriter(path).load() == state


def test_write_replaces_previous_document(tmp_path) -> None:
    path = tmp_path / "artists.json"
    writer = CheckpointWriter(path)
    writer.write(CatalogState([ArtistCatalog("claude-monet", "Claude Monet", {"Poplars": complete_record("Poplars")})]))
    writer.write(CatalogState([ArtistCatalog("claude-monet", "Claude Monet")]))

    assert writer.load().artists[0].artworks == {}
    assert [p.name for p in tmp_path.iterdir()] == ["artists.json"]


def test_loaded_records_are_keyed_by_normalized_title(tmp_path) -> None:
    path = tmp_path / "artists.json"
    path.write_text(
        json.dumps(
            {
                "artists": [
                    {
                        "id": "claude-monet",
                        "name": "Claude Monet",
                        "artworks": [
                            {
                                "title": "Women’s Bath",
                                "year": "1870",
                                "dimensions": "10x10",
                                "path": "quilts/claude-monet/1870 - 10x10 - Women’s Bath.jpg",
                            }
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    state = CheckpointWriter(path).load()

    record = state.get("claude-monet").artworks["Women's Bath"]
    assert record.title == "Women’s Bath"
    assert record.thumbnail_path is None


def test_unreadable_document_starts_fresh(tmp_path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "artists.json"
    path.write_text("{not json", encoding="utf-8")
    caplog.set_level(logging.WARNING)

    assert CheckpointWriter(path).load() == CatalogState()
    assert any("starting fresh" in record.message for record in caplog.records)
