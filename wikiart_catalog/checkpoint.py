"""Durable catalog document: loaded at startup, rewritten after every batch."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from .models import CatalogState

logger = logging.getLogger("wikiart_catalog")


class CheckpointWriter:
    """Reads and fully rewrites the catalog JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> CatalogState:
        """Return the persisted state, or an empty catalog when there is none."""
        if not self.path.exists():
            return CatalogState()
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            state = CatalogState.from_dict(payload)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Could not load existing data from %s, starting fresh: %s", self.path, exc)
            return CatalogState()
        logger.info("Loaded existing data with %d artists", len(state.artists))
        return state

    def write(self, state: CatalogState) -> None:
        """Replace the document atomically with the full current state."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(data)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Checkpoint written to %s (%d artworks)", self.path, state.artwork_count)
