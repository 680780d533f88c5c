"""Exceptions raised by the catalog pipeline."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(CatalogError):
    """Required settings are missing or invalid; raised before any work starts."""


class DiscoveryFailure(CatalogError):
    """An artist's listing page could not be fetched."""

    def __init__(self, artist_id: str, detail: str) -> None:
        super().__init__(f"Failed to fetch listing for {artist_id}: {detail}")
        self.artist_id = artist_id
        self.detail = detail
