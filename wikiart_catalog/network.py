"""HTTP access to the origin site through Playwright's request context."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from playwright.async_api import (
    APIRequestContext,
    APIResponse,
    Error as PlaywrightError,
    async_playwright,
)

from .config import CatalogConfig
from .models import NotFound, Outcome, Success, TransientError

logger = logging.getLogger("wikiart_catalog")

MISSING_STATUSES = {404, 410}


def _failure(url: str, response: APIResponse) -> Outcome:
    detail = f"HTTP {response.status} for {url}"
    if response.status in MISSING_STATUSES:
        return NotFound(detail)
    return TransientError(detail)


class HttpClient:
    """Fetches pages and images; every call returns an outcome instead of raising."""

    def __init__(self, context: APIRequestContext, referer: Optional[str] = None) -> None:
        self._context = context
        self._referer = referer

    def _headers(self) -> Optional[Dict[str, str]]:
        if self._referer:
            return {"Referer": self._referer}
        return None

    async def fetch_text(self, url: str) -> Outcome:
        try:
            response = await self._context.get(url)
            try:
                if not response.ok:
                    return _failure(url, response)
                return Success(await response.text())
            finally:
                await response.dispose()
        except PlaywrightError as exc:
            logger.debug("Request for %s failed: %s", url, exc)
            return TransientError(f"{url}: {exc}")

    async def fetch_bytes(self, url: str) -> Outcome:
        try:
            response = await self._context.get(url, headers=self._headers())
            try:
                if not response.ok:
                    return _failure(url, response)
                return Success(await response.body())
            finally:
                await response.dispose()
        except PlaywrightError as exc:
            logger.debug("Download of %s failed: %s", url, exc)
            return TransientError(f"{url}: {exc}")

    async def probe(self, url: str) -> bool:
        """Existence check via HEAD; no body is transferred."""
        try:
            response = await self._context.head(url)
        except PlaywrightError as exc:
            logger.debug("Probe of %s failed: %s", url, exc)
            return False
        try:
            return response.ok
        finally:
            await response.dispose()


@asynccontextmanager
async def open_http_client(config: CatalogConfig) -> AsyncIterator[HttpClient]:
    """Start the Playwright driver and yield a client bound to a request context."""
    async with async_playwright() as playwright:
        context = await playwright.request.new_context(
            extra_http_headers={"User-Agent": config.user_agent},
            timeout=config.request_timeout * 1000,
        )
        try:
            yield HttpClient(context, referer=f"{config.origin}/")
        finally:
            await context.dispose()
