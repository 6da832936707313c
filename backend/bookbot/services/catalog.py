"""
Book catalog lookup service.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from bookbot.core import logger, settings
from bookbot.services.http_utils import ExternalServiceError, build_client, request_with_retry


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    NO_COVER = "no_cover"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class BookSearchResult:
    """Normalized outcome of a catalog search."""
    status: LookupStatus
    query: str
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == LookupStatus.FOUND


def _first_volume(data: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(data, dict):
        return None
    items = data.get("items") or []
    if not isinstance(items, list) or not items:
        return None
    first = items[0]
    return first if isinstance(first, dict) else None


class CatalogClient:
    """Searches the book catalog by free text and keeps the first hit."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.BOOK_SEARCH_URL
        self.api_key = settings.BOOK_SEARCH_API_KEY if api_key is None else api_key
        self._transport = transport

    def _params(self, query: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {"q": query, "maxResults": 1}
        if self.api_key:
            params["key"] = self.api_key
        return params

    async def search_book(self, query: str) -> BookSearchResult:
        """Look up a book and return the first result with its cover."""
        query = (query or "").strip()
        if not query:
            return BookSearchResult(status=LookupStatus.NOT_FOUND, query=query, reason="empty_query")

        try:
            async with build_client(self._transport) as client:
                response = await request_with_retry(
                    lambda: client.get(self.base_url, params=self._params(query)),
                    operation="Book search",
                )
            data = response.json()
        except ExternalServiceError as exc:
            logger.error(f"Book search for '{query}' failed: {exc}")
            return BookSearchResult(status=LookupStatus.TRANSPORT_ERROR, query=query, reason="request_failed")
        except ValueError as exc:
            logger.error(f"Book search for '{query}' returned invalid JSON: {exc}")
            return BookSearchResult(status=LookupStatus.TRANSPORT_ERROR, query=query, reason="invalid_response")

        volume = _first_volume(data)
        if volume is None:
            logger.info(f"No catalog results for '{query}'")
            return BookSearchResult(status=LookupStatus.NOT_FOUND, query=query, reason="no_results")

        info = volume.get("volumeInfo") or {}
        title = info.get("title") or query
        thumbnail = (info.get("imageLinks") or {}).get("thumbnail")
        if not thumbnail:
            logger.info(f"First catalog result for '{query}' has no cover image")
            return BookSearchResult(
                status=LookupStatus.NO_COVER,
                query=query,
                title=title,
                reason="missing_thumbnail",
            )

        return BookSearchResult(
            status=LookupStatus.FOUND,
            query=query,
            title=title,
            thumbnail_url=thumbnail,
        )
