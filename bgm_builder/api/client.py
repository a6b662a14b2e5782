"""
Async client for the two public BGM feeds: the track catalog and the list of
tracks that have a downloadable audio file.
"""

import asyncio
import json
import logging
import time
from typing import Any, Optional

import aiohttp
from pydantic import TypeAdapter, ValidationError

from bgm_builder.exceptions import FeedError
from bgm_builder.models.bgm import TrackKey, TrackMetadata
from bgm_builder.models.config import DEFAULT_BUILD_URL, DEFAULT_CATALOG_URL

log = logging.getLogger(__name__)

_CATALOG_ADAPTER = TypeAdapter(list[TrackMetadata])


class FeedClient:
    """
    Read-only async client for the catalog and build feeds.

    There is no retry or caching: any failure is reported as a FeedError.
    """

    def __init__(
        self,
        catalog_url: str = DEFAULT_CATALOG_URL,
        build_url: str = DEFAULT_BUILD_URL,
        timeout: float = 60.0,
    ):
        """
        Initializes the feed client.

        Args:
            catalog_url: URL of the JSON array of track metadata records.
            build_url: URL of the JSON object listing downloadable track keys.
            timeout: Total timeout in seconds for each request.
        """
        self.catalog_url = catalog_url
        self.build_url = build_url
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept-Encoding": "gzip, deflate"},
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=15),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "FeedClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch_json(self, url: str) -> Any:
        """
        Fetches a URL and decodes its body as JSON.

        The Content-Type header is ignored because static hosts often serve
        JSON as text/plain.
        """
        await self._initialize_session()
        start_time = time.monotonic()
        try:
            async with self._session.get(url) as r:
                r.raise_for_status()
                payload = await r.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise FeedError(f"Feed {url} answered with HTTP {e.status}.") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedError(f"Could not fetch feed {url}: {e!r}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeedError(f"Feed {url} did not return valid JSON: {e}") from e

        duration_ms = (time.monotonic() - start_time) * 1000
        log.debug(f"Fetched {url} in {duration_ms:.0f} ms")
        return payload

    async def fetch_downloadable_ids(self) -> frozenset[TrackKey]:
        """Returns the set of track keys that have a deployed audio file."""
        payload = await self.fetch_json(self.build_url)
        done_ids = payload.get("doneIds") if isinstance(payload, dict) else None
        if not isinstance(done_ids, list):
            raise FeedError(f"Feed {self.build_url} has no 'doneIds' list.")
        log.debug(f"{len(done_ids)} tracks are downloadable.")
        return frozenset(str(i) for i in done_ids)

    async def fetch_track_catalog(self) -> list[TrackMetadata]:
        """Returns the catalog records in feed order."""
        payload = await self.fetch_json(self.catalog_url)
        try:
            catalog = _CATALOG_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise FeedError(
                f"Feed {self.catalog_url} does not match the catalog format:\n{e}"
            ) from e
        log.debug(f"Catalog lists {len(catalog)} tracks.")
        return catalog
