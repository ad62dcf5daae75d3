# streamfinder/services/tmdb_client.py

from __future__ import annotations

import json
from typing import Any

import httpx

from ..config import (
    DEFAULT_LANGUAGE,
    DEFAULT_REGION,
    DEFAULT_TIMEOUT_SECONDS,
    TMDB_API_BASE_URL,
    logger,
)
from . import query_builder
from .tmdb_models import (
    MediaType,
    MovieDetails,
    SearchPage,
    TVDetails,
    WatchProvider,
    WatchProviderSet,
)


class TMDBError(Exception):
    """Base class for failures talking to the TMDB API."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class TMDBTransportError(TMDBError):
    """The request failed before a usable response body arrived."""


class TMDBParseError(TMDBError):
    """The response body was not valid JSON."""


class TMDBStatusError(TMDBError):
    """TMDB answered with a non-2xx status code."""

    def __init__(self, status_code: int, url: str):
        super().__init__(
            f"Request could not be made. Status code: {status_code}", url
        )
        self.status_code = status_code


async def fetch_json(
    url: str, token: str, client: httpx.AsyncClient | None = None
) -> Any:
    """
    Performs a single authenticated GET and returns the decoded JSON body.

    When no client is given a short-lived one is created for this request.
    Raises TMDBTransportError, TMDBStatusError or TMDBParseError.
    """
    logger.info(f"[TMDB] fetch url: {url}")
    headers = {
        "Authorization": f"Bearer {token}",
        "accept": "application/json",
    }

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS) as owned:
                response = await owned.get(url, headers=headers)
        else:
            response = await client.get(url, headers=headers)
    except httpx.RequestError as e:
        logger.error(f"[TMDB] Request error fetching {url}: {e}")
        raise TMDBTransportError(str(e) or type(e).__name__, url) from e

    if not 200 <= response.status_code <= 299:
        logger.warning(f"[TMDB] GET {url} -> {response.status_code}")
        raise TMDBStatusError(response.status_code, url)

    try:
        return json.loads(response.text)
    except json.JSONDecodeError as e:
        logger.error(f"[TMDB] Invalid JSON from {url}: {e}")
        raise TMDBParseError(f"Invalid JSON in response: {e}", url) from e


class TMDBClient:
    """Typed access to the handful of TMDB endpoints the bot needs."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = TMDB_API_BASE_URL,
        language: str = DEFAULT_LANGUAGE,
        region: str = DEFAULT_REGION,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.language = language
        self.region = region
        self._token = token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "TMDBClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, query: str | None = None) -> Any:
        url = query_builder.build_url(self.base_url, path, query)
        return await fetch_json(url, self._token, self._client)

    async def search(
        self, query: str, media_type: MediaType, page: int = 1
    ) -> SearchPage:
        media_type = MediaType(media_type)
        payload = await self._get(
            query_builder.search_path(media_type),
            query_builder.build_search_query(query, page, self.language),
        )
        search_page = SearchPage.from_dict(_as_dict(payload), media_type)
        logger.info(
            f"[TMDB] {media_type.value} search '{query}' page {search_page.page}/"
            f"{search_page.total_pages}: {len(search_page.results)} results"
        )
        return search_page

    async def get_details(
        self, media_id: int, media_type: MediaType
    ) -> MovieDetails | TVDetails:
        media_type = MediaType(media_type)
        payload = _as_dict(
            await self._get(query_builder.details_path(media_type, media_id))
        )
        if media_type is MediaType.MOVIE:
            return MovieDetails.from_dict(payload)
        return TVDetails.from_dict(payload)

    async def get_watch_providers(
        self, media_id: int, media_type: MediaType
    ) -> WatchProviderSet:
        payload = await self._get(
            query_builder.watch_providers_path(MediaType(media_type), media_id)
        )
        return WatchProviderSet.from_dict(_as_dict(payload))

    async def get_provider_catalog(self, media_type: MediaType) -> list[WatchProvider]:
        payload = _as_dict(
            await self._get(
                query_builder.provider_catalog_path(
                    MediaType(media_type), self.language, self.region
                )
            )
        )
        results = payload.get("results")
        if not isinstance(results, list):
            return []
        return [WatchProvider.from_dict(item) for item in results if isinstance(item, dict)]


def _as_dict(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}
