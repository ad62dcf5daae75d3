# streamfinder/services/query_builder.py

from urllib.parse import urlencode

from ..config import DEFAULT_LANGUAGE, DEFAULT_REGION, POSTER_BASE_URL
from .tmdb_models import MediaType


def build_search_query(
    query: str, page: int = 1, language: str = DEFAULT_LANGUAGE
) -> str:
    """
    Builds the query string for /search/{movie|tv}.

    Adult titles are always excluded. Parameter order is stable so that
    identical searches produce identical URLs.
    """
    if page < 1:
        raise ValueError(f"Search page must be 1 or greater, got {page}.")
    return urlencode(
        {
            "query": query,
            "include_adult": "false",
            "language": language,
            "page": page,
        }
    )


def search_path(media_type: MediaType) -> str:
    return f"/search/{MediaType(media_type).value}"


def details_path(media_type: MediaType, media_id: int) -> str:
    return f"/{MediaType(media_type).value}/{int(media_id)}"


def watch_providers_path(media_type: MediaType, media_id: int) -> str:
    return f"{details_path(media_type, media_id)}/watch/providers"


def provider_catalog_path(
    media_type: MediaType,
    language: str = DEFAULT_LANGUAGE,
    region: str = DEFAULT_REGION,
) -> str:
    """Path for the catalog-wide provider list of one media type."""
    query = urlencode({"language": language, "watch_region": region})
    return f"/watch/providers/{MediaType(media_type).value}?{query}"


def build_url(base_url: str, path: str, query: str | None = None) -> str:
    """Joins a base URL, a resource path and an optional query string."""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if query:
        joiner = "&" if "?" in url else "?"
        url = f"{url}{joiner}{query}"
    return url


def poster_url(poster_path: str | None, base_url: str = POSTER_BASE_URL) -> str | None:
    """Returns the full poster URL, or None when the title has no poster."""
    if not poster_path:
        return None
    return f"{base_url.rstrip('/')}/{poster_path.lstrip('/')}"
