# streamfinder/handlers/inline_handlers.py

import asyncio

from telegram import InlineQueryResultArticle, InputTextMessageContent, Update
from telegram.constants import ParseMode
from telegram.ext import ContextTypes

from ..config import INLINE_RESULTS_PER_TYPE, MAX_INLINE_RESULTS, logger
from ..services.provider_cache import ProviderCache
from ..services.tmdb_client import TMDBClient
from ..services.tmdb_models import InlineResult, MediaType, SearchResult
from ..ui.formatting import build_inline_result, order_providers

# Movies are listed before TV shows in every reply.
MEDIA_ORDER = (MediaType.MOVIE, MediaType.TV)


async def _search_candidates(
    client: TMDBClient, query: str, media_type: MediaType
) -> list[SearchResult]:
    search_page = await client.search(query, media_type)
    return search_page.results[:INLINE_RESULTS_PER_TYPE]


async def _enrich(
    client: TMDBClient, cache: ProviderCache | None, result: SearchResult
) -> InlineResult:
    provider_set = await client.get_watch_providers(result.id, result.media_type)
    streaming = provider_set.streaming_for(client.region)
    catalog = (
        await cache.get(result.media_type)
        if cache is not None and streaming
        else None
    )
    providers = order_providers(streaming, catalog, client.region)
    return build_inline_result(result, providers)


async def build_inline_results(
    query: str, client: TMDBClient, cache: ProviderCache | None = None
) -> list[InlineResult]:
    """
    Searches movies and TV shows for the query and formats every hit with its
    subscription-streaming providers.

    The returned list keeps upstream order: all movies first, then all TV
    shows, regardless of which provider lookup finishes first.
    """
    grouped = await asyncio.gather(
        *(_search_candidates(client, query, media_type) for media_type in MEDIA_ORDER)
    )
    candidates = [result for group in grouped for result in group]
    if not candidates:
        return []

    formatted = await asyncio.gather(
        *(_enrich(client, cache, result) for result in candidates)
    )
    return list(formatted)[:MAX_INLINE_RESULTS]


def to_article(result: InlineResult) -> InlineQueryResultArticle:
    return InlineQueryResultArticle(
        id=result.id,
        title=result.title,
        description=result.description,
        thumbnail_url=result.thumbnail_url,
        input_message_content=InputTextMessageContent(
            message_text=result.message_text,
            parse_mode=ParseMode.MARKDOWN_V2,
        ),
    )


async def handle_inline_query(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """
    Answers an inline query with matching movies and TV shows.

    Nothing is sent when the query is blank or nothing matched. Failures are
    left to the global error handler, so the user simply gets no results.
    """
    inline_query = update.inline_query
    if inline_query is None:
        return

    query = inline_query.query.strip()
    if not query:
        return

    client: TMDBClient = context.bot_data["TMDB_CLIENT"]
    cache: ProviderCache | None = context.bot_data.get("PROVIDER_CACHE")

    user = update.effective_user
    logger.info(
        f"[INLINE] Query '{query}' from user {user.id if user else 'unknown'}."
    )

    results = await build_inline_results(query, client, cache)
    if not results:
        logger.info(f"[INLINE] No results for '{query}'.")
        return

    await inline_query.answer(
        [to_article(result) for result in results],
        cache_time=0,
    )
    logger.info(f"[INLINE] Answered '{query}' with {len(results)} results.")
