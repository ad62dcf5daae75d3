from unittest.mock import AsyncMock

import pytest
from telegram import InlineQuery, InlineQueryResultArticle
from telegram.constants import ParseMode

from streamfinder.handlers.inline_handlers import (
    build_inline_results,
    handle_inline_query,
)
from streamfinder.services.provider_cache import ProviderCache
from streamfinder.services.tmdb_models import MediaType, WatchProviderSet
from tmdb_fakes import (
    FakeTMDBClient,
    make_page,
    movie_payload,
    providers_payload,
    tv_payload,
)


def _client_with_results(movie_count: int = 2, tv_count: int = 2, **kwargs) -> FakeTMDBClient:
    movies = [movie_payload(100 + i, f"Movie {i}", "2001-01-01") for i in range(movie_count)]
    shows = [tv_payload(200 + i, f"Show {i}", "2010-05-05") for i in range(tv_count)]
    return FakeTMDBClient(
        searches={
            MediaType.MOVIE: [make_page(MediaType.MOVIE, movies)],
            MediaType.TV: [make_page(MediaType.TV, shows)],
        },
        **kwargs,
    )


@pytest.mark.asyncio
async def test_no_results_sends_no_answer(mocker, make_inline_update, context):
    answer_mock = mocker.patch.object(InlineQuery, "answer", AsyncMock())
    context.bot_data["TMDB_CLIENT"] = FakeTMDBClient()

    await handle_inline_query(make_inline_update("zzzzzz"), context)

    answer_mock.assert_not_awaited()


@pytest.mark.asyncio
async def test_blank_query_is_ignored(mocker, make_inline_update, context):
    answer_mock = mocker.patch.object(InlineQuery, "answer", AsyncMock())
    client = _client_with_results()
    context.bot_data["TMDB_CLIENT"] = client

    await handle_inline_query(make_inline_update("   "), context)

    answer_mock.assert_not_awaited()
    assert client.search_calls == []


@pytest.mark.asyncio
async def test_answers_with_articles_and_no_caching(mocker, make_inline_update, context):
    answer_mock = mocker.patch.object(InlineQuery, "answer", AsyncMock())
    client = _client_with_results(
        movie_count=1,
        tv_count=0,
        providers={
            (MediaType.MOVIE, 100): WatchProviderSet.from_dict(
                providers_payload(100, flatrate=["Netflix"])
            )
        },
    )
    context.bot_data["TMDB_CLIENT"] = client
    context.bot_data["PROVIDER_CACHE"] = ProviderCache(client.get_provider_catalog)

    await handle_inline_query(make_inline_update("movie"), context)

    answer_mock.assert_awaited_once()
    args, kwargs = answer_mock.call_args
    assert kwargs["cache_time"] == 0
    articles = args[0]
    assert len(articles) == 1
    article = articles[0]
    assert isinstance(article, InlineQueryResultArticle)
    assert article.id == "movie-100"
    assert article.title == "Movie 0 (2001)"
    assert article.input_message_content.parse_mode == ParseMode.MARKDOWN_V2
    assert article.input_message_content.message_text.endswith(
        "Streaming on:\nNetflix\n"
    )
    client.get_provider_catalog.assert_awaited_once_with(MediaType.MOVIE)


@pytest.mark.asyncio
async def test_movies_precede_tv_regardless_of_completion_order():
    # Earlier candidates finish last, so a completion-ordered merge would reverse them.
    delays = {100: 0.04, 101: 0.03, 200: 0.02, 201: 0.01}
    client = _client_with_results(provider_delays=delays)

    results = await build_inline_results("query", client)

    assert [r.id for r in results] == ["movie-100", "movie-101", "tv-200", "tv-201"]


@pytest.mark.asyncio
async def test_each_media_type_is_capped_at_ten():
    client = _client_with_results(movie_count=15, tv_count=12)

    results = await build_inline_results("query", client)

    assert len(results) == 20
    assert [r.id for r in results[:10]] == [f"movie-{100 + i}" for i in range(10)]
    assert [r.id for r in results[10:]] == [f"tv-{200 + i}" for i in range(10)]
    assert len(client.provider_calls) == 20
    assert {call[1] for call in client.search_calls} == {MediaType.MOVIE, MediaType.TV}


@pytest.mark.asyncio
async def test_only_tv_results_are_still_answered():
    client = _client_with_results(movie_count=0, tv_count=1)

    results = await build_inline_results("query", client)

    assert [r.id for r in results] == ["tv-200"]
    assert results[0].message_text == "Show\\ 0\\ \\(2010\\)\n\n"


@pytest.mark.asyncio
async def test_catalog_is_skipped_when_nothing_streams():
    client = _client_with_results(movie_count=1, tv_count=0)
    cache = ProviderCache(client.get_provider_catalog)

    await build_inline_results("query", client, cache)

    client.get_provider_catalog.assert_not_awaited()
