import pytest

from streamfinder.services import query_builder
from streamfinder.services.tmdb_models import MediaType


def test_build_search_query_orders_parameters():
    assert (
        query_builder.build_search_query("the terminator", page=2)
        == "query=the+terminator&include_adult=false&language=en-US&page=2"
    )


def test_build_search_query_rejects_page_zero():
    with pytest.raises(ValueError):
        query_builder.build_search_query("alien", page=0)


def test_resource_paths():
    assert query_builder.search_path(MediaType.MOVIE) == "/search/movie"
    assert query_builder.search_path(MediaType.TV) == "/search/tv"
    assert query_builder.details_path(MediaType.MOVIE, 218) == "/movie/218"
    assert (
        query_builder.watch_providers_path(MediaType.TV, 90802)
        == "/tv/90802/watch/providers"
    )


def test_provider_catalog_path():
    assert (
        query_builder.provider_catalog_path(MediaType.MOVIE)
        == "/watch/providers/movie?language=en-US&watch_region=US"
    )


def test_build_url_avoids_double_slashes():
    url = query_builder.build_url(
        "https://api.themoviedb.org/3/", "/search/movie", "query=x&page=1"
    )
    assert url == "https://api.themoviedb.org/3/search/movie?query=x&page=1"


def test_build_url_appends_to_existing_query():
    url = query_builder.build_url(
        "https://api.themoviedb.org/3",
        "/watch/providers/tv?language=en-US&watch_region=US",
        "page=1",
    )
    assert url.endswith("watch_region=US&page=1")


def test_poster_url():
    assert (
        query_builder.poster_url("/abc.jpg")
        == "https://image.tmdb.org/t/p/w600_and_h900_bestv2/abc.jpg"
    )
    assert query_builder.poster_url(None) is None
    assert query_builder.poster_url("") is None
