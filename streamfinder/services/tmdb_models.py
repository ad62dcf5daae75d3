# streamfinder/services/tmdb_models.py

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class MediaType(str, Enum):
    """The two TMDB catalogs a title can belong to."""

    MOVIE = "movie"
    TV = "tv"


_YEAR_PATTERN = re.compile(r"\s*(\d{4})(?:\D|$)")


def year_from_date(value: str | None) -> int | None:
    """
    Returns the leading four-digit year of a TMDB date, or None when unknown.

    Partial dates such as "1984" or "1984-10" still yield the year.
    """
    match = _YEAR_PATTERN.match(value or "")
    return int(match.group(1)) if match else None


def _str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def _opt_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) and value else None


def _int(payload: Mapping[str, Any], key: str) -> int:
    try:
        return int(payload.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _float(payload: Mapping[str, Any], key: str) -> float:
    try:
        return float(payload.get(key) or 0.0)
    except (TypeError, ValueError):
        return 0.0


def _dicts(payload: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    items = payload.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


# --- Search ---


@dataclass
class SearchResult:
    """A single hit from /search/{movie|tv}, tagged with its media type.

    Movies and TV shows only differ in field names upstream (``title`` vs
    ``name``, ``release_date`` vs ``first_air_date``); both land in ``title``
    and ``date`` here.
    """

    media_type: MediaType
    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    popularity: float = 0.0
    vote_average: float = 0.0
    vote_count: int = 0
    poster_path: str | None = None
    backdrop_path: str | None = None
    genre_ids: list[int] = field(default_factory=list)
    original_language: str = ""
    adult: bool = False
    date: str = ""
    origin_country: list[str] = field(default_factory=list)
    video: bool = False

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], media_type: MediaType
    ) -> "SearchResult":
        if media_type is MediaType.MOVIE:
            title_key, original_key, date_key = "title", "original_title", "release_date"
        else:
            title_key, original_key, date_key = "name", "original_name", "first_air_date"

        return cls(
            media_type=media_type,
            id=_int(payload, "id"),
            title=_str(payload, title_key),
            original_title=_str(payload, original_key),
            overview=_str(payload, "overview"),
            popularity=_float(payload, "popularity"),
            vote_average=_float(payload, "vote_average"),
            vote_count=_int(payload, "vote_count"),
            poster_path=_opt_str(payload, "poster_path"),
            backdrop_path=_opt_str(payload, "backdrop_path"),
            genre_ids=[int(g) for g in payload.get("genre_ids") or [] if isinstance(g, int)],
            original_language=_str(payload, "original_language"),
            adult=bool(payload.get("adult", False)),
            date=_str(payload, date_key),
            origin_country=list(payload.get("origin_country") or []),
            video=bool(payload.get("video", False)),
        )

    @property
    def year(self) -> int | None:
        return year_from_date(self.date)


@dataclass
class SearchPage:
    """One page of search results."""

    media_type: MediaType
    page: int
    results: list[SearchResult]
    total_pages: int
    total_results: int

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], media_type: MediaType
    ) -> "SearchPage":
        return cls(
            media_type=media_type,
            page=_int(payload, "page") or 1,
            results=[
                SearchResult.from_dict(item, media_type)
                for item in _dicts(payload, "results")
            ],
            total_pages=_int(payload, "total_pages"),
            total_results=_int(payload, "total_results"),
        )

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


# --- Details ---


@dataclass
class Genre:
    id: int
    name: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Genre":
        return cls(id=_int(payload, "id"), name=_str(payload, "name"))


@dataclass
class ProductionCompany:
    id: int
    name: str
    logo_path: str | None = None
    origin_country: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProductionCompany":
        return cls(
            id=_int(payload, "id"),
            name=_str(payload, "name"),
            logo_path=_opt_str(payload, "logo_path"),
            origin_country=_str(payload, "origin_country"),
        )


# Networks share the company shape upstream.
Network = ProductionCompany


@dataclass
class ProductionCountry:
    iso_3166_1: str
    name: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProductionCountry":
        return cls(iso_3166_1=_str(payload, "iso_3166_1"), name=_str(payload, "name"))


@dataclass
class SpokenLanguage:
    iso_639_1: str
    name: str
    english_name: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SpokenLanguage":
        return cls(
            iso_639_1=_str(payload, "iso_639_1"),
            name=_str(payload, "name"),
            english_name=_str(payload, "english_name"),
        )


@dataclass
class CreatedBy:
    id: int
    name: str
    credit_id: str = ""
    gender: int = 0
    profile_path: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CreatedBy":
        return cls(
            id=_int(payload, "id"),
            name=_str(payload, "name"),
            credit_id=str(payload.get("credit_id") or ""),
            gender=_int(payload, "gender"),
            profile_path=_opt_str(payload, "profile_path"),
        )


@dataclass
class Episode:
    id: int
    name: str
    overview: str = ""
    air_date: str = ""
    episode_number: int = 0
    season_number: int = 0
    runtime: int | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    production_code: str = ""
    show_id: int = 0
    still_path: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "Episode | None":
        if not isinstance(payload, Mapping):
            return None
        runtime = payload.get("runtime")
        return cls(
            id=_int(payload, "id"),
            name=_str(payload, "name"),
            overview=_str(payload, "overview"),
            air_date=_str(payload, "air_date"),
            episode_number=_int(payload, "episode_number"),
            season_number=_int(payload, "season_number"),
            runtime=runtime if isinstance(runtime, int) else None,
            vote_average=_float(payload, "vote_average"),
            vote_count=_int(payload, "vote_count"),
            production_code=str(payload.get("production_code") or ""),
            show_id=_int(payload, "show_id"),
            still_path=_opt_str(payload, "still_path"),
        )


@dataclass
class Season:
    id: int
    name: str
    season_number: int
    episode_count: int = 0
    air_date: str = ""
    overview: str = ""
    poster_path: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Season":
        return cls(
            id=_int(payload, "id"),
            name=_str(payload, "name"),
            season_number=_int(payload, "season_number"),
            episode_count=_int(payload, "episode_count"),
            air_date=_str(payload, "air_date"),
            overview=_str(payload, "overview"),
            poster_path=_opt_str(payload, "poster_path"),
        )


@dataclass
class MediaDetails(SearchResult):
    """Fields shared by /movie/{id} and /tv/{id}."""

    genres: list[Genre] = field(default_factory=list)
    homepage: str = ""
    spoken_languages: list[SpokenLanguage] = field(default_factory=list)
    production_companies: list[ProductionCompany] = field(default_factory=list)
    production_countries: list[ProductionCountry] = field(default_factory=list)
    tagline: str = ""
    status: str = ""

    @staticmethod
    def _common(payload: Mapping[str, Any], media_type: MediaType) -> dict[str, Any]:
        summary = SearchResult.from_dict(payload, media_type)
        genres = [Genre.from_dict(g) for g in _dicts(payload, "genres")]
        fields = dict(summary.__dict__)
        if not fields["genre_ids"]:
            fields["genre_ids"] = [g.id for g in genres]
        fields.update(
            genres=genres,
            homepage=_str(payload, "homepage"),
            spoken_languages=[
                SpokenLanguage.from_dict(item)
                for item in _dicts(payload, "spoken_languages")
            ],
            production_companies=[
                ProductionCompany.from_dict(item)
                for item in _dicts(payload, "production_companies")
            ],
            production_countries=[
                ProductionCountry.from_dict(item)
                for item in _dicts(payload, "production_countries")
            ],
            tagline=_str(payload, "tagline"),
            status=_str(payload, "status"),
        )
        return fields


@dataclass
class MovieDetails(MediaDetails):
    belongs_to_collection: dict[str, Any] | None = None
    budget: int = 0
    imdb_id: str | None = None
    revenue: int = 0
    runtime: int | None = None

    @classmethod
    def from_dict(  # type: ignore[override]
        cls, payload: Mapping[str, Any], media_type: MediaType = MediaType.MOVIE
    ) -> "MovieDetails":
        collection = payload.get("belongs_to_collection")
        runtime = payload.get("runtime")
        return cls(
            **cls._common(payload, MediaType.MOVIE),
            belongs_to_collection=collection if isinstance(collection, dict) else None,
            budget=_int(payload, "budget"),
            imdb_id=_opt_str(payload, "imdb_id"),
            revenue=_int(payload, "revenue"),
            runtime=runtime if isinstance(runtime, int) else None,
        )


@dataclass
class TVDetails(MediaDetails):
    created_by: list[CreatedBy] = field(default_factory=list)
    episode_run_time: list[int] = field(default_factory=list)
    in_production: bool = False
    languages: list[str] = field(default_factory=list)
    last_air_date: str = ""
    last_episode_to_air: Episode | None = None
    next_episode_to_air: Episode | None = None
    networks: list[Network] = field(default_factory=list)
    number_of_episodes: int = 0
    number_of_seasons: int = 0
    seasons: list[Season] = field(default_factory=list)
    type: str = ""

    @classmethod
    def from_dict(  # type: ignore[override]
        cls, payload: Mapping[str, Any], media_type: MediaType = MediaType.TV
    ) -> "TVDetails":
        return cls(
            **cls._common(payload, MediaType.TV),
            created_by=[CreatedBy.from_dict(item) for item in _dicts(payload, "created_by")],
            episode_run_time=[
                int(v) for v in payload.get("episode_run_time") or [] if isinstance(v, int)
            ],
            in_production=bool(payload.get("in_production", False)),
            languages=[v for v in payload.get("languages") or [] if isinstance(v, str)],
            last_air_date=_str(payload, "last_air_date"),
            last_episode_to_air=Episode.from_dict(payload.get("last_episode_to_air")),
            next_episode_to_air=Episode.from_dict(payload.get("next_episode_to_air")),
            networks=[Network.from_dict(item) for item in _dicts(payload, "networks")],
            number_of_episodes=_int(payload, "number_of_episodes"),
            number_of_seasons=_int(payload, "number_of_seasons"),
            seasons=[Season.from_dict(item) for item in _dicts(payload, "seasons")],
            type=_str(payload, "type"),
        )


# --- Watch providers ---


@dataclass
class WatchProvider:
    provider_id: int
    provider_name: str
    logo_path: str | None = None
    display_priority: int = 0
    display_priorities: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WatchProvider":
        priorities = payload.get("display_priorities")
        return cls(
            provider_id=_int(payload, "provider_id"),
            provider_name=_str(payload, "provider_name"),
            logo_path=_opt_str(payload, "logo_path"),
            display_priority=_int(payload, "display_priority"),
            display_priorities=(
                {str(k): int(v) for k, v in priorities.items() if isinstance(v, int)}
                if isinstance(priorities, dict)
                else {}
            ),
        )

    def priority_in(self, region: str) -> int:
        return self.display_priorities.get(region, self.display_priority)


@dataclass
class WatchProviderOffers:
    """Providers for one region, split by offer type."""

    link: str = ""
    flatrate: list[WatchProvider] = field(default_factory=list)
    rent: list[WatchProvider] = field(default_factory=list)
    buy: list[WatchProvider] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WatchProviderOffers":
        return cls(
            link=_str(payload, "link"),
            flatrate=[WatchProvider.from_dict(p) for p in _dicts(payload, "flatrate")],
            rent=[WatchProvider.from_dict(p) for p in _dicts(payload, "rent")],
            buy=[WatchProvider.from_dict(p) for p in _dicts(payload, "buy")],
        )


@dataclass
class WatchProviderSet:
    """Response of /{movie|tv}/{id}/watch/providers, keyed by region code."""

    id: int
    results: dict[str, WatchProviderOffers] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WatchProviderSet":
        regions = payload.get("results")
        return cls(
            id=_int(payload, "id"),
            results=(
                {
                    str(code): WatchProviderOffers.from_dict(offers)
                    for code, offers in regions.items()
                    if isinstance(offers, dict)
                }
                if isinstance(regions, dict)
                else {}
            ),
        )

    def streaming_for(self, region: str) -> list[WatchProvider]:
        offers = self.results.get(region)
        return list(offers.flatrate) if offers else []


# --- Inline output ---


@dataclass
class InlineResult:
    """Display-ready inline article."""

    id: str
    title: str
    message_text: str
    description: str | None = None
    thumbnail_url: str | None = None
