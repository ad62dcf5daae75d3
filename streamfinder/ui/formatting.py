# streamfinder/ui/formatting.py

from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..config import DEFAULT_REGION
from ..services.query_builder import poster_url
from ..services.tmdb_models import InlineResult, SearchResult, WatchProvider

SHOW_MORE_LABEL = "[SHOW MORE RESULTS]"
STREAMING_HEADER = "Streaming on:"

_RESERVED_PATTERN = re.compile(r"([\-\[\]{}()*+!?.,\\^$|#\s])")


def escape_markdown(text: str) -> str:
    """Prefixes every MarkdownV2-significant character (and whitespace) with a backslash."""
    return _RESERVED_PATTERN.sub(r"\\\1", text)


def format_title(result: SearchResult) -> str:
    """Returns '<title> (<year>)'; an unknown year renders as '()'."""
    year = result.year
    return f"{result.title} ({year if year is not None else ''})"


def order_providers(
    providers: Iterable[WatchProvider],
    catalog: Sequence[WatchProvider] | None = None,
    region: str = DEFAULT_REGION,
) -> list[WatchProvider]:
    """
    Drops duplicate providers and, when the catalog is known, sorts them by
    the catalog's display priority for the region. Providers missing from
    the catalog keep their upstream order after the known ones.
    """
    unique: list[WatchProvider] = []
    seen: set[int] = set()
    for provider in providers:
        if provider.provider_id in seen:
            continue
        seen.add(provider.provider_id)
        unique.append(provider)

    if not catalog:
        return unique

    priorities = {p.provider_id: p.priority_in(region) for p in catalog}
    ranked = sorted(
        enumerate(unique),
        key=lambda pair: (
            pair[1].provider_id not in priorities,
            priorities.get(pair[1].provider_id, 0),
            pair[0],
        ),
    )
    return [provider for _, provider in ranked]


def format_message_body(
    result: SearchResult, providers: Sequence[WatchProvider] = ()
) -> str:
    """
    Composes the MarkdownV2 message sent when an inline result is picked.

    The 'Streaming on:' block is only present when at least one
    subscription-streaming provider exists.
    """
    body = f"{escape_markdown(format_title(result))}\n\n"
    if providers:
        body += f"{STREAMING_HEADER}\n"
        body += "".join(
            f"{escape_markdown(provider.provider_name)}\n" for provider in providers
        )
    return body


def build_inline_result(
    result: SearchResult, providers: Sequence[WatchProvider] = ()
) -> InlineResult:
    return InlineResult(
        id=f"{result.media_type.value}-{result.id}",
        title=format_title(result),
        message_text=format_message_body(result, providers),
        description=result.overview or None,
        thumbnail_url=poster_url(result.poster_path),
    )


def format_choice_line(index: int, result: SearchResult) -> str:
    return f"{index}. {format_title(result)}"


def format_show_more_line(index: int) -> str:
    return f"{index}. {SHOW_MORE_LABEL}"
