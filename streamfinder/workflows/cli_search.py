# streamfinder/workflows/cli_search.py

from __future__ import annotations

import asyncio
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TextIO

from ..config import CLI_PAGE_SIZE, logger
from ..services.query_builder import poster_url
from ..services.tmdb_client import TMDBClient
from ..services.tmdb_models import MediaType, MovieDetails, SearchResult, TVDetails
from ..ui.formatting import format_choice_line, format_show_more_line

CHOICE_PROMPT = "Pick an option: "
QUERY_PROMPT = "Search for: "
MEDIA_TYPE_PROMPT = "Search movies or TV shows? [movie/tv]: "
NO_RESULTS_MESSAGE = "No results found."

_MEDIA_TYPE_ANSWERS = {
    "movie": MediaType.MOVIE,
    "movies": MediaType.MOVIE,
    "m": MediaType.MOVIE,
    "1": MediaType.MOVIE,
    "tv": MediaType.TV,
    "show": MediaType.TV,
    "shows": MediaType.TV,
    "t": MediaType.TV,
    "2": MediaType.TV,
}

InputFunc = Callable[[str], str]


class CliSearchStep(str, Enum):
    """State machine steps for the interactive search."""

    MEDIA_TYPE = "media_type"
    QUERY = "query"
    FETCH = "fetch"
    CHOOSE = "choose"
    COMPLETE = "complete"


@dataclass
class CliSearchSession:
    """Mutable state carried between steps of one interactive search."""

    step: CliSearchStep = CliSearchStep.MEDIA_TYPE
    media_type: MediaType | None = None
    query: str | None = None
    page: int = 1
    total_pages: int = 0
    results: list[SearchResult] = field(default_factory=list)
    selected: SearchResult | None = None

    @property
    def show_more(self) -> bool:
        return self.page < self.total_pages

    @property
    def show_more_option(self) -> str | None:
        """The menu number that loads the next page, if there is one."""
        return str(len(self.results) + 1) if self.show_more else None

    def valid_choices(self) -> list[str]:
        choices = [str(index) for index in range(1, len(self.results) + 1)]
        if self.show_more_option:
            choices.append(self.show_more_option)
        return choices

    def advance(self, step: CliSearchStep) -> None:
        self.step = step


def parse_media_type(answer: str) -> MediaType | None:
    return _MEDIA_TYPE_ANSWERS.get(answer.strip().lower())


def _resolve(
    loop: asyncio.AbstractEventLoop,
    future: asyncio.Future[str],
    value: str | None = None,
    exception: Exception | None = None,
) -> None:
    """Hands a prompt answer from the input thread back to the event loop."""

    def settle() -> None:
        # The prompt may have been cancelled while input() was blocking.
        if future.done():
            return
        if exception is not None:
            future.set_exception(exception)
        else:
            future.set_result(value or "")

    if loop.is_closed():
        return
    loop.call_soon_threadsafe(settle)


class CliSearchFlow:
    """
    Drives the terminal search: media type, query, paged results and a
    numbered pick, ending with the chosen title's details.
    """

    def __init__(
        self,
        client: TMDBClient,
        *,
        input_func: InputFunc = input,
        output: TextIO | None = None,
        page_size: int = CLI_PAGE_SIZE,
    ) -> None:
        self.client = client
        self.session = CliSearchSession()
        self._input = input_func
        self._output = output or sys.stdout
        self._page_size = page_size

    def _write(self, text: str) -> None:
        self._output.write(f"{text}\n")
        self._output.flush()

    async def _ask(self, prompt: str) -> str:
        """
        Reads one answer on a daemon thread. A prompt abandoned on Ctrl+C
        must not block interpreter exit, and the default executor is joined
        at shutdown.
        """
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()

        def read() -> None:
            try:
                value = self._input(prompt)
            except Exception as e:
                _resolve(loop, answer, exception=e)
            else:
                _resolve(loop, answer, value=value)

        threading.Thread(target=read, name="cli-input", daemon=True).start()
        return await answer

    async def ask_until_valid(self, prompt: str, valid: list[str]) -> str:
        """Re-prompts until the answer is one of ``valid``. There is no retry limit."""
        while True:
            answer = (await self._ask(prompt)).strip()
            if answer in valid:
                return answer
            logger.debug(f"[CLI] Rejected choice {answer!r}; valid: {valid}")

    async def run(self) -> MovieDetails | TVDetails:
        session = self.session
        while True:
            if session.step is CliSearchStep.MEDIA_TYPE:
                await self._step_media_type()
            elif session.step is CliSearchStep.QUERY:
                await self._step_query()
            elif session.step is CliSearchStep.FETCH:
                await self._step_fetch()
            elif session.step is CliSearchStep.CHOOSE:
                await self._step_choose()
            else:
                break

        assert session.selected is not None
        details = await self.client.get_details(
            session.selected.id, session.selected.media_type
        )
        self.print_details(details)
        return details

    async def _step_media_type(self) -> None:
        while self.session.media_type is None:
            self.session.media_type = parse_media_type(
                await self._ask(MEDIA_TYPE_PROMPT)
            )
        self.session.advance(CliSearchStep.QUERY)

    async def _step_query(self) -> None:
        query = ""
        while not query:
            query = (await self._ask(QUERY_PROMPT)).strip()
        self.session.query = query
        self.session.page = 1
        self.session.advance(CliSearchStep.FETCH)

    async def _step_fetch(self) -> None:
        session = self.session
        assert session.query is not None and session.media_type is not None
        search_page = await self.client.search(
            session.query, session.media_type, session.page
        )
        session.results = search_page.results[: self._page_size]
        session.total_pages = search_page.total_pages

        if not session.results:
            self._write(NO_RESULTS_MESSAGE)
            session.advance(CliSearchStep.QUERY)
            return
        session.advance(CliSearchStep.CHOOSE)

    async def _step_choose(self) -> None:
        session = self.session
        for index, result in enumerate(session.results, start=1):
            self._write(format_choice_line(index, result))

        show_more_option = session.show_more_option
        if show_more_option:
            self._write(format_show_more_line(int(show_more_option)))

        choice = await self.ask_until_valid(CHOICE_PROMPT, session.valid_choices())
        if choice == show_more_option:
            session.page += 1
            logger.info(f"[CLI] Loading page {session.page} for '{session.query}'.")
            session.advance(CliSearchStep.FETCH)
            return

        session.selected = session.results[int(choice) - 1]
        session.advance(CliSearchStep.COMPLETE)

    def print_details(self, details: MovieDetails | TVDetails) -> None:
        self._write(f"title: {details.title}")
        if isinstance(details, MovieDetails):
            self._write(f"imdb_id: {details.imdb_id or ''}")
        self._write(f"poster: {poster_url(details.poster_path) or ''}")
