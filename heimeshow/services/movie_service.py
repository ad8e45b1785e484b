"""
Movie metadata from TMDB

Only used to seed the booking subject's display fields; seat and pricing
logic never depend on it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Protocol
import logging

import httpx

from heimeshow.booking.selection import PLACEHOLDER_META, PLACEHOLDER_TITLE, Subject
from heimeshow.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovieDetails:
    id: str
    title: str
    release_date: Optional[str] = None
    runtime: Optional[int] = None
    genres: List[str] = field(default_factory=list)
    overview: str = ""
    poster_path: Optional[str] = None


class MovieFetcher(Protocol):
    async def get_movie(self, movie_id: str) -> MovieDetails:
        ...


class TMDBMovieFetcher:
    """
    Fetches movie details from the TMDB v3 API
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = timeout
        self.transport = transport

    async def get_movie(self, movie_id: str) -> MovieDetails:
        if not self.api_key:
            raise ExternalServiceError("tmdb", "TMDB API key missing on server.")

        params = {"api_key": self.api_key, "language": self.language}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={"Accept": "application/json"},
            ) as client:
                response = await client.get(f"/movie/{movie_id}", params=params)
        except httpx.HTTPError as e:
            logger.error(f"TMDB request for movie {movie_id} failed: {e}")
            raise ExternalServiceError("tmdb", "Unable to reach TMDB.")

        if not response.is_success:
            raise ExternalServiceError(
                "tmdb",
                f"TMDB request failed ({response.status_code})",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise ExternalServiceError("tmdb", "TMDB returned an unreadable response.")

        return MovieDetails(
            id=str(data.get("id", movie_id)),
            title=data.get("title") or data.get("name") or "",
            release_date=data.get("release_date") or None,
            runtime=data.get("runtime") or None,
            genres=[g["name"] for g in data.get("genres") or [] if isinstance(g, dict) and g.get("name")],
            overview=data.get("overview") or "",
            poster_path=data.get("poster_path"),
        )


def format_release_date(value: Optional[str]) -> str:
    """``2026-10-16`` -> ``Oct 16, 2026``"""
    if not value:
        return "TBA"
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return "TBA"
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_runtime(minutes: Optional[int]) -> str:
    if not minutes:
        return "—"
    return f"{minutes // 60}h {minutes % 60}m"


def format_meta(movie: MovieDetails) -> str:
    genres = ", ".join(movie.genres) or "—"
    return f"{format_release_date(movie.release_date)} • {format_runtime(movie.runtime)} • {genres}"


async def resolve_subject(
    fetcher: MovieFetcher,
    movie_id: Optional[str],
    provided_title: Optional[str] = None,
) -> Subject:
    """
    Subject for the booking screen; metadata failures fall back to placeholders.
    """
    fallback_title = (provided_title or "").strip() or PLACEHOLDER_TITLE
    if not movie_id:
        return Subject(movie_id="", title=fallback_title, meta=PLACEHOLDER_META)

    try:
        movie = await fetcher.get_movie(movie_id)
    except ExternalServiceError as e:
        logger.warning(f"Unable to load movie {movie_id} for booking: {e.message}")
        return Subject(movie_id=movie_id, title=fallback_title, meta=PLACEHOLDER_META)

    return Subject(
        movie_id=movie.id,
        title=movie.title or fallback_title,
        meta=format_meta(movie),
    )
