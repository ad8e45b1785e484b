"""
Tests for the movie metadata fetcher and enquiry sinks
"""

import json
import pytest
import httpx

from heimeshow.core.exceptions import ExternalServiceError
from heimeshow.services.enquiry_service import (
    DEFAULT_ERROR,
    EnquiryPayload,
    HttpEnquirySink,
    LoggingEnquirySink,
)
from heimeshow.services.movie_service import (
    MovieDetails,
    TMDBMovieFetcher,
    format_meta,
    format_release_date,
    format_runtime,
    resolve_subject,
)

TMDB_MOVIE = {
    "id": 550,
    "title": "Desert Lights",
    "release_date": "2026-10-16",
    "runtime": 129,
    "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
    "overview": "A night in the dunes.",
    "poster_path": "/desert.jpg",
}


@pytest.fixture
def payload():
    return EnquiryPayload(
        enquiry_type="Ticket Payment",
        name="Layla Haddad",
        email="layla@example.com",
        preferred_date="2026-10-16",
        group_size="2 seats",
        message="Payment intent for Desert Lights",
    )


def _fetcher(handler, api_key="tmdb-key"):
    return TMDBMovieFetcher(api_key=api_key, transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestMetaFormatting:
    """Subject meta line"""

    def test_full_meta(self):
        movie = MovieDetails(id="550", title="Desert Lights", release_date="2026-10-16",
                             runtime=129, genres=["Drama", "Thriller"])

        assert format_meta(movie) == "Oct 16, 2026 • 2h 9m • Drama, Thriller"

    def test_missing_fields(self):
        movie = MovieDetails(id="550", title="Desert Lights")

        assert format_meta(movie) == "TBA • — • —"

    def test_release_date_edge_cases(self):
        assert format_release_date("2026-02-05") == "Feb 5, 2026"
        assert format_release_date("not-a-date") == "TBA"
        assert format_release_date(None) == "TBA"

    def test_runtime(self):
        assert format_runtime(95) == "1h 35m"
        assert format_runtime(0) == "—"


@pytest.mark.unit
class TestTMDBMovieFetcher:
    """Movie details over HTTP"""

    @pytest.mark.asyncio
    async def test_get_movie(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=TMDB_MOVIE)

        movie = await _fetcher(handler).get_movie("550")

        assert seen["path"] == "/3/movie/550"
        assert seen["params"]["api_key"] == "tmdb-key"
        assert movie.id == "550"
        assert movie.title == "Desert Lights"
        assert movie.runtime == 129
        assert movie.genres == ["Drama", "Thriller"]

    @pytest.mark.asyncio
    async def test_upstream_error(self):
        fetcher = _fetcher(lambda request: httpx.Response(404, json={"status_message": "missing"}))

        with pytest.raises(ExternalServiceError) as exc_info:
            await fetcher.get_movie("999")

        assert exc_info.value.details["upstream_status"] == 404
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError):
            await _fetcher(handler).get_movie("550")

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, json=TMDB_MOVIE), api_key="")

        with pytest.raises(ExternalServiceError):
            await fetcher.get_movie("550")

    @pytest.mark.asyncio
    async def test_resolve_subject(self):
        subject = await resolve_subject(_fetcher(lambda request: httpx.Response(200, json=TMDB_MOVIE)), "550")

        assert subject.movie_id == "550"
        assert subject.title == "Desert Lights"
        assert subject.meta == "Oct 16, 2026 • 2h 9m • Drama, Thriller"

    @pytest.mark.asyncio
    async def test_resolve_subject_falls_back(self):
        fetcher = _fetcher(lambda request: httpx.Response(500))

        subject = await resolve_subject(fetcher, "550", "Desert Lights")

        assert subject.title == "Desert Lights"
        assert subject.meta == "Dubai · Premium Formats"

    @pytest.mark.asyncio
    async def test_resolve_subject_without_id(self):
        fetcher = _fetcher(lambda request: pytest.fail("no request expected"))

        subject = await resolve_subject(fetcher, "", None)

        assert subject.title == "HeimeShow Feature"


@pytest.mark.unit
class TestEnquirySinks:
    """Enquiry submission"""

    @pytest.mark.asyncio
    async def test_http_sink_success(self, payload):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        sink = HttpEnquirySink("https://enquiries.example.com/api", transport=httpx.MockTransport(handler))
        result = await sink.submit(payload, token="session-token")

        assert result.ok is True
        assert seen["auth"] == "Bearer session-token"
        assert seen["body"]["enquiryType"] == "Ticket Payment"
        assert seen["body"]["groupSize"] == "2 seats"

    @pytest.mark.asyncio
    async def test_http_sink_rejection(self, payload):
        sink = HttpEnquirySink(
            "https://enquiries.example.com/api",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": False, "error": "Sold out"})),
        )

        result = await sink.submit(payload)

        assert result.ok is False
        assert result.error == "Sold out"

    @pytest.mark.asyncio
    async def test_http_sink_server_error(self, payload):
        sink = HttpEnquirySink(
            "https://enquiries.example.com/api",
            transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway")),
        )

        result = await sink.submit(payload)

        assert result.ok is False
        assert result.error == DEFAULT_ERROR

    @pytest.mark.asyncio
    async def test_http_sink_network_error(self, payload):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        sink = HttpEnquirySink("https://enquiries.example.com/api", transport=httpx.MockTransport(handler))
        result = await sink.submit(payload)

        assert result.ok is False
        assert result.error

    @pytest.mark.asyncio
    async def test_logging_sink(self, payload):
        result = await LoggingEnquirySink().submit(payload)

        assert result.ok is True
