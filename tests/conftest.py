"""
Test configuration and fixtures
"""

import pytest
import pytest_asyncio
from datetime import date
from typing import List, Optional, Tuple
import os

from httpx import AsyncClient, ASGITransport

# Set test environment before anything reads settings
os.environ["APP_ENV"] = "testing"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-heimeshow-suite-0123456789"
os.environ["LOG_FORMAT"] = "text"
os.environ.pop("ENQUIRY_URL", None)

from heimeshow.booking.calendar import build_calendar_window
from heimeshow.booking.selection import SelectionState, Subject
from heimeshow.core.exceptions import ExternalServiceError
from heimeshow.core.security import create_access_token
from heimeshow.services.enquiry_service import EnquiryPayload, EnquiryResult
from heimeshow.services.movie_service import MovieDetails
from heimeshow.services.session_service import Session, SessionUser, StaticSessionProvider

# Wednesday; index 2 is Friday 16 October, a weekend day
TODAY = date(2026, 10, 14)


class FakeMovieFetcher:
    """Movie fetcher serving canned details, or failing like an unreachable TMDB"""

    def __init__(self, movies: Optional[dict] = None, fail: bool = False):
        self.movies = movies or {}
        self.fail = fail
        self.requested: List[str] = []

    async def get_movie(self, movie_id: str) -> MovieDetails:
        self.requested.append(movie_id)
        if self.fail or movie_id not in self.movies:
            raise ExternalServiceError("tmdb", "TMDB request failed (404)", upstream_status=404)
        return self.movies[movie_id]


class RecordingEnquirySink:
    """Enquiry sink that keeps what it was sent"""

    def __init__(self, result: Optional[EnquiryResult] = None):
        self.result = result or EnquiryResult(ok=True)
        self.sent: List[Tuple[EnquiryPayload, Optional[str]]] = []

    async def submit(self, payload: EnquiryPayload, token: Optional[str] = None) -> EnquiryResult:
        self.sent.append((payload, token))
        return self.result


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def calendar(today):
    return build_calendar_window(today)


@pytest.fixture
def session_user() -> SessionUser:
    return SessionUser(
        id="user-42",
        email="layla@example.com",
        name="Layla Haddad",
        phone="+971501234567",
    )


@pytest.fixture
def session(session_user) -> Session:
    return Session(token="session-token", user=session_user)


@pytest.fixture
def signed_in(session) -> StaticSessionProvider:
    return StaticSessionProvider(session)


@pytest.fixture
def signed_out() -> StaticSessionProvider:
    return StaticSessionProvider()


@pytest.fixture
def subject() -> Subject:
    return Subject(movie_id="550", title="Desert Lights", meta="Oct 16, 2026 • 2h 9m • Drama")


@pytest.fixture
def make_state(subject, signed_in, calendar):
    """Factory for a fresh selection state; signed in unless told otherwise"""
    def _make(provider=None, return_to: str = "booking.html?id=550") -> SelectionState:
        return SelectionState(
            subject,
            provider if provider is not None else signed_in,
            calendar=calendar,
            return_to=return_to,
        )
    return _make


@pytest.fixture
def state(make_state) -> SelectionState:
    return make_state()


@pytest.fixture
def seat_ready_state(state) -> SelectionState:
    """Marina, Friday 17:15, no seats yet"""
    state.select_day(2)
    state.select_showtime("marina", "17:15")
    return state


@pytest.fixture
def movie_details() -> MovieDetails:
    return MovieDetails(
        id="550",
        title="Desert Lights",
        release_date="2026-10-16",
        runtime=129,
        genres=["Drama", "Thriller"],
    )


@pytest.fixture
def movie_fetcher(movie_details) -> FakeMovieFetcher:
    return FakeMovieFetcher({"550": movie_details})


@pytest.fixture
def enquiry_sink() -> RecordingEnquirySink:
    return RecordingEnquirySink()


@pytest.fixture
def make_sink():
    """Factory for enquiry sinks answering with a given result"""
    return RecordingEnquirySink


@pytest.fixture
def access_token(session_user) -> str:
    return create_access_token(
        data={
            "sub": session_user.id,
            "email": session_user.email,
            "name": session_user.name,
            "phone": session_user.phone,
        }
    )


@pytest.fixture
def auth_headers(access_token) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


@pytest_asyncio.fixture
async def client(movie_fetcher, enquiry_sink, today):
    """Create test client with collaborators overridden"""
    from heimeshow.main import app
    from heimeshow.api.dependencies import get_enquiry_sink, get_movie_fetcher, get_today

    app.dependency_overrides[get_movie_fetcher] = lambda: movie_fetcher
    app.dependency_overrides[get_enquiry_sink] = lambda: enquiry_sink
    app.dependency_overrides[get_today] = lambda: today

    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
