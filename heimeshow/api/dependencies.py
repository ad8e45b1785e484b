"""Shared dependencies for the booking endpoints."""

from datetime import date
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from fastapi import Depends

from heimeshow.booking.calendar import build_calendar_window, today_in
from heimeshow.booking.catalog import DEFAULT_CATALOG
from heimeshow.booking.handoff import decode_handoff
from heimeshow.booking.seating import DEFAULT_SEAT_MAP, PricingPolicy
from heimeshow.config import settings
from heimeshow.core.exceptions import AuthenticationError, SignInRequired
from heimeshow.core.security import extract_token
from heimeshow.services.enquiry_service import EnquirySink, HttpEnquirySink, LoggingEnquirySink
from heimeshow.services.movie_service import MovieFetcher, TMDBMovieFetcher
from heimeshow.services.session_service import Session, SessionProvider, TokenSessionProvider


def get_session_provider(token: Optional[str] = Depends(extract_token)) -> SessionProvider:
    return TokenSessionProvider(token)


def get_current_session(provider: SessionProvider = Depends(get_session_provider)) -> Session:
    session = provider.get_session()
    if session is None:
        raise AuthenticationError("Not authenticated")
    return session


def get_movie_fetcher() -> MovieFetcher:
    return TMDBMovieFetcher(
        api_key=settings.TMDB_API_KEY,
        base_url=settings.TMDB_BASE_URL,
        language=settings.TMDB_LANGUAGE,
        timeout=settings.TMDB_TIMEOUT_SECONDS,
    )


def get_enquiry_sink() -> EnquirySink:
    if settings.ENQUIRY_URL:
        return HttpEnquirySink(settings.ENQUIRY_URL, timeout=settings.ENQUIRY_TIMEOUT_SECONDS)
    return LoggingEnquirySink()


def get_today() -> date:
    return today_in(settings.CINEMA_TIMEZONE)


def get_state_options(today: date = Depends(get_today)) -> Dict[str, Any]:
    """Keyword arguments for SelectionState shared by every booking request"""
    return {
        "catalog": DEFAULT_CATALOG,
        "seat_map": DEFAULT_SEAT_MAP,
        "pricing": PricingPolicy(
            standard=settings.SEAT_PRICE_STANDARD,
            premium=settings.SEAT_PRICE_PREMIUM,
            currency=settings.CURRENCY,
        ),
        "calendar": build_calendar_window(today, settings.BOOKING_WINDOW_DAYS),
    }


def screen_path(page: str, params: Mapping[str, Any]) -> str:
    """Front-end location of a screen, used as the post sign-in return target"""
    canonical = decode_handoff(params).to_params()
    known = {key: value for key, value in canonical.items() if key in params}
    query = urlencode(known)
    return f"{page}?{query}" if query else page


def require_session(provider: SessionProvider, return_to: str) -> Session:
    session = provider.get_session()
    if session is None:
        raise SignInRequired(return_to)
    return session
