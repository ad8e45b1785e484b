"""
Booking flow endpoints

Stateless: each request carries the hand-off parameters of the screen it
comes from, the selection is rebuilt from them, one operation is applied and
the new view is returned with the parameters for the next request.
"""

from typing import Any, Dict, Mapping, Optional

from fastapi import APIRouter, Depends, Request

from heimeshow.api.dependencies import (
    get_enquiry_sink,
    get_movie_fetcher,
    get_session_provider,
    get_state_options,
    require_session,
    screen_path,
)
from heimeshow.booking.handoff import decode_handoff, encode_handoff
from heimeshow.booking.payment import PaymentReview
from heimeshow.booking.selection import SIGNED_OUT_SUMMARY, SelectionState, Subject
from heimeshow.schemas.booking import (
    CalendarDayResponse,
    DaySelectRequest,
    PaymentOutcomeResponse,
    PaymentRequest,
    PaymentViewResponse,
    SeatCellResponse,
    SeatRowResponse,
    SeatsViewResponse,
    SeatToggleRequest,
    SeatTotalResponse,
    ShowtimeSelectRequest,
    ShowtimesViewResponse,
    SubjectResponse,
    VenueShowtimesResponse,
)
from heimeshow.services.enquiry_service import EnquirySink
from heimeshow.services.movie_service import MovieFetcher, resolve_subject
from heimeshow.services.session_service import SessionProvider

router = APIRouter()

BOOKING_PAGE = "booking.html"
SEATS_PAGE = "seats.html"
PAYMENT_PAGE = "payment.html"


async def _showtimes_state(
    params: Mapping[str, Any],
    provider: SessionProvider,
    fetcher: MovieFetcher,
    options: Dict[str, Any],
) -> SelectionState:
    handoff = decode_handoff(params)
    subject = await resolve_subject(fetcher, handoff.movie_id, handoff.title)
    return SelectionState.restore(
        handoff,
        provider,
        subject=subject,
        return_to=screen_path(BOOKING_PAGE, params),
        **options,
    )


def _seats_state(
    params: Mapping[str, Any],
    provider: SessionProvider,
    options: Dict[str, Any],
) -> SelectionState:
    handoff = decode_handoff(params)
    return SelectionState.restore(
        handoff,
        provider,
        subject=Subject(movie_id=handoff.movie_id, title=handoff.title),
        return_to=screen_path(SEATS_PAGE, params),
        keep_carried_day=True,
        **options,
    )


def _subject_view(state: SelectionState) -> SubjectResponse:
    return SubjectResponse(
        movie_id=state.subject.movie_id,
        title=state.subject.title,
        meta=state.subject.meta,
    )


def _showtimes_view(state: SelectionState) -> ShowtimesViewResponse:
    active = state.active_day
    days = [
        CalendarDayResponse(
            index=day.index,
            date=day.iso,
            label=day.label,
            day=day.day,
            month=day.month,
            is_weekend=day.is_weekend,
            readable=day.readable,
            active=day.index == active.index,
        )
        for day in state.calendar
    ]
    venues = [
        VenueShowtimesResponse(
            id=venue.id,
            name=venue.name,
            location=venue.location,
            formats=list(venue.formats),
            base_format=venue.base_format,
            showtimes=times,
            selected_showtime=state.showtime if state.venue is not None and state.venue.id == venue.id else None,
        )
        for venue, times in state.venue_showtimes()
    ]
    signed_in = state.signed_in
    return ShowtimesViewResponse(
        subject=_subject_view(state),
        signed_in=signed_in,
        stage=state.stage.value,
        days=days,
        venues=venues,
        venue_id=state.venue.id if state.venue is not None else None,
        showtime=state.showtime,
        format=state.format,
        summary=state.summary if signed_in else SIGNED_OUT_SUMMARY,
        can_continue=state.can_continue,
        next_params=encode_handoff(state),
    )


def _seats_view(state: SelectionState, toggled: Optional[bool] = None) -> SeatsViewResponse:
    rows = [
        SeatRowResponse(
            row=row["row"],
            premium=row["premium"],
            seats=[
                SeatCellResponse(
                    id=cell.id,
                    number=cell.number,
                    premium=cell.premium,
                    blocked=cell.blocked,
                    selected=cell.selected,
                ) if cell is not None else None
                for cell in row["seats"]
            ],
        )
        for row in state.seat_map.grid(state.selected_seats)
    ]
    total = state.get_total()
    return SeatsViewResponse(
        subject=_subject_view(state),
        stage=state.stage.value,
        summary=state.summary,
        rows=rows,
        selected_seats=state.selected_seats,
        total=SeatTotalResponse(
            count=total.count,
            total=total.total,
            currency=state.pricing.currency,
            label=total.label,
        ),
        seat_status=state.seat_status,
        can_confirm=state.can_confirm,
        toggled=toggled,
        next_params=encode_handoff(state),
    )


@router.get("/showtimes", response_model=ShowtimesViewResponse)
async def showtimes(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
    fetcher: MovieFetcher = Depends(get_movie_fetcher),
    options: Dict[str, Any] = Depends(get_state_options),
) -> Any:
    """
    Date, venue and showtime screen; viewable without signing in
    """
    state = await _showtimes_state(request.query_params, provider, fetcher, options)
    return _showtimes_view(state)


@router.post("/showtimes/day", response_model=ShowtimesViewResponse)
async def select_day(
    body: DaySelectRequest,
    provider: SessionProvider = Depends(get_session_provider),
    fetcher: MovieFetcher = Depends(get_movie_fetcher),
    options: Dict[str, Any] = Depends(get_state_options),
) -> Any:
    """
    Make a calendar day active; clears venue, showtime and seats
    """
    state = await _showtimes_state(body.params, provider, fetcher, options)
    state.select_day(body.index)
    return _showtimes_view(state)


@router.post("/showtimes/select", response_model=ShowtimesViewResponse)
async def select_showtime(
    body: ShowtimeSelectRequest,
    provider: SessionProvider = Depends(get_session_provider),
    fetcher: MovieFetcher = Depends(get_movie_fetcher),
    options: Dict[str, Any] = Depends(get_state_options),
) -> Any:
    """
    Choose a venue and showtime on the active day
    """
    state = await _showtimes_state(body.params, provider, fetcher, options)
    state.select_showtime(body.theatre_id, body.showtime, body.format)
    return _showtimes_view(state)


@router.get("/seats", response_model=SeatsViewResponse)
async def seats(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
    options: Dict[str, Any] = Depends(get_state_options),
) -> Any:
    """
    Seat map screen
    """
    params = request.query_params
    require_session(provider, screen_path(SEATS_PAGE, params))
    return _seats_view(_seats_state(params, provider, options))


@router.post("/seats/toggle", response_model=SeatsViewResponse)
async def toggle_seat(
    body: SeatToggleRequest,
    provider: SessionProvider = Depends(get_session_provider),
    options: Dict[str, Any] = Depends(get_state_options),
) -> Any:
    """
    Add or remove one seat; blocked and unknown seats are ignored
    """
    state = _seats_state(body.params, provider, options)
    toggled = state.toggle_seat(body.seat_id)
    return _seats_view(state, toggled=toggled)


@router.get("/payment", response_model=PaymentViewResponse)
async def payment_review(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
) -> Any:
    """
    Read-only payment review screen
    """
    params = request.query_params
    require_session(provider, screen_path(PAYMENT_PAGE, params))
    handoff = decode_handoff(params)
    review = PaymentReview(handoff, provider)
    return PaymentViewResponse(
        movie_id=handoff.movie_id,
        title=handoff.title,
        theatre=handoff.theatre,
        date=handoff.date,
        date_readable=review.display_date,
        showtime=handoff.showtime,
        format=handoff.format,
        seats=list(handoff.seats),
        seats_label=review.seats_label,
        total=handoff.total,
        total_label=review.total_label,
        params=handoff.to_params(),
    )


@router.post("/payment", response_model=PaymentOutcomeResponse)
async def submit_payment(
    body: PaymentRequest,
    provider: SessionProvider = Depends(get_session_provider),
    sink: EnquirySink = Depends(get_enquiry_sink),
) -> Any:
    """
    Validate the payment form and send it as a ticket payment enquiry
    """
    review = PaymentReview(
        decode_handoff(body.params),
        provider,
        return_to=screen_path(PAYMENT_PAGE, body.params),
    )
    card = body.card.model_dump(by_alias=True) if body.card is not None else None
    outcome = await review.submit(sink, body.method, card)
    return PaymentOutcomeResponse(success=outcome.ok, message=outcome.message)
