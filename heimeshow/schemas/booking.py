"""
Booking flow schemas

Requests carry the current hand-off parameters in ``params``; every view
returns the re-encoded ``next_params`` for the following request or screen.
"""

from typing import Any, Dict, List, Optional
from pydantic import Field

from heimeshow.schemas.base import BaseSchema


HandoffParams = Dict[str, str]
# Incoming parameters are decoded leniently, so any JSON value is accepted
IncomingParams = Dict[str, Any]


class SubjectResponse(BaseSchema):
    movie_id: str
    title: str
    meta: str


class CalendarDayResponse(BaseSchema):
    index: int
    date: str
    label: str
    day: int
    month: str
    is_weekend: bool
    readable: str
    active: bool = False


class VenueShowtimesResponse(BaseSchema):
    id: str
    name: str
    location: str
    formats: List[str]
    base_format: str
    showtimes: List[str]
    selected_showtime: Optional[str] = None


class ShowtimesViewResponse(BaseSchema):
    """Date, venue and showtime screen"""
    subject: SubjectResponse
    signed_in: bool
    stage: str
    days: List[CalendarDayResponse]
    venues: List[VenueShowtimesResponse]
    venue_id: Optional[str] = None
    showtime: Optional[str] = None
    format: Optional[str] = None
    summary: str
    can_continue: bool
    next_params: HandoffParams


class SeatCellResponse(BaseSchema):
    id: str
    number: int
    premium: bool
    blocked: bool
    selected: bool


class SeatRowResponse(BaseSchema):
    row: str
    premium: bool
    seats: List[Optional[SeatCellResponse]] = Field(
        ..., description="Seat cells in order; null marks the aisle gap"
    )


class SeatTotalResponse(BaseSchema):
    count: int
    total: int
    currency: str
    label: str


class SeatsViewResponse(BaseSchema):
    """Seat map screen"""
    subject: SubjectResponse
    stage: str
    summary: str
    rows: List[SeatRowResponse]
    selected_seats: List[str]
    total: SeatTotalResponse
    seat_status: str
    can_confirm: bool
    toggled: Optional[bool] = None
    next_params: HandoffParams


class PaymentViewResponse(BaseSchema):
    """Read-only payment review screen"""
    movie_id: str
    title: str
    theatre: str
    date: str
    date_readable: str
    showtime: str
    format: str
    seats: List[str]
    seats_label: str
    total: int
    total_label: str
    params: HandoffParams


class DaySelectRequest(BaseSchema):
    params: IncomingParams = Field(default_factory=dict)
    index: int


class ShowtimeSelectRequest(BaseSchema):
    params: IncomingParams = Field(default_factory=dict)
    theatre_id: str = Field(..., alias="theatreId")
    showtime: str
    format: Optional[str] = None


class SeatToggleRequest(BaseSchema):
    params: IncomingParams = Field(default_factory=dict)
    seat_id: str = Field(..., alias="seatId")


class CardDetails(BaseSchema):
    card_name: str = Field("", alias="cardName")
    card_number: str = Field("", alias="cardNumber")
    expiry: str = ""
    cvv: str = ""


class PaymentRequest(BaseSchema):
    params: IncomingParams = Field(default_factory=dict)
    method: Optional[str] = None
    card: Optional[CardDetails] = None


class PaymentOutcomeResponse(BaseSchema):
    success: bool
    message: str
