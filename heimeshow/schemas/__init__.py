"""
Pydantic schemas for request and response validation
"""

from heimeshow.schemas.booking import (
    DaySelectRequest,
    PaymentOutcomeResponse,
    PaymentRequest,
    PaymentViewResponse,
    SeatsViewResponse,
    SeatToggleRequest,
    ShowtimesViewResponse,
    ShowtimeSelectRequest,
)
from heimeshow.schemas.response import (
    ErrorResponse,
    HealthResponse,
    SignInRequiredResponse,
)
from heimeshow.schemas.user import SessionUserResponse

__all__ = [
    "DaySelectRequest",
    "PaymentOutcomeResponse",
    "PaymentRequest",
    "PaymentViewResponse",
    "SeatsViewResponse",
    "SeatToggleRequest",
    "ShowtimesViewResponse",
    "ShowtimeSelectRequest",
    "ErrorResponse",
    "HealthResponse",
    "SignInRequiredResponse",
    "SessionUserResponse",
]
