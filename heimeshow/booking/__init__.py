"""
Booking selection state machine and cross-screen hand-off
"""

from heimeshow.booking.handoff import BookingHandoff, decode_handoff, encode_handoff
from heimeshow.booking.payment import PaymentOutcome, PaymentReview
from heimeshow.booking.selection import SelectionState, Stage, Subject

__all__ = [
    "BookingHandoff",
    "decode_handoff",
    "encode_handoff",
    "PaymentOutcome",
    "PaymentReview",
    "SelectionState",
    "Stage",
    "Subject",
]
