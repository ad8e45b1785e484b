"""
Payment review screen

The last screen is read-only: it shows the hand-off and turns it into a
freeform "Ticket Payment" enquiry. No reservation record is created; the
enquiry sink only reports success or an error message.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
import logging

from heimeshow.booking.handoff import BookingHandoff
from heimeshow.core.exceptions import SignInRequired
from heimeshow.services.enquiry_service import EnquiryPayload, EnquirySink
from heimeshow.services.session_service import Session, SessionProvider

logger = logging.getLogger(__name__)

ENQUIRY_TYPE_TICKET_PAYMENT = "Ticket Payment"
CARD_METHODS = frozenset({"Visa", "Mastercard"})
CARD_FIELDS = ("cardName", "cardNumber", "expiry", "cvv")

MISSING_METHOD_MESSAGE = "Select a payment method to continue."
MISSING_CARD_MESSAGE = "Please complete your card details."
SUCCESS_MESSAGE = "Payment noted! Expect a concierge call within minutes."
FAILURE_MESSAGE = "We could not process your payment. Please try again."


@dataclass(frozen=True)
class PaymentOutcome:
    ok: bool
    message: str


class PaymentReview:
    """
    Read-only view over a completed selection
    """

    def __init__(self, handoff: BookingHandoff, session_provider: SessionProvider, return_to: str = ""):
        self.handoff = handoff
        self.session_provider = session_provider
        self.return_to = return_to

    def _require_session(self) -> Session:
        session = self.session_provider.get_session()
        if session is None:
            raise SignInRequired(self.return_to)
        return session

    @property
    def seats_label(self) -> str:
        return ", ".join(self.handoff.seats) if self.handoff.seats else "—"

    @property
    def total_label(self) -> str:
        return f"AED {self.handoff.total}"

    @property
    def display_date(self) -> str:
        return self.handoff.date_readable or self.handoff.date

    def validate(self, method: Optional[str], card: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """Status message for an incomplete form, or None when it can be sent"""
        if not method:
            return MISSING_METHOD_MESSAGE
        if method in CARD_METHODS:
            card = card or {}
            if any(not card.get(name) for name in CARD_FIELDS):
                return MISSING_CARD_MESSAGE
        return None

    def build_enquiry(self, method: str) -> EnquiryPayload:
        session = self._require_session()
        h = self.handoff
        seats = ", ".join(h.seats) or "N/A"
        message = (
            f"Payment intent for {h.title}\n"
            f"Theatre: {h.theatre}\n"
            f"Date: {h.date_readable}\n"
            f"Showtime: {h.showtime}\n"
            f"Seats: {seats}\n"
            f"Format: {h.format}\n"
            f"Method: {method}\n"
            f"Amount: AED {h.total}"
        )
        metadata: Dict[str, Any] = {
            "movieId": h.movie_id,
            "movieTitle": h.title,
            "theatreId": h.theatre_id,
            "theatreName": h.theatre,
            "showtime": h.showtime,
            "dateReadable": h.date_readable,
            "dateIso": h.date,
            "format": h.format,
            "seats": list(h.seats),
            "total": h.total,
            "method": method,
        }
        return EnquiryPayload(
            enquiry_type=ENQUIRY_TYPE_TICKET_PAYMENT,
            name=session.user.name or "HeimeShow Guest",
            email=session.user.email,
            phone=session.user.phone or "",
            preferred_date=h.date,
            group_size=f"{len(h.seats)} seats",
            message=message,
            metadata=metadata,
        )

    async def submit(
        self,
        sink: EnquirySink,
        method: Optional[str],
        card: Optional[Mapping[str, Any]] = None,
    ) -> PaymentOutcome:
        """
        Validate the form and hand the enquiry to the sink. No retries.
        """
        session = self._require_session()
        problem = self.validate(method, card)
        if problem:
            return PaymentOutcome(ok=False, message=problem)

        payload = self.build_enquiry(method)
        result = await sink.submit(payload, token=session.token)
        if not result.ok:
            logger.warning(f"Payment enquiry rejected: {result.error}")
            return PaymentOutcome(ok=False, message=result.error or FAILURE_MESSAGE)

        logger.info(f"Payment enquiry accepted for {payload.email}")
        return PaymentOutcome(ok=True, message=SUCCESS_MESSAGE)
