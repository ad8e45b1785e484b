"""
Booking selection state machine

Tracks one user's in-progress booking (day, venue, showtime, format, seats)
across the booking, seat and payment screens:

    SELECT_DAY -> SELECT_VENUE_TIME -> SELECT_SEATS -> REVIEW_PAYMENT

Upstream changes invalidate downstream choices: a new day clears the venue,
showtime, format and seats; a new venue or showtime clears the seats. Every
mutation first asks the injected session provider for a session and raises
SignInRequired when there is none.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Sequence, Set, Tuple
import enum
import logging

from heimeshow.booking.calendar import CalendarDay, build_calendar_window, find_day
from heimeshow.booking.catalog import DEFAULT_CATALOG, Venue, VenueCatalog, showtimes_for
from heimeshow.booking.seating import DEFAULT_PRICING, DEFAULT_SEAT_MAP, PricingPolicy, SeatMap
from heimeshow.core.exceptions import NotFoundError, OutOfRangeError, SignInRequired
from heimeshow.services.session_service import Session, SessionProvider

if TYPE_CHECKING:
    from heimeshow.booking.handoff import BookingHandoff

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "HeimeShow Feature"
PLACEHOLDER_META = "Dubai · Premium Formats"
SIGNED_OUT_SUMMARY = "Sign in to HeimeShow to book tickets."


class Stage(str, enum.Enum):
    SELECT_DAY = "select_day"
    SELECT_VENUE_TIME = "select_venue_time"
    SELECT_SEATS = "select_seats"
    REVIEW_PAYMENT = "review_payment"


STAGE_ORDER = (
    Stage.SELECT_DAY,
    Stage.SELECT_VENUE_TIME,
    Stage.SELECT_SEATS,
    Stage.REVIEW_PAYMENT,
)


@dataclass(frozen=True)
class Subject:
    """The feature being booked"""
    movie_id: str = ""
    title: str = PLACEHOLDER_TITLE
    meta: str = PLACEHOLDER_META


@dataclass(frozen=True)
class SeatTotal:
    count: int
    total: int
    label: str


@dataclass(frozen=True)
class SelectionSnapshot:
    day: CalendarDay
    venue: Optional[Venue]
    showtime: Optional[str]
    format: Optional[str]
    seats: FrozenSet[str]


def _parse_iso_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def seat_total_label(count: int, total: int, currency: str = "AED") -> str:
    if not count:
        return f"0 seats selected · {currency} 0"
    return f"{count} seat{'s' if count > 1 else ''} selected · {currency} {total}"


class SelectionState:
    """
    Mutable record of a single booking attempt.

    Owned by one request/screen at a time; nothing here is shared or locked.
    """

    def __init__(
        self,
        subject: Subject,
        session_provider: SessionProvider,
        *,
        catalog: VenueCatalog = DEFAULT_CATALOG,
        seat_map: SeatMap = DEFAULT_SEAT_MAP,
        pricing: PricingPolicy = DEFAULT_PRICING,
        calendar: Optional[Sequence[CalendarDay]] = None,
        today: Optional[date] = None,
        return_to: str = "",
    ):
        self.subject = subject
        self.session_provider = session_provider
        self.catalog = catalog
        self.seat_map = seat_map
        self.pricing = pricing
        self.calendar: Tuple[CalendarDay, ...] = tuple(
            calendar if calendar is not None else build_calendar_window(today)
        )
        if not self.calendar:
            raise ValueError("Calendar window must contain at least one day")
        self.return_to = return_to

        self._day_index = 0
        self.venue: Optional[Venue] = None
        self.showtime: Optional[str] = None
        self.format: Optional[str] = None
        self._selected: Set[str] = set()

    # ------------------------------------------------------------------ #
    # Construction from a hand-off
    # ------------------------------------------------------------------ #

    @classmethod
    def restore(
        cls,
        handoff: "BookingHandoff",
        session_provider: SessionProvider,
        *,
        subject: Optional[Subject] = None,
        keep_carried_day: bool = False,
        **kwargs,
    ) -> "SelectionState":
        """
        Rebuild a state from hand-off parameters on the next screen.

        Only combinations that are still valid survive: the day must be in
        the current window, the venue must exist and run the showtime that
        day, and seats go through the same checks as a user toggle.

        With ``keep_carried_day`` a well-formed date that has left the window
        is kept as is: the window is rebuilt to start on that day so the
        carried venue and showtime are checked against its own schedule.
        """
        state = cls(
            subject or Subject(movie_id=handoff.movie_id, title=handoff.title),
            session_provider,
            **kwargs,
        )

        day = find_day(list(state.calendar), handoff.date)
        if day is not None:
            state._select_day(day.index)
        elif keep_carried_day:
            carried = _parse_iso_date(handoff.date)
            if carried is not None:
                logger.info(
                    "Keeping carried day outside the booking window",
                    extra={"date": handoff.date, "window_start": state.calendar[0].iso},
                )
                state.calendar = tuple(build_calendar_window(carried, len(state.calendar)))
                state._day_index = 0

        venue = state.catalog.find(handoff.theatre_id)
        if venue is not None and handoff.showtime in state.showtimes(venue):
            format_name = handoff.format if venue.supports(handoff.format) else None
            state._select_showtime(venue, handoff.showtime, format_name)

        for seat_id in dict.fromkeys(handoff.seats):
            if seat_id not in state._selected:
                state._toggle_seat(seat_id)

        if handoff.seats and len(state._selected) != len(set(handoff.seats)):
            logger.info(
                "Dropped seats while restoring selection",
                extra={"requested": list(handoff.seats), "kept": state.selected_seats},
            )
        return state

    # ------------------------------------------------------------------ #
    # Session gate
    # ------------------------------------------------------------------ #

    @property
    def session(self) -> Optional[Session]:
        return self.session_provider.get_session()

    @property
    def signed_in(self) -> bool:
        return self.session is not None

    def _require_session(self) -> Session:
        session = self.session
        if session is None:
            raise SignInRequired(self.return_to)
        return session

    # ------------------------------------------------------------------ #
    # Calendar & venue selector
    # ------------------------------------------------------------------ #

    @property
    def active_day(self) -> CalendarDay:
        return self.calendar[self._day_index]

    def showtimes(self, venue: Venue) -> List[str]:
        return showtimes_for(venue, self.active_day.is_weekend)

    def venue_showtimes(self) -> List[Tuple[Venue, List[str]]]:
        """Every venue with the showtimes it runs on the active day"""
        return [(venue, self.showtimes(venue)) for venue in self.catalog]

    def select_day(self, index: int) -> CalendarDay:
        self._require_session()
        return self._select_day(index)

    def _select_day(self, index: int) -> CalendarDay:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self.calendar):
            raise OutOfRangeError("day index", index, 0, len(self.calendar))

        self._day_index = index
        self.venue = None
        self.showtime = None
        self.format = None
        self._selected.clear()
        logger.debug(f"Selected day {self.active_day.iso}")
        return self.active_day

    def select_showtime(
        self,
        venue_id: str,
        time: str,
        format: Optional[str] = None,
    ) -> Tuple[Venue, str, str]:
        self._require_session()
        venue = self.catalog.get(venue_id)
        if time not in self.showtimes(venue):
            raise NotFoundError("Showtime", f"{venue_id} {time} on {self.active_day.iso}")
        if format is not None and not venue.supports(format):
            raise NotFoundError("Format", f"{venue_id} {format}")
        return self._select_showtime(venue, time, format)

    def _select_showtime(
        self,
        venue: Venue,
        time: str,
        format: Optional[str],
    ) -> Tuple[Venue, str, str]:
        changed = self.venue is None or self.venue.id != venue.id or self.showtime != time
        self.venue = venue
        self.showtime = time
        self.format = format or venue.base_format
        if changed:
            self._selected.clear()
        logger.debug(f"Selected {venue.id} {time} ({self.format})")
        return venue, time, self.format

    @property
    def can_continue(self) -> bool:
        return self.venue is not None and self.showtime is not None

    @property
    def summary(self) -> str:
        prefix = f"{self.subject.title} · {self.active_day.readable}"
        if not self.can_continue:
            return f"{prefix} · Select a theatre and showtime"
        return f"{prefix} · {self.venue.name} · {self.showtime} · {self.format or self.venue.base_format}"

    # ------------------------------------------------------------------ #
    # Seat map & pricing
    # ------------------------------------------------------------------ #

    def toggle_seat(self, seat_id: str) -> bool:
        """
        Flip a seat in or out of the selection.

        Returns False, leaving the selection untouched, for blocked, unknown
        or malformed seats and before a showtime has been chosen.
        """
        self._require_session()
        return self._toggle_seat(seat_id)

    def _toggle_seat(self, seat_id: str) -> bool:
        if not self.can_enter(Stage.SELECT_SEATS):
            return False
        if not isinstance(seat_id, str) or not self.seat_map.is_selectable(seat_id):
            return False

        if seat_id in self._selected:
            self._selected.remove(seat_id)
        else:
            self._selected.add(seat_id)
        return True

    @property
    def selected_seats(self) -> List[str]:
        return self.seat_map.ordered(self._selected)

    def get_total(self) -> SeatTotal:
        count = len(self._selected)
        total = sum(
            self.pricing.price_for(self.seat_map.seat_class(seat_id))
            for seat_id in self._selected
        )
        return SeatTotal(
            count=count,
            total=total,
            label=seat_total_label(count, total, self.pricing.currency),
        )

    @property
    def seat_status(self) -> str:
        if not self._selected:
            return "Select seats to proceed."
        return f"Seats selected: {', '.join(self.selected_seats)}"

    @property
    def can_confirm(self) -> bool:
        return bool(self._selected)

    def get_selection(self) -> SelectionSnapshot:
        return SelectionSnapshot(
            day=self.active_day,
            venue=self.venue,
            showtime=self.showtime,
            format=self.format,
            seats=frozenset(self._selected),
        )

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #

    def can_enter(self, stage: Stage) -> bool:
        if stage is Stage.SELECT_DAY:
            return True
        if stage is Stage.SELECT_VENUE_TIME:
            return self.active_day is not None
        if stage is Stage.SELECT_SEATS:
            return self.can_continue
        return self.can_continue and self.can_confirm

    @property
    def stage(self) -> Stage:
        """Furthest stage the current choices allow"""
        reached = Stage.SELECT_DAY
        for stage in STAGE_ORDER:
            if not self.can_enter(stage):
                break
            reached = stage
        return reached
