"""
Venue catalog

Venues and their showtimes are static. The catalog is read-only so it can be
replaced by an inventory-backed implementation without touching the
selection state machine.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from heimeshow.core.exceptions import NotFoundError


@dataclass(frozen=True)
class Venue:
    """A bookable HeimeShow cinema"""
    id: str
    name: str
    location: str
    formats: Tuple[str, ...]
    base_format: str
    weekday_showtimes: Tuple[str, ...]
    weekend_showtimes: Tuple[str, ...]

    def supports(self, format_name: str) -> bool:
        return format_name in self.formats


def showtimes_for(venue: Venue, is_weekend: bool) -> List[str]:
    """Ordered showtimes the venue runs on a weekend or weekday"""
    return list(venue.weekend_showtimes if is_weekend else venue.weekday_showtimes)


class VenueCatalog:
    """
    Ordered, read-only collection of venues
    """

    def __init__(self, venues: Iterable[Venue]):
        self._venues: Dict[str, Venue] = {}
        for venue in venues:
            if venue.id in self._venues:
                raise ValueError(f"Duplicate venue id: {venue.id}")
            self._venues[venue.id] = venue

    def __iter__(self) -> Iterator[Venue]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._venues

    def find(self, venue_id: str) -> Optional[Venue]:
        return self._venues.get(venue_id)

    def get(self, venue_id: str) -> Venue:
        venue = self._venues.get(venue_id)
        if venue is None:
            raise NotFoundError("Venue", venue_id)
        return venue


DEFAULT_VENUES = (
    Venue(
        id="marina",
        name="HeimeShow Marina Mall",
        location="Level 3, Dubai Marina Mall",
        formats=("IMAX Laser", "Dolby Atmos", "Luxe"),
        base_format="IMAX Laser",
        weekday_showtimes=("11:15", "14:45", "18:15", "21:45"),
        weekend_showtimes=("10:00", "13:30", "17:15", "20:45", "23:55"),
    ),
    Venue(
        id="citywalk",
        name="HeimeShow City Walk",
        location="City Walk, Al Wasl",
        formats=("4DX", "ScreenX", "Velvet Lounge"),
        base_format="4DX",
        weekday_showtimes=("12:00", "15:10", "18:30", "21:30"),
        weekend_showtimes=("09:45", "13:00", "16:20", "19:40", "22:50"),
    ),
    Venue(
        id="palm",
        name="HeimeShow Palm Jumeirah",
        location="The Pointe, Palm Jumeirah",
        formats=("VIP Suites", "Dolby Cinema"),
        base_format="VIP Suites",
        weekday_showtimes=("13:00", "16:15", "19:30", "22:30"),
        weekend_showtimes=("11:00", "14:15", "17:30", "20:45"),
    ),
    Venue(
        id="difc",
        name="HeimeShow DIFC Executive Lounge",
        location="Gate Village 5, DIFC",
        formats=("Private Boardroom", "Chef’s Table"),
        base_format="Private Boardroom",
        weekday_showtimes=("12:30", "16:00", "19:30", "23:00"),
        weekend_showtimes=("12:30", "16:00", "19:30", "23:00"),
    ),
    Venue(
        id="dubaihills",
        name="HeimeShow Dubai Hills Estate",
        location="Dubai Hills Mall, Al Khail Road",
        formats=("Dolby Atmos", "Luxe Pods"),
        base_format="Dolby Atmos",
        weekday_showtimes=("11:45", "15:00", "18:30", "21:45"),
        weekend_showtimes=("10:30", "13:45", "17:00", "20:15", "23:15"),
    ),
    Venue(
        id="bluewaters",
        name="HeimeShow Bluewaters",
        location="Bluewaters Island, Wharf Avenue",
        formats=("SeaView Lounge", "ScreenX"),
        base_format="SeaView Lounge",
        weekday_showtimes=("11:15", "14:30", "17:45", "21:00"),
        weekend_showtimes=("09:30", "12:45", "16:10", "19:30", "22:40"),
    ),
    Venue(
        id="festivalcity",
        name="HeimeShow Festival City",
        location="Festival City Mall, Crescent Road",
        formats=("MX4D", "Majlis Suites"),
        base_format="MX4D",
        weekday_showtimes=("12:00", "15:15", "18:30", "21:45"),
        weekend_showtimes=("10:15", "13:30", "16:45", "20:00", "23:10"),
    ),
)

DEFAULT_CATALOG = VenueCatalog(DEFAULT_VENUES)
