"""
Cross-screen hand-off

A booking moves between screens as a flat set of string parameters (query
string on the web). The schema is versioned through the ``v`` key. Decoding
never raises: missing or malformed values fall back to placeholder display
values, so a truncated link still renders a screen.
"""

from typing import Any, Dict, List, Mapping, TYPE_CHECKING
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from heimeshow.booking.selection import PLACEHOLDER_TITLE

if TYPE_CHECKING:
    from heimeshow.booking.selection import SelectionState

logger = logging.getLogger(__name__)

HANDOFF_VERSION = 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else None


class BookingHandoff(BaseModel):
    """Flat, string-keyed booking state carried from one screen to the next"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: int = Field(HANDOFF_VERSION, alias="v")
    movie_id: str = Field("", alias="id")
    title: str = PLACEHOLDER_TITLE
    theatre_id: str = Field("", alias="theatreId")
    theatre: str = "HeimeShow Venue"
    showtime: str = "TBA"
    date: str = ""
    date_readable: str = Field("—", alias="dateReadable")
    format: str = "Premium Experience"
    seats: List[str] = Field(default_factory=list)
    total: int = 0

    @field_validator(
        "movie_id", "title", "theatre_id", "theatre", "showtime",
        "date", "date_readable", "format",
        mode="before",
    )
    @classmethod
    def text_or_default(cls, v: Any, info: ValidationInfo) -> str:
        default = cls.model_fields[info.field_name].default
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str):
            return default
        return v.strip() or default

    @field_validator("seats", mode="before")
    @classmethod
    def split_seats(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            items = v.split(",")
        elif isinstance(v, (list, tuple)):
            items = [item for item in v if isinstance(item, str)]
        else:
            return []
        return [item.strip() for item in items if item and item.strip()]

    @field_validator("total", mode="before")
    @classmethod
    def parse_total(cls, v: Any) -> int:
        parsed = _leading_int(v)
        return parsed if parsed is not None else 0

    @field_validator("version", mode="before")
    @classmethod
    def parse_version(cls, v: Any) -> int:
        parsed = _leading_int(v)
        return parsed if parsed is not None else HANDOFF_VERSION

    @classmethod
    def from_state(cls, state: "SelectionState") -> "BookingHandoff":
        values: Dict[str, Any] = {
            "movie_id": state.subject.movie_id,
            "title": state.subject.title,
            "date": state.active_day.iso,
            "date_readable": state.active_day.readable,
            "seats": state.selected_seats,
            "total": state.get_total().total,
        }
        if state.venue is not None:
            values["theatre_id"] = state.venue.id
            values["theatre"] = state.venue.name
            values["showtime"] = state.showtime
            values["format"] = state.format or state.venue.base_format
        return cls(**values)

    def to_params(self) -> Dict[str, str]:
        """Flatten to URL-parameter-safe strings"""
        return {
            "v": str(self.version),
            "id": self.movie_id,
            "title": self.title,
            "theatreId": self.theatre_id,
            "theatre": self.theatre,
            "showtime": self.showtime,
            "date": self.date,
            "dateReadable": self.date_readable,
            "format": self.format,
            "seats": ",".join(self.seats),
            "total": str(self.total),
        }


HANDOFF_KEYS = frozenset(
    field.alias or name for name, field in BookingHandoff.model_fields.items()
)


def encode_handoff(state: "SelectionState") -> Dict[str, str]:
    return BookingHandoff.from_state(state).to_params()


def decode_handoff(params: Any) -> BookingHandoff:
    """
    Parse hand-off parameters, degrading to placeholders instead of failing.
    """
    if not isinstance(params, Mapping):
        return BookingHandoff()

    known = {key: params[key] for key in params if key in HANDOFF_KEYS}
    try:
        handoff = BookingHandoff.model_validate(known)
    except PydanticValidationError as e:
        logger.warning(f"Discarding malformed hand-off parameters: {e.error_count()} errors")
        return BookingHandoff()

    if handoff.version != HANDOFF_VERSION:
        logger.warning(f"Hand-off version {handoff.version} decoded as v{HANDOFF_VERSION}")
    return handoff
