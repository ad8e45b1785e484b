"""
Auditorium seat map and pricing policy
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
import enum
import re

SEAT_ID_PATTERN = re.compile(r"^([A-Z])([1-9][0-9]*)$")


class SeatClass(str, enum.Enum):
    STANDARD = "standard"
    PREMIUM = "premium"


@dataclass(frozen=True)
class SeatRow:
    row: str
    count: int
    premium: bool = False
    split_after: Optional[int] = None  # aisle gap position, presentational only

    @property
    def seat_class(self) -> SeatClass:
        return SeatClass.PREMIUM if self.premium else SeatClass.STANDARD

    def seat_ids(self) -> List[str]:
        return [f"{self.row}{number}" for number in range(1, self.count + 1)]


@dataclass(frozen=True)
class SeatCell:
    id: str
    number: int
    premium: bool
    blocked: bool
    selected: bool


@dataclass(frozen=True)
class PricingPolicy:
    """Unit price per seat class"""
    standard: int = 95
    premium: int = 145
    currency: str = "AED"

    def price_for(self, seat_class: SeatClass) -> int:
        return self.premium if seat_class is SeatClass.PREMIUM else self.standard


@dataclass(frozen=True)
class SeatMap:
    """
    Fixed auditorium layout plus the seats that can never be selected.
    """
    rows: Tuple[SeatRow, ...]
    blocked: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        letters = [row.row for row in self.rows]
        if len(set(letters)) != len(letters):
            raise ValueError("Seat rows must have unique letters")

    def row(self, letter: str) -> Optional[SeatRow]:
        for row in self.rows:
            if row.row == letter:
                return row
        return None

    def row_of(self, seat_id: str) -> Optional[SeatRow]:
        """Row a well-formed, in-range seat id belongs to, else None"""
        match = SEAT_ID_PATTERN.match(seat_id or "")
        if not match:
            return None
        row = self.row(match.group(1))
        if row is None or int(match.group(2)) > row.count:
            return None
        return row

    def is_valid(self, seat_id: str) -> bool:
        return self.row_of(seat_id) is not None

    def is_blocked(self, seat_id: str) -> bool:
        return seat_id in self.blocked

    def is_selectable(self, seat_id: str) -> bool:
        return self.is_valid(seat_id) and not self.is_blocked(seat_id)

    def seat_class(self, seat_id: str) -> SeatClass:
        row = self.row_of(seat_id)
        if row is None:
            raise KeyError(seat_id)
        return row.seat_class

    def ordered(self, seat_ids: Iterable[str]) -> List[str]:
        """Seat ids sorted by layout position (row order, then number)"""
        position: Dict[str, int] = {}
        for row_index, row in enumerate(self.rows):
            position[row.row] = row_index
        return sorted(
            seat_ids,
            key=lambda seat_id: (position[seat_id[0]], int(seat_id[1:])),
        )

    def grid(self, selected: Iterable[str] = ()) -> List[dict]:
        """
        Rows of seat cells for rendering; ``None`` marks the aisle gap.
        """
        chosen = set(selected)
        rendered = []
        for row in self.rows:
            cells: List[Optional[SeatCell]] = [
                SeatCell(
                    id=seat_id,
                    number=number,
                    premium=row.premium,
                    blocked=seat_id in self.blocked,
                    selected=seat_id in chosen,
                )
                for number, seat_id in enumerate(row.seat_ids(), start=1)
            ]
            if row.split_after and row.split_after < len(cells):
                cells.insert(row.split_after, None)
            rendered.append({"row": row.row, "premium": row.premium, "seats": cells})
        return rendered


DEFAULT_SEAT_MAP = SeatMap(
    rows=(
        SeatRow("A", 12, premium=False, split_after=6),
        SeatRow("B", 12, premium=False, split_after=6),
        SeatRow("C", 12, premium=False, split_after=6),
        SeatRow("D", 10, premium=True, split_after=5),
        SeatRow("E", 10, premium=True, split_after=5),
        SeatRow("F", 8, premium=True, split_after=4),
    ),
    blocked=frozenset({"A1", "A2", "F7"}),
)

DEFAULT_PRICING = PricingPolicy(standard=95, premium=145, currency="AED")
