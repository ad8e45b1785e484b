"""
Unit tests for the cross-screen hand-off and selection restore
"""

from datetime import date

import pytest

from heimeshow.booking.calendar import build_calendar_window
from heimeshow.booking.handoff import HANDOFF_VERSION, BookingHandoff, decode_handoff, encode_handoff
from heimeshow.booking.selection import SelectionState, Stage


@pytest.fixture
def booked_state(seat_ready_state):
    seat_ready_state.toggle_seat("D1")
    seat_ready_state.toggle_seat("A3")
    return seat_ready_state


@pytest.mark.unit
class TestEncodeHandoff:
    """Flattening a selection into parameters"""

    def test_encode_full_selection(self, booked_state):
        params = encode_handoff(booked_state)

        assert params == {
            "v": "1",
            "id": "550",
            "title": "Desert Lights",
            "theatreId": "marina",
            "theatre": "HeimeShow Marina Mall",
            "showtime": "17:15",
            "date": "2026-10-16",
            "dateReadable": "Friday 16 October",
            "format": "IMAX Laser",
            "seats": "A3,D1",
            "total": "240",
        }

    def test_encode_without_showtime_uses_placeholders(self, state):
        params = encode_handoff(state)

        assert params["theatreId"] == ""
        assert params["theatre"] == "HeimeShow Venue"
        assert params["showtime"] == "TBA"
        assert params["format"] == "Premium Experience"
        assert params["seats"] == ""
        assert params["total"] == "0"
        assert params["date"] == "2026-10-14"

    def test_all_values_are_strings(self, booked_state):
        assert all(isinstance(value, str) for value in encode_handoff(booked_state).values())


@pytest.mark.unit
class TestDecodeHandoff:
    """Lenient parsing of incoming parameters"""

    def test_empty_params_give_placeholders(self):
        handoff = decode_handoff({})

        assert handoff.version == HANDOFF_VERSION
        assert handoff.movie_id == ""
        assert handoff.title == "HeimeShow Feature"
        assert handoff.theatre == "HeimeShow Venue"
        assert handoff.showtime == "TBA"
        assert handoff.date_readable == "—"
        assert handoff.format == "Premium Experience"
        assert handoff.seats == []
        assert handoff.total == 0

    @pytest.mark.parametrize("params", [None, "seats=A3", ["A3"], 42])
    def test_non_mapping_params(self, params):
        assert decode_handoff(params) == BookingHandoff()

    def test_malformed_values_fall_back(self):
        handoff = decode_handoff({
            "title": "   ",
            "theatre": ["not", "text"],
            "total": "abc",
            "seats": {"A3": True},
            "unknown": "ignored",
        })

        assert handoff.title == "HeimeShow Feature"
        assert handoff.theatre == "HeimeShow Venue"
        assert handoff.total == 0
        assert handoff.seats == []

    def test_seats_and_total_parsing(self):
        handoff = decode_handoff({"seats": " A3, ,D1 ", "total": "240.50"})

        assert handoff.seats == ["A3", "D1"]
        assert handoff.total == 240

    def test_numeric_values_accepted(self):
        handoff = decode_handoff({"id": 550, "total": 385})

        assert handoff.movie_id == "550"
        assert handoff.total == 385

    def test_other_version_still_decoded(self):
        handoff = decode_handoff({"v": "2", "title": "Desert Lights"})

        assert handoff.version == 2
        assert handoff.title == "Desert Lights"

    def test_round_trip(self, booked_state):
        params = encode_handoff(booked_state)

        assert decode_handoff(params).to_params() == params


@pytest.mark.unit
class TestRestore:
    """Rebuilding a selection on the next screen"""

    def test_restore_reproduces_selection(self, booked_state, signed_in, calendar):
        handoff = decode_handoff(encode_handoff(booked_state))

        restored = SelectionState.restore(handoff, signed_in, calendar=calendar)

        assert restored.active_day.index == 2
        assert restored.venue.id == "marina"
        assert restored.showtime == "17:15"
        assert restored.format == "IMAX Laser"
        assert restored.selected_seats == ["A3", "D1"]
        assert restored.get_total().total == 240
        assert restored.stage is Stage.REVIEW_PAYMENT

    def test_restore_bypasses_session_gate(self, booked_state, signed_out, calendar):
        handoff = decode_handoff(encode_handoff(booked_state))

        restored = SelectionState.restore(handoff, signed_out, calendar=calendar)

        assert restored.selected_seats == ["A3", "D1"]

    def test_restore_drops_blocked_and_unknown_seats(self, booked_state, signed_in, calendar):
        params = encode_handoff(booked_state)
        params["seats"] = "A1,A3,Z9,F7,D1,A3"

        restored = SelectionState.restore(decode_handoff(params), signed_in, calendar=calendar)

        assert restored.selected_seats == ["A3", "D1"]

    def test_restore_recomputes_total(self, booked_state, signed_in, calendar):
        params = encode_handoff(booked_state)
        params["total"] = "1"

        restored = SelectionState.restore(decode_handoff(params), signed_in, calendar=calendar)

        assert restored.get_total().total == 240

    def test_restore_keeps_carried_day_after_window_moves(self, booked_state, signed_in):
        params = encode_handoff(booked_state)
        later_window = build_calendar_window(date(2026, 10, 18))

        restored = SelectionState.restore(
            decode_handoff(params), signed_in, calendar=later_window, keep_carried_day=True
        )

        assert restored.active_day.iso == "2026-10-16"
        assert restored.active_day.is_weekend is True
        assert restored.venue.id == "marina"
        assert restored.showtime == "17:15"
        assert restored.format == "IMAX Laser"
        assert restored.selected_seats == ["A3", "D1"]
        assert restored.toggle_seat("B4") is True
        next_params = encode_handoff(restored)
        assert next_params["date"] == "2026-10-16"
        assert next_params["dateReadable"] == "Friday 16 October"
        assert next_params["theatreId"] == "marina"
        assert next_params["showtime"] == "17:15"
        assert next_params["seats"] == "A3,B4,D1"

    def test_restore_malformed_carried_day_uses_first_day(self, booked_state, signed_in, calendar):
        params = encode_handoff(booked_state)
        params["date"] = "next friday"

        restored = SelectionState.restore(
            decode_handoff(params), signed_in, calendar=calendar, keep_carried_day=True
        )

        # 17:15 is not a weekday showtime at Marina, so venue and seats go too
        assert restored.active_day.index == 0
        assert restored.venue is None
        assert restored.selected_seats == []

    def test_restore_outside_window_on_booking_screen(self, booked_state, signed_in, calendar):
        params = encode_handoff(booked_state)
        params["date"] = "2026-12-25"

        restored = SelectionState.restore(decode_handoff(params), signed_in, calendar=calendar)

        assert restored.active_day.index == 0
        assert restored.venue is None

    def test_restore_with_unsupported_format_uses_base(self, booked_state, signed_in, calendar):
        params = encode_handoff(booked_state)
        params["format"] = "4DX"

        restored = SelectionState.restore(decode_handoff(params), signed_in, calendar=calendar)

        assert restored.format == "IMAX Laser"

    def test_restore_from_nothing(self, signed_in, calendar):
        restored = SelectionState.restore(decode_handoff({}), signed_in, calendar=calendar)

        assert restored.subject.title == "HeimeShow Feature"
        assert restored.stage is Stage.SELECT_VENUE_TIME
