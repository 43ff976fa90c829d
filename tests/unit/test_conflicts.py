"""Unit tests for booking overlap checks and suggestions."""

import datetime as dt
import logging
from typing import Callable

import pytest

from camrent.models import Booking, BookingType, RentalStatus
from camrent.services.conflicts import (
    BLOCKING_STATUSES,
    check_booking,
    check_conflicts,
    check_potential_bookings,
    collect_conflict_report,
    find_conflicts,
    has_conflict,
    ranges_overlap,
    suggest_alternative_dates,
    utilization_report,
)


class TestRangesOverlap:
    """Tests for inclusive range overlap."""

    def test_shared_boundary_day_overlaps(self) -> None:
        assert ranges_overlap("2024-06-10", "2024-06-15", "2024-06-15", "2024-06-20")

    def test_adjacent_ranges_do_not_overlap(self) -> None:
        assert not ranges_overlap("2024-06-10", "2024-06-15", "2024-06-16", "2024-06-20")

    def test_containment(self) -> None:
        assert ranges_overlap("2024-06-01", "2024-06-30", "2024-06-10", "2024-06-11")

    def test_symmetric(self) -> None:
        a = ("2024-06-10", "2024-06-15")
        b = ("2024-06-14", "2024-06-18")
        assert ranges_overlap(*a, *b) == ranges_overlap(*b, *a)


class TestFindConflicts:
    """Tests for conflict detection against existing bookings."""

    def test_boundary_scenario(self, confirmed_booking: Booking) -> None:
        """Confirmed 10..15: 15..20 and 9..10 conflict, 16..20 and 5..9 do not."""
        existing = [confirmed_booking]

        assert has_conflict("cam-1", "2024-06-15", "2024-06-20", None, existing)
        assert has_conflict("cam-1", "2024-06-09", "2024-06-10", None, existing)
        assert not has_conflict("cam-1", "2024-06-16", "2024-06-20", None, existing)
        assert not has_conflict("cam-1", "2024-06-05", "2024-06-09", None, existing)

    def test_other_camera_never_conflicts(self, confirmed_booking: Booking) -> None:
        assert not has_conflict("cam-2", "2024-06-10", "2024-06-15", None, [confirmed_booking])

    def test_booking_excluded_from_its_own_conflicts(self, confirmed_booking: Booking) -> None:
        assert not has_conflict(
            "cam-1", "2024-06-10", "2024-06-15", confirmed_booking.id, [confirmed_booking]
        )

    @pytest.mark.parametrize("status", list(RentalStatus))
    def test_only_blocking_statuses_conflict(
        self,
        status: RentalStatus,
        make_booking: Callable[..., Booking],
    ) -> None:
        existing = [make_booking("bk-existing", rental_status=status)]

        result = has_conflict("cam-1", "2024-06-12", "2024-06-13", None, existing)

        assert result == (status in BLOCKING_STATUSES)

    def test_empty_or_missing_snapshot(self) -> None:
        assert find_conflicts("cam-1", "2024-06-10", "2024-06-15", None, []) == []
        assert find_conflicts("cam-1", "2024-06-10", "2024-06-15", None, None) == []

    def test_datetime_bounds_are_normalised(self, confirmed_booking: Booking) -> None:
        """A candidate starting late on the 15th still hits the last day."""
        assert has_conflict(
            "cam-1",
            dt.datetime(2024, 6, 15, 23, 0),
            dt.datetime(2024, 6, 18, 9, 0),
            None,
            [confirmed_booking],
        )

    def test_returns_conflicts_in_input_order(self, make_booking: Callable[..., Booking]) -> None:
        first = make_booking("bk-a", start="2024-06-01", end="2024-06-12", rental_status=RentalStatus.ACTIVE)
        second = make_booking("bk-b", start="2024-06-14", end="2024-06-20", rental_status=RentalStatus.CONFIRMED)

        conflicts = find_conflicts("cam-1", "2024-06-10", "2024-06-15", None, [first, second])

        assert [b.id for b in conflicts] == ["bk-a", "bk-b"]


class TestCheckConflicts:
    """Tests for the detailed conflict result."""

    def test_detailed_result(self, confirmed_booking: Booking) -> None:
        result = check_conflicts("cam-1", "2024-06-14", "2024-06-18", None, [confirmed_booking])

        assert result.has_conflicts is True
        assert result.conflicting_bookings == [confirmed_booking]

    def test_no_conflicts(self) -> None:
        result = check_conflicts("cam-1", "2024-06-14", "2024-06-18", None, [])

        assert result.has_conflicts is False
        assert result.conflicting_bookings == []

    def test_check_booking_excludes_itself(
        self,
        confirmed_booking: Booking,
        potential_booking: Booking,
    ) -> None:
        result = check_booking(confirmed_booking, [confirmed_booking, potential_booking])

        assert result.has_conflicts is False


class TestCheckPotentialBookings:
    """Tests for the concurrent batch check."""

    async def test_flags_each_booking(
        self,
        confirmed_booking: Booking,
        potential_booking: Booking,
        make_booking: Callable[..., Booking],
    ) -> None:
        free = make_booking(
            "bk-free",
            start="2024-06-20",
            end="2024-06-22",
            booking_type=BookingType.TEMPORARY,
        )

        results = await check_potential_bookings(
            [potential_booking, free],
            lambda booking: [confirmed_booking],
        )

        assert results == {"bk-potential": True, "bk-free": False}

    async def test_failed_lookup_counts_as_no_conflict(
        self,
        confirmed_booking: Booking,
        potential_booking: Booking,
        make_booking: Callable[..., Booking],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        broken = make_booking("bk-broken", camera_id="cam-broken", booking_type=BookingType.TEMPORARY)

        def lookup(booking: Booking) -> list[Booking]:
            if booking.camera_id == "cam-broken":
                raise RuntimeError("store unavailable")
            return [confirmed_booking]

        with caplog.at_level(logging.ERROR):
            results = await check_potential_bookings([potential_booking, broken], lookup)

        assert results == {"bk-potential": True, "bk-broken": False}
        assert "bk-broken" in caplog.text

    async def test_empty_batch(self) -> None:
        assert await check_potential_bookings([], lambda booking: []) == {}


class TestConflictReport:
    """Tests for pairing potential bookings with their conflicts."""

    def test_only_conflicting_potentials_reported(
        self,
        confirmed_booking: Booking,
        potential_booking: Booking,
        make_booking: Callable[..., Booking],
    ) -> None:
        free = make_booking("bk-free", start="2024-07-01", end="2024-07-02", booking_type=BookingType.TEMPORARY)

        report = collect_conflict_report(
            [potential_booking, free],
            [confirmed_booking, potential_booking, free],
        )

        assert len(report) == 1
        assert report[0].potential_booking.id == "bk-potential"
        assert [b.id for b in report[0].conflicts] == ["bk-confirmed"]


class TestSuggestAlternativeDates:
    """Tests for alternative range suggestions."""

    def test_steps_by_rental_length(self, confirmed_booking: Booking) -> None:
        """A 3-day request around the confirmed booking."""
        suggestions = suggest_alternative_dates(
            "cam-1", "2024-06-12", "2024-06-14", [confirmed_booking]
        )

        assert [s.offset_days for s in suggestions] == [-14, -11, -8, -5, 4]
        assert suggestions[0].start_date == dt.date(2024, 5, 29)
        assert suggestions[0].end_date == dt.date(2024, 5, 31)
        assert suggestions[-1].start_date == dt.date(2024, 6, 16)
        assert suggestions[-1].end_date == dt.date(2024, 6, 18)

    def test_requested_range_itself_is_skipped(self, confirmed_booking: Booking) -> None:
        """A 7-day request steps -14, -7, 0, 7, 14 and skips 0."""
        suggestions = suggest_alternative_dates(
            "cam-1", "2024-06-12", "2024-06-18", [confirmed_booking]
        )

        assert [s.offset_days for s in suggestions] == [-14, 7, 14]

    def test_max_suggestions(self) -> None:
        suggestions = suggest_alternative_dates(
            "cam-1", "2024-06-12", "2024-06-12", [], max_suggestions=3
        )

        assert [s.offset_days for s in suggestions] == [-14, -13, -12]

    def test_reversed_range(self) -> None:
        with pytest.raises(ValueError):
            suggest_alternative_dates("cam-1", "2024-06-12", "2024-06-10", [])


class TestUtilizationReport:
    """Tests for booked-day utilization."""

    def test_counts_confirmed_and_active_within_period(
        self,
        confirmed_booking: Booking,
        make_booking: Callable[..., Booking],
    ) -> None:
        existing = [
            confirmed_booking,  # 6 days
            make_booking("bk-active", start="2024-06-28", end="2024-07-05", rental_status=RentalStatus.ACTIVE),
            make_booking("bk-pending", start="2024-06-01", end="2024-06-03"),
            make_booking("bk-done", start="2024-06-20", end="2024-06-21", rental_status=RentalStatus.COMPLETED),
            make_booking("bk-other", camera_id="cam-2", rental_status=RentalStatus.CONFIRMED),
        ]

        report = utilization_report("cam-1", "2024-06-01", "2024-06-30", existing)

        assert report.total_booked_days == 9
        assert report.total_period_days == 30
        assert report.utilization_percentage == 30.0

    def test_rounded_percentage(self, make_booking: Callable[..., Booking]) -> None:
        existing = [make_booking(start="2024-06-01", end="2024-06-01", rental_status=RentalStatus.CONFIRMED)]

        report = utilization_report("cam-1", "2024-06-01", "2024-06-03", existing)

        assert report.utilization_percentage == 33.33

    def test_empty_period(self) -> None:
        report = utilization_report("cam-1", "2024-06-10", "2024-06-01", [])

        assert report.total_period_days == 0
        assert report.utilization_percentage == 0.0
