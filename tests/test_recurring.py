from datetime import date

import pytest

from arena.domain.bookings.allocator import BookingAllocator
from arena.domain.bookings.recurring import (
    RecurringSeriesExpander,
    generate_series_id,
    occurrence_dates,
)
from arena.errors import NotFoundError, ValidationError
from arena.models import Booking


@pytest.fixture
def expander(db, clock):
    return RecurringSeriesExpander(db, clock=clock)


def test_weekly_dates():
    dates = occurrence_dates(date(2024, 1, 1), date(2024, 1, 22), "weekly")

    assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]


def test_monthly_dates_clamp_to_month_end():
    dates = occurrence_dates(date(2024, 1, 31), date(2024, 5, 31), "monthly")

    assert dates == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
        date(2024, 5, 31),
    ]


def test_occurrence_limit():
    with pytest.raises(ValueError):
        occurrence_dates(date(2024, 1, 1), date(2024, 12, 31), "weekly", limit=10)


def test_unknown_pattern():
    with pytest.raises(ValueError):
        occurrence_dates(date(2024, 1, 1), date(2024, 2, 1), "daily")


def test_series_id_format():
    series_id = generate_series_id()
    prefix, millis, suffix = series_id.split("-")

    assert prefix == "recurring"
    assert millis.isdigit()
    assert len(suffix) == 9
    assert generate_series_id() != series_id


def test_weekly_series_skips_taken_date(db, expander, user, other_user, court, clock):
    BookingAllocator(db, clock=clock).create_booking(other_user.id, court.id, "2024-01-15", 18)

    result = expander.create_recurring_bookings(
        user.id, court.id, "2024-01-01", 18, "weekly", "2024-01-22"
    )

    assert result.total_attempted == 4
    assert result.created_count == 3
    assert result.partial is True
    assert result.skipped_dates == ["2024-01-15"]
    assert [b.booking_date for b in result.created] == ["2024-01-01", "2024-01-08", "2024-01-22"]
    for booking in result.created:
        assert booking.is_recurring is True
        assert booking.recurring_series_id == result.series_id
        assert booking.recurring_pattern == "weekly"
        assert booking.recurring_end_date == "2024-01-22"


def test_series_with_every_date_taken_is_still_a_result(db, expander, user, other_user, court, clock):
    allocator = BookingAllocator(db, clock=clock)
    for day in ("2024-01-01", "2024-01-08"):
        allocator.create_booking(other_user.id, court.id, day, 18)

    result = expander.create_recurring_bookings(
        user.id, court.id, "2024-01-01", 18, "weekly", "2024-01-08"
    )

    assert result.created_count == 0
    assert result.total_attempted == 2


def test_monthly_series_books_clamped_dates(expander, user, court):
    result = expander.create_recurring_bookings(
        user.id, court.id, "2024-01-31", 7, "monthly", "2024-04-30"
    )

    assert [b.booking_date for b in result.created] == [
        "2024-01-31",
        "2024-02-29",
        "2024-03-31",
        "2024-04-30",
    ]
    assert result.partial is False


def test_missing_court_aborts_before_booking(db, expander, user):
    with pytest.raises(NotFoundError):
        expander.create_recurring_bookings(user.id, 999, "2024-01-01", 18, "weekly", "2024-01-22")

    assert db.query(Booking).count() == 0


def test_end_before_start_is_an_empty_series(expander, user, court):
    result = expander.create_recurring_bookings(
        user.id, court.id, "2024-01-31", 18, "weekly", "2024-01-01"
    )

    assert result.total_attempted == 0
    assert result.created == []
    assert result.partial is False


def test_unknown_pattern_is_rejected(expander, user, court):
    with pytest.raises(ValidationError):
        expander.create_recurring_bookings(
            user.id, court.id, "2024-01-01", 18, "daily", "2024-01-22"
        )


def test_structural_failure_mid_series_stops_and_propagates(db, user, court, clock):
    class FailingAllocator(BookingAllocator):
        calls = 0

        def create_booking(self, *args, **kwargs):
            FailingAllocator.calls += 1
            if FailingAllocator.calls == 2:
                raise NotFoundError("Court", court.id)
            return super().create_booking(*args, **kwargs)

    expander = RecurringSeriesExpander(db, allocator=FailingAllocator(db, clock=clock))

    with pytest.raises(NotFoundError):
        expander.create_recurring_bookings(
            user.id, court.id, "2024-01-01", 18, "weekly", "2024-01-29"
        )

    # The first occurrence was committed before the failure; nothing after it
    assert FailingAllocator.calls == 2
    assert [b.booking_date for b in db.query(Booking).all()] == ["2024-01-01"]
