"""
Tests del chequeo de disponibilidad de cocheras
"""
from datetime import datetime, timedelta, timezone

import pytest

from conftest import at
from cocheras.enums.reservation_status import ReservationStatus
from cocheras.exceptions import InvalidArgument
from cocheras.schemas.space import SpaceSearchParams
from cocheras.services.availability import is_available, overlaps, validate_window
from cocheras.utils.clock import to_naive_utc


def test_overlaps_counts_touching_endpoints():
    assert overlaps(at(10), at(12), at(12), at(14))
    assert overlaps(at(10), at(12), at(8), at(10))
    assert overlaps(at(10), at(12), at(11), at(13))
    assert not overlaps(at(10), at(12), at(12, 1), at(14))


def test_validate_window_rejects_empty_or_inverted_window():
    with pytest.raises(InvalidArgument):
        validate_window(at(12), at(12))
    with pytest.raises(InvalidArgument):
        validate_window(at(13), at(12))


def test_free_space_is_available(db, space):
    assert is_available(db, space.id, at(10), at(12))


def test_overlapping_reservation_blocks_space(db, space, renter, make_reservation):
    make_reservation(renter, space, at(10), at(12))

    assert not is_available(db, space.id, at(11), at(13))
    assert not is_available(db, space.id, at(12), at(14))
    assert not is_available(db, space.id, at(9), at(15))
    assert is_available(db, space.id, at(12, 1), at(14))


def test_cancelled_reservation_does_not_block(db, space, renter, make_reservation):
    make_reservation(renter, space, at(10), at(12), status=ReservationStatus.CANCELADA)

    assert is_available(db, space.id, at(10), at(12))


def test_completed_reservation_still_blocks(db, space, renter, make_reservation):
    make_reservation(renter, space, at(10), at(12), status=ReservationStatus.COMPLETADA)

    assert not is_available(db, space.id, at(11), at(12))


def test_excluded_reservation_is_ignored(db, space, renter, make_reservation):
    reservation = make_reservation(renter, space, at(10), at(12))

    assert is_available(
        db, space.id, at(11), at(13), exclude_reservation_id=reservation.id
    )


def test_reservations_of_other_spaces_are_ignored(db, space, owner, renter, make_reservation):
    from cocheras.models.space import Space

    other = Space(id=2, owner_id=owner.id, address="Otra 1", hourly_price=5)
    db.add(other)
    db.commit()
    make_reservation(renter, other, at(10), at(12))

    assert is_available(db, space.id, at(10), at(12))


def test_is_available_validates_window(db, space):
    with pytest.raises(InvalidArgument):
        is_available(db, space.id, at(12), at(10))


def test_search_params_normalize_timezones():
    params = SpaceSearchParams(
        start=datetime(2030, 1, 1, 10, tzinfo=timezone(timedelta(hours=-3))),
        end=datetime(2030, 1, 1, 15, tzinfo=timezone.utc),
    )

    assert params.start == at(13)
    assert params.end == at(15)
    assert params.start.tzinfo is None
    assert to_naive_utc(at(9)) == at(9)
    assert to_naive_utc(None) is None
