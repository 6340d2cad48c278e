"""Tests for RestaurantDirectory and ReservationStore."""
from __future__ import annotations

from datetime import datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from quicktable.models.reservation import Reservation
from quicktable.schemas.reservation import ReservationStatus
from quicktable.schemas.restaurant import RestaurantRecord
from quicktable.services.directory import (
    DuplicateReservationError,
    InvalidStatusTransitionError,
    ReservationStore,
    RestaurantDirectory,
    SlugConflictError,
    check_transition,
    escape_like,
    generate_reservation_id,
)
from tests.factories import SATURDAY, SUNDAY, weekly_hours


@pytest_asyncio.fixture
async def directory(db_session: AsyncSession) -> RestaurantDirectory:
    return RestaurantDirectory(db_session)


@pytest_asyncio.fixture
async def store(db_session: AsyncSession) -> ReservationStore:
    return ReservationStore(db_session)


def restaurant_record(**overrides) -> RestaurantRecord:
    data = {
        "id": "rest-new",
        "slug": "la-table",
        "name": "La Table",
        "operatingHours": weekly_hours("12:00", "23:00"),
        "tables": {"count": 8, "capacity": 2},
        "avgDiningDuration": 75,
        "bookingInterval": 15,
        "blockedDates": ["2026-12-25"],
    }
    data.update(overrides)
    return RestaurantRecord(**data)


class TestRestaurantDirectory:
    async def test_find_by_slug(self, directory, sample_restaurant):
        found = await directory.find_by_slug("chez-amelie")

        assert found is not None
        assert found.id == sample_restaurant.id

    async def test_find_by_unknown_slug_returns_none(self, directory, sample_restaurant):
        assert await directory.find_by_slug("nowhere") is None

    async def test_save_creates_with_given_id(self, directory):
        restaurant = await directory.save(restaurant_record())

        assert restaurant.id == "rest-new"
        assert restaurant.tables == {"count": 8, "capacity": 2}
        assert restaurant.blocked_dates == ["2026-12-25"]
        assert restaurant.avg_dining_duration == 75

    async def test_save_generates_id_when_missing(self, directory):
        restaurant = await directory.save(restaurant_record(id=None))

        assert restaurant.id
        assert await directory.find_by_slug("la-table") is not None

    async def test_save_replaces_full_record(self, directory, sample_restaurant):
        record = restaurant_record(
            id=sample_restaurant.id,
            slug="chez-amelie",
            name="Chez Amélie & Fils",
            tables={"count": 6, "capacity": 4},
        )

        restaurant = await directory.save(record)

        assert restaurant.id == sample_restaurant.id
        assert restaurant.name == "Chez Amélie & Fils"
        assert restaurant.tables == {"count": 6, "capacity": 4}
        # Replace, not merge: fields absent from the record fall back to defaults
        assert restaurant.whatsapp_number == ""
        assert len(await directory.list()) == 1

    async def test_slug_conflict(self, directory, sample_restaurant):
        with pytest.raises(SlugConflictError):
            await directory.save(restaurant_record(slug="chez-amelie"))

    async def test_list_ordered_by_name(self, directory, sample_restaurant):
        await directory.save(restaurant_record(slug="aaa", name="Aux Armes"))

        names = [r.name for r in await directory.list()]

        assert names == ["Aux Armes", "Chez Amélie"]


class TestReservationStore:
    async def test_list_filters_by_date(self, store, sample_restaurant, sample_reservations):
        saturday = await store.list(sample_restaurant.id, on_date=SATURDAY)
        sunday = await store.list(sample_restaurant.id, on_date=SUNDAY)

        assert [r.customer_name for r in saturday] == ["Dupont", "Martin", "Bernard"]
        assert [r.customer_name for r in sunday] == ["Leroy"]

    async def test_list_all_dates_ordered(self, store, sample_restaurant, sample_reservations):
        everything = await store.list(sample_restaurant.id)

        assert [r.id for r in everything] == [
            "res-dupont",
            "res-martin",
            "res-bernard",
            "res-leroy",
        ]

    async def test_list_filters_by_status(self, store, sample_restaurant, sample_reservations):
        pending = await store.list(sample_restaurant.id, status=ReservationStatus.PENDING)

        assert {r.id for r in pending} == {"res-martin", "res-leroy"}

    async def test_list_search_name_case_insensitive(
        self, store, sample_restaurant, sample_reservations
    ):
        found = await store.list(sample_restaurant.id, search="dup")

        assert [r.id for r in found] == ["res-dupont"]

    async def test_list_search_phone(self, store, sample_restaurant, sample_reservations):
        found = await store.list(sample_restaurant.id, search="0612")

        assert [r.id for r in found] == ["res-bernard"]

    @pytest.mark.parametrize("search", ["_", "%", "D_pont", "\\"])
    async def test_list_search_wildcards_match_literally(
        self, store, sample_restaurant, sample_reservations, search
    ):
        assert await store.list(sample_restaurant.id, search=search) == []

    async def test_list_search_literal_underscore(self, store, sample_restaurant):
        await store.create(
            Reservation(
                id="res-underscore",
                restaurant_id=sample_restaurant.id,
                customer_name="Jean_Luc",
                date=SATURDAY,
                time="18:30",
                party_size=2,
            )
        )
        await store.create(
            Reservation(
                id="res-plain",
                restaurant_id=sample_restaurant.id,
                customer_name="JeanXLuc",
                date=SATURDAY,
                time="18:30",
                party_size=2,
            )
        )

        found = await store.list(sample_restaurant.id, search="n_L")

        assert [r.id for r in found] == ["res-underscore"]

    def test_escape_like(self):
        assert escape_like("50%_a\\b") == "50\\%\\_a\\\\b"

    async def test_list_other_restaurant_is_empty(self, store, sample_reservations):
        assert await store.list("someone-else") == []

    async def test_create_keeps_caller_id(self, store, sample_restaurant):
        reservation = await store.create(
            Reservation(
                id="client-id-1",
                restaurant_id=sample_restaurant.id,
                customer_name="Petit",
                date=SATURDAY,
                time="18:30",
                party_size=2,
            )
        )

        assert reservation.id == "client-id-1"
        assert reservation.status == "pending"
        assert reservation.created_at == reservation.updated_at

    async def test_create_generates_id(self, store, sample_restaurant):
        reservation = await store.create(
            Reservation(
                restaurant_id=sample_restaurant.id,
                customer_name="Petit",
                date=SATURDAY,
                time="18:30",
                party_size=2,
                status="confirmed",
            )
        )

        assert len(reservation.id) == 9
        assert reservation.status == "confirmed"

    async def test_create_duplicate_id(self, store, sample_restaurant, sample_reservations):
        with pytest.raises(DuplicateReservationError):
            await store.create(
                Reservation(
                    id="res-dupont",
                    restaurant_id=sample_restaurant.id,
                    customer_name="Imposter",
                    date=SATURDAY,
                    time="18:30",
                    party_size=2,
                )
            )

    async def test_update_status_stamps_updated_at(self, store, sample_reservations):
        before = datetime.utcnow()

        reservation = await store.update_status("res-martin", ReservationStatus.CONFIRMED)

        assert reservation is not None
        assert reservation.status == "confirmed"
        assert reservation.updated_at >= before
        assert reservation.created_at < before

    async def test_update_status_unknown_id_returns_none(self, store, sample_reservations):
        assert await store.update_status("missing", ReservationStatus.CANCELLED) is None

    async def test_flat_status_allows_any_move(self, store, sample_reservations):
        reservation = await store.update_status("res-bernard", ReservationStatus.PENDING)

        assert reservation.status == "pending"

    async def test_enforced_transitions_reject_reopening(
        self, db_session, sample_reservations
    ):
        store = ReservationStore(db_session, enforce_transitions=True)

        with pytest.raises(InvalidStatusTransitionError):
            await store.update_status("res-bernard", ReservationStatus.PENDING)

        await store.update_status("res-martin", ReservationStatus.CONFIRMED)
        completed = await store.update_status("res-martin", ReservationStatus.COMPLETED)
        assert completed.status == "completed"


class TestTransitions:
    @pytest.mark.parametrize(
        "current,new",
        [
            ("pending", ReservationStatus.CONFIRMED),
            ("pending", ReservationStatus.CANCELLED),
            ("confirmed", ReservationStatus.CANCELLED),
            ("confirmed", ReservationStatus.COMPLETED),
            ("completed", ReservationStatus.COMPLETED),
        ],
    )
    def test_allowed(self, current, new):
        check_transition(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            ("completed", ReservationStatus.PENDING),
            ("cancelled", ReservationStatus.CONFIRMED),
            ("pending", ReservationStatus.COMPLETED),
        ],
    )
    def test_rejected(self, current, new):
        with pytest.raises(InvalidStatusTransitionError):
            check_transition(current, new)


def test_generated_ids_are_short_and_distinct():
    ids = {generate_reservation_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(i) == 9 and i.isalnum() for i in ids)
