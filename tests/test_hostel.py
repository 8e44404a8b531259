from datetime import date

import pytest

from app.core.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from app.schemas.hostel import HostelCreate, RoomCreate
from app.services import hostel


@pytest.fixture
def room(db):
    building = hostel.create_hostel(db, HostelCreate(name="North Block", hostel_type="boys"))
    return hostel.create_room(db, building.id, RoomCreate(room_number="101", capacity=2, monthly_rent=1500))


def test_room_adds_to_hostel_capacity(db, room):
    assert room.hostel.total_capacity == 2
    assert room.occupied_capacity == 0


def test_invalid_hostel_type(db):
    with pytest.raises(ValidationError):
        hostel.create_hostel(db, HostelCreate(name="Annex", hostel_type="staff"))


def test_allocation_updates_occupancy(db, school, room):
    allocation = hostel.allocate_room(db, room.id, school.students[0].id, allocation_date=date(2026, 1, 5))
    db.refresh(room)
    assert allocation.status == "active"
    assert allocation.monthly_rent == 1500
    assert room.occupied_capacity == 1
    assert room.hostel.occupied_capacity == 1


def test_full_room_is_a_capacity_error(db, school, room):
    arif, nadia, tanvir = school.students
    hostel.allocate_room(db, room.id, arif.id)
    hostel.allocate_room(db, room.id, nadia.id)

    with pytest.raises(CapacityError, match="Room is full") as exc:
        hostel.allocate_room(db, room.id, tanvir.id)
    assert exc.value.context == {"available": 0, "requested": 1}


def test_one_active_allocation_per_student(db, school, room):
    other = hostel.create_room(db, room.hostel_id, RoomCreate(room_number="102", capacity=1))
    first = hostel.allocate_room(db, room.id, school.students[0].id)

    with pytest.raises(ConflictError, match="already has an active room allocation") as exc:
        hostel.allocate_room(db, other.id, school.students[0].id)
    assert exc.value.context == {"allocation_id": first.id}
    db.refresh(other)
    assert other.occupied_capacity == 0


def test_vacate_frees_the_bed_and_allows_reallocation(db, school, room):
    arif = school.students[0]
    allocation = hostel.allocate_room(db, room.id, arif.id)

    vacated = hostel.vacate_room(db, allocation.id, vacate_date=date(2026, 6, 30))
    assert (vacated.status, vacated.vacate_date) == ("vacated", date(2026, 6, 30))
    db.refresh(room)
    assert room.occupied_capacity == 0

    with pytest.raises(ConflictError, match="not active"):
        hostel.vacate_room(db, allocation.id)

    again = hostel.allocate_room(db, room.id, arif.id)
    assert hostel.student_allocation(db, arif.id).id == again.id


def test_student_without_allocation(db, school):
    with pytest.raises(NotFoundError, match="No active hostel allocation"):
        hostel.student_allocation(db, school.students[0].id)


def test_occupied_room_and_hostel_cannot_be_deleted(db, school, room):
    hostel.allocate_room(db, room.id, school.students[0].id)
    with pytest.raises(ConflictError):
        hostel.delete_room(db, room.id)
    with pytest.raises(ConflictError, match="active allocations"):
        hostel.delete_hostel(db, room.hostel_id)


def test_stats(db, school, room):
    hostel.allocate_room(db, room.id, school.students[0].id)
    stats = hostel.hostel_stats(db)
    assert stats == {
        "hostels": 1, "rooms": 1, "total_capacity": 2, "occupied": 1, "available": 1, "occupancy_rate": 50.0,
    }
