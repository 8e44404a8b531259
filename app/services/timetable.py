# app/services/timetable.py
import logging
from collections import OrderedDict
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.timetable import Period, TimetableEntry

logger = logging.getLogger(__name__)

TEACHER_BUSY = "Teacher is already assigned to another class at this time"


def entry_to_dict(entry: TimetableEntry) -> dict:
    return {
        "id": entry.id,
        "class_id": entry.class_id,
        "section_id": entry.section_id,
        "subject_id": entry.subject_id,
        "teacher_id": entry.teacher_id,
        "period_id": entry.period_id,
        "day_of_week": entry.day_of_week,
        "room_number": entry.room_number,
    }


def find_conflicts(
    db: Session,
    teacher_id: int,
    period_id: int,
    day_of_week: int,
    exclude_entry_id: Optional[int] = None,
) -> List[TimetableEntry]:
    """Entries that already book ``teacher_id`` for this period and day."""
    query = db.query(TimetableEntry).filter(
        TimetableEntry.teacher_id == teacher_id,
        TimetableEntry.period_id == period_id,
        TimetableEntry.day_of_week == day_of_week,
    )
    if exclude_entry_id is not None:
        query = query.filter(TimetableEntry.id != exclude_entry_id)
    return query.order_by(TimetableEntry.id).all()


def has_conflict(
    db: Session,
    teacher_id: int,
    period_id: int,
    day_of_week: int,
    exclude_entry_id: Optional[int] = None,
) -> Tuple[bool, List[TimetableEntry]]:
    conflicts = find_conflicts(db, teacher_id, period_id, day_of_week, exclude_entry_id)
    return bool(conflicts), conflicts


def _validate_slot(class_id, section_id, period_id, day_of_week) -> None:
    errors = {}
    for name, value in (("class_id", class_id), ("section_id", section_id), ("period_id", period_id)):
        if not value:
            errors[name] = "required"
    if day_of_week is None:
        errors["day_of_week"] = "required"
    elif not 0 <= day_of_week <= 6:
        errors["day_of_week"] = "must be between 0 (Sunday) and 6 (Saturday)"
    if errors:
        raise ValidationError("Missing required fields", errors=errors)


def save_entry(db: Session, payload) -> Tuple[TimetableEntry, bool]:
    """Create the slot's entry or update it in place. Returns ``(entry, created)``."""
    _validate_slot(payload.class_id, payload.section_id, payload.period_id, payload.day_of_week)

    if not db.query(Period).filter(Period.id == payload.period_id).first():
        raise NotFoundError("Period not found")

    existing = db.query(TimetableEntry).filter(
        TimetableEntry.class_id == payload.class_id,
        TimetableEntry.section_id == payload.section_id,
        TimetableEntry.period_id == payload.period_id,
        TimetableEntry.day_of_week == payload.day_of_week,
    ).first()

    if payload.teacher_id:
        busy, conflicts = has_conflict(
            db,
            payload.teacher_id,
            payload.period_id,
            payload.day_of_week,
            exclude_entry_id=existing.id if existing else None,
        )
        if busy:
            raise ConflictError(TEACHER_BUSY, context=entry_to_dict(conflicts[0]))

    created = existing is None
    entry = existing or TimetableEntry(
        class_id=payload.class_id,
        section_id=payload.section_id,
        period_id=payload.period_id,
        day_of_week=payload.day_of_week,
    )
    entry.subject_id = payload.subject_id
    entry.teacher_id = payload.teacher_id
    entry.room_number = payload.room_number
    if created:
        db.add(entry)

    try:
        db.commit()
    except IntegrityError:
        # The unique constraints caught a booking made between our check and commit
        db.rollback()
        raise ConflictError(TEACHER_BUSY)
    db.refresh(entry)

    logger.info(
        "Timetable entry %s %s: class_id=%s section_id=%s period_id=%s day=%s teacher_id=%s",
        entry.id, "created" if created else "updated",
        entry.class_id, entry.section_id, entry.period_id, entry.day_of_week, entry.teacher_id,
    )
    return entry, created


def delete_entry(db: Session, entry_id: int) -> None:
    entry = db.query(TimetableEntry).filter(TimetableEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Timetable entry not found")
    db.delete(entry)
    db.commit()


def _grouped_by_day(entries: List[TimetableEntry]) -> "OrderedDict[int, List[TimetableEntry]]":
    grouped: "OrderedDict[int, List[TimetableEntry]]" = OrderedDict()
    for entry in sorted(entries, key=lambda e: (e.day_of_week, e.period.order_index)):
        grouped.setdefault(entry.day_of_week, []).append(entry)
    return grouped


def class_timetable(db: Session, class_id: int, section_id: int):
    entries = (
        db.query(TimetableEntry)
        .options(joinedload(TimetableEntry.period), joinedload(TimetableEntry.subject))
        .filter(TimetableEntry.class_id == class_id, TimetableEntry.section_id == section_id)
        .all()
    )
    return _grouped_by_day(entries)


def teacher_timetable(db: Session, teacher_id: int):
    entries = (
        db.query(TimetableEntry)
        .options(joinedload(TimetableEntry.period), joinedload(TimetableEntry.subject))
        .filter(TimetableEntry.teacher_id == teacher_id)
        .all()
    )
    return _grouped_by_day(entries)


def list_periods(db: Session) -> List[Period]:
    return db.query(Period).order_by(Period.order_index).all()


def create_period(db: Session, payload) -> Period:
    period = Period(**payload.model_dump())
    db.add(period)
    db.commit()
    db.refresh(period)
    return period
