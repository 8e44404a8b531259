# app/services/attendance.py
"""
Daily class attendance.

A class/section day moves Unmarked -> Marked -> Finalized. While marked it
can be re-submitted any number of times; each submission replaces the
day's marks as a whole and recomputes the summary. Finalized days are
read-only.
"""
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.academic import Student
from app.db.models.attendance import STATUSES, AttendanceMark, ClassAttendanceSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentMarkedAbsent:
    """Published after an attendance write for every absent student."""
    student_id: int
    class_id: int
    section_id: int
    date: date


def _find_summary(db: Session, class_id: int, section_id: int, day: date) -> Optional[ClassAttendanceSummary]:
    return db.query(ClassAttendanceSummary).filter(
        ClassAttendanceSummary.class_id == class_id,
        ClassAttendanceSummary.section_id == section_id,
        ClassAttendanceSummary.date == day,
    ).first()


def _validate_records(records: Sequence) -> List[dict]:
    errors = {}
    seen = set()
    cleaned = []
    for index, record in enumerate(records):
        status = record.status or "present"
        if status not in STATUSES:
            errors[f"records[{index}].status"] = f"must be one of {', '.join(STATUSES)}"
        if record.student_id in seen:
            errors[f"records[{index}].student_id"] = "duplicate student"
        seen.add(record.student_id)
        cleaned.append({"student_id": record.student_id, "status": status, "remarks": record.remarks})
    if errors:
        raise ValidationError("Invalid attendance records", errors=errors)
    return cleaned


def mark_attendance(
    db: Session,
    class_id: int,
    section_id: int,
    day: date,
    records: Sequence,
    marked_by: Optional[int] = None,
) -> Tuple[ClassAttendanceSummary, List[StudentMarkedAbsent]]:
    missing = {
        name: "required"
        for name, value in (("class_id", class_id), ("section_id", section_id), ("date", day))
        if not value
    }
    if missing:
        raise ValidationError("Missing required fields", errors=missing)
    cleaned = _validate_records(records)

    student_ids = {r["student_id"] for r in cleaned}
    enrolled = {
        sid for (sid,) in db.query(Student.id).filter(
            Student.id.in_(student_ids),
            Student.class_id == class_id,
            Student.section_id == section_id,
        ).all()
    }
    unknown = student_ids - enrolled
    if unknown:
        raise NotFoundError(
            f"Student not found in this class and section: {', '.join(str(s) for s in sorted(unknown))}"
        )

    summary = _find_summary(db, class_id, section_id, day)
    if summary and summary.is_finalized:
        raise ConflictError("Attendance for this date is already finalized")

    counts = Counter(r["status"] for r in cleaned)

    try:
        # Replace-set: old marks and new marks are swapped in one transaction
        db.query(AttendanceMark).filter(
            AttendanceMark.class_id == class_id,
            AttendanceMark.section_id == section_id,
            AttendanceMark.date == day,
        ).delete(synchronize_session=False)

        for r in cleaned:
            db.add(AttendanceMark(
                student_id=r["student_id"],
                class_id=class_id,
                section_id=section_id,
                date=day,
                status=r["status"],
                remarks=r["remarks"],
                marked_by=marked_by,
            ))

        if summary is None:
            summary = ClassAttendanceSummary(
                class_id=class_id,
                section_id=section_id,
                date=day,
                is_finalized=False,
            )
            db.add(summary)

        summary.total_students = len(cleaned)
        summary.present_count = counts["present"]
        summary.absent_count = counts["absent"]
        summary.late_count = counts["late"]
        summary.excused_count = counts["excused"]
        summary.marked_by = marked_by

        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Attendance for this class and date was changed concurrently, please retry")
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(summary)
    logger.info(
        "Attendance marked for class_id=%s section_id=%s date=%s: %d students, %d absent",
        class_id, section_id, day, summary.total_students, summary.absent_count,
    )

    absences = [
        StudentMarkedAbsent(r["student_id"], class_id, section_id, day)
        for r in cleaned
        if r["status"] == "absent"
    ]
    return summary, absences


def finalize_attendance(db: Session, class_id: int, section_id: int, day: date) -> ClassAttendanceSummary:
    summary = _find_summary(db, class_id, section_id, day)
    if not summary:
        raise NotFoundError("Attendance has not been marked for this date")

    if not summary.is_finalized:
        summary.is_finalized = True
        db.commit()
        db.refresh(summary)
        logger.info("Attendance finalized for class_id=%s section_id=%s date=%s", class_id, section_id, day)
    return summary


def get_attendance_by_date(db: Session, class_id: int, section_id: int, day: date) -> List[AttendanceMark]:
    return (
        db.query(AttendanceMark)
        .filter(
            AttendanceMark.class_id == class_id,
            AttendanceMark.section_id == section_id,
            AttendanceMark.date == day,
        )
        .order_by(AttendanceMark.student_id)
        .all()
    )


def get_attendance_stats(
    db: Session,
    class_id: int,
    section_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict:
    query = db.query(ClassAttendanceSummary).filter(
        ClassAttendanceSummary.class_id == class_id,
        ClassAttendanceSummary.section_id == section_id,
    )
    if start_date:
        query = query.filter(ClassAttendanceSummary.date >= start_date)
    if end_date:
        query = query.filter(ClassAttendanceSummary.date <= end_date)
    days = query.order_by(ClassAttendanceSummary.date.desc()).all()

    total_days = len(days)
    total_present = sum(d.present_count for d in days)
    total_students = days[0].total_students if days else 0

    if total_days and total_students:
        average = round(total_present / (total_days * total_students) * 100, 2)
    else:
        average = 0.0

    return {
        "total_days": total_days,
        "total_present": total_present,
        "total_absent": sum(d.absent_count for d in days),
        "total_late": sum(d.late_count for d in days),
        "total_excused": sum(d.excused_count for d in days),
        "total_students": total_students,
        "average_attendance": average,
        "daily_stats": days,
    }


def get_student_attendance(
    db: Session,
    student_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict:
    query = db.query(AttendanceMark).filter(AttendanceMark.student_id == student_id)
    if start_date:
        query = query.filter(AttendanceMark.date >= start_date)
    if end_date:
        query = query.filter(AttendanceMark.date <= end_date)
    records = query.order_by(AttendanceMark.date.desc()).all()

    counts = Counter(r.status for r in records)
    total = len(records)
    return {
        "total_days": total,
        "present_days": counts["present"],
        "absent_days": counts["absent"],
        "late_days": counts["late"],
        "excused_days": counts["excused"],
        "attendance_percentage": round(counts["present"] / total * 100, 2) if total else 0.0,
        "records": records,
    }
