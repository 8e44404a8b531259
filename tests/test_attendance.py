from datetime import date

import pytest

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.crud import academic as crud_academic
from app.db.models.attendance import AttendanceMark
from app.db.models.communication import SmsLog
from app.schemas.academic import StudentCreate
from app.schemas.attendance import AttendanceRecord
from app.services import attendance
from app.services.notifications import notify_absentees

DAY = date(2026, 3, 2)


def records(*pairs):
    return [AttendanceRecord(student_id=sid, status=status) for sid, status in pairs]


def mark(db, school, day, pairs):
    return attendance.mark_attendance(db, school.school_class.id, school.section.id, day, records(*pairs))


def test_mark_attendance_counts_and_defaults(db, school):
    arif, nadia, tanvir = school.students
    summary, absences = mark(db, school, DAY, [(arif.id, None), (nadia.id, "absent"), (tanvir.id, "late")])

    assert summary.total_students == 3
    assert (summary.present_count, summary.absent_count, summary.late_count, summary.excused_count) == (1, 1, 1, 0)
    assert summary.is_finalized is False
    assert [a.student_id for a in absences] == [nadia.id]


def test_remarking_replaces_the_whole_day(db, school):
    arif, nadia, tanvir = school.students
    mark(db, school, DAY, [(arif.id, "present"), (nadia.id, "absent"), (tanvir.id, "present")])
    summary, _ = mark(db, school, DAY, [(arif.id, "excused")])

    stored = attendance.get_attendance_by_date(db, school.school_class.id, school.section.id, DAY)
    assert [(m.student_id, m.status) for m in stored] == [(arif.id, "excused")]
    assert summary.total_students == 1
    assert summary.excused_count == 1
    assert summary.absent_count == 0


def test_finalized_day_rejects_changes(db, school):
    arif = school.students[0]
    mark(db, school, DAY, [(arif.id, "present")])
    attendance.finalize_attendance(db, school.school_class.id, school.section.id, DAY)

    with pytest.raises(ConflictError, match="already finalized"):
        mark(db, school, DAY, [(arif.id, "absent")])
    stored = db.query(AttendanceMark).all()
    assert [m.status for m in stored] == ["present"]


def test_finalize_unmarked_day_is_not_found(db, school):
    with pytest.raises(NotFoundError):
        attendance.finalize_attendance(db, school.school_class.id, school.section.id, DAY)


def test_finalize_twice_is_harmless(db, school):
    mark(db, school, DAY, [(school.students[0].id, "present")])
    attendance.finalize_attendance(db, school.school_class.id, school.section.id, DAY)
    summary = attendance.finalize_attendance(db, school.school_class.id, school.section.id, DAY)
    assert summary.is_finalized is True


def test_invalid_status_is_rejected(db, school):
    with pytest.raises(ValidationError) as exc:
        mark(db, school, DAY, [(school.students[0].id, "sick")])
    assert "records[0].status" in exc.value.errors
    assert db.query(AttendanceMark).count() == 0


def test_duplicate_student_is_rejected(db, school):
    arif = school.students[0]
    with pytest.raises(ValidationError):
        mark(db, school, DAY, [(arif.id, "present"), (arif.id, "absent")])


def test_stats_without_days_average_zero(db, school):
    stats = attendance.get_attendance_stats(db, school.school_class.id, school.section.id)
    assert stats["total_days"] == 0
    assert stats["average_attendance"] == 0.0
    assert stats["daily_stats"] == []


def test_stats_over_several_days(db, school):
    arif, nadia, tanvir = school.students
    mark(db, school, date(2026, 3, 1), [(arif.id, "present"), (nadia.id, "present"), (tanvir.id, "absent")])
    mark(db, school, date(2026, 3, 2), [(arif.id, "present"), (nadia.id, "late"), (tanvir.id, "absent")])

    stats = attendance.get_attendance_stats(db, school.school_class.id, school.section.id)
    assert stats["total_days"] == 2
    assert stats["total_present"] == 3
    assert stats["total_absent"] == 2
    assert stats["total_students"] == 3
    assert stats["average_attendance"] == 50.0
    assert [d.date for d in stats["daily_stats"]] == [date(2026, 3, 2), date(2026, 3, 1)]


def test_student_attendance_report(db, school):
    arif = school.students[0]
    mark(db, school, date(2026, 3, 1), [(arif.id, "present")])
    mark(db, school, date(2026, 3, 2), [(arif.id, "absent")])
    mark(db, school, date(2026, 3, 3), [(arif.id, "present")])

    report = attendance.get_student_attendance(db, arif.id)
    assert report["total_days"] == 3
    assert report["absent_days"] == 1
    assert report["attendance_percentage"] == 66.67


def test_absentee_guardians_are_texted(db, school, session_factory):
    arif, nadia, tanvir = school.students
    _, absences = mark(db, school, DAY, [(arif.id, "present"), (nadia.id, "absent"), (tanvir.id, "absent")])

    # Tanvir has no guardian phone on file
    assert notify_absentees(absences, session_factory) == 1

    logs = db.query(SmsLog).all()
    assert len(logs) == 1
    assert logs[0].recipient_phone == nadia.guardian_phone
    assert logs[0].message_type == "attendance"
    assert logs[0].status == "sent"
    assert "Nadia Rahman was marked ABSENT on 2026-03-02" in logs[0].message


def test_unknown_student_is_rejected_before_any_write(db, school):
    arif = school.students[0]
    with pytest.raises(NotFoundError, match="9999"):
        mark(db, school, DAY, [(arif.id, "present"), (9999, "absent")])
    assert db.query(AttendanceMark).count() == 0
    assert attendance.get_attendance_stats(db, school.school_class.id, school.section.id)["total_days"] == 0


def test_student_from_another_section_is_rejected(db, school):
    other = crud_academic.create_section(db, school.school_class.id, "B")
    outsider = crud_academic.create_student(db, StudentCreate(
        admission_number="ADM-900", full_name="Rafi Karim", class_id=school.school_class.id, section_id=other.id,
    ))
    mark(db, school, DAY, [(school.students[0].id, "present")])

    with pytest.raises(NotFoundError):
        mark(db, school, DAY, [(school.students[0].id, "absent"), (outsider.id, "present")])
    stored = attendance.get_attendance_by_date(db, school.school_class.id, school.section.id, DAY)
    assert [(m.student_id, m.status) for m in stored] == [(school.students[0].id, "present")]
