# app/crud/exam.py
from typing import List

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.academic import AcademicSession, Student
from app.db.models.exam import Exam, ExamSubject, ExamType, Mark


def list_exam_types(db: Session):
    return db.query(ExamType).filter(ExamType.is_active == True).order_by(ExamType.name).all()  # noqa: E712


def create_exam_type(db: Session, data) -> ExamType:
    if db.query(ExamType).filter(ExamType.name == data.name).first():
        raise ConflictError("Exam type already exists")
    exam_type = ExamType(**data.model_dump())
    db.add(exam_type)
    db.commit()
    db.refresh(exam_type)
    return exam_type


def get_exam(db: Session, exam_id: int) -> Exam:
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")
    return exam


def list_exams(db: Session, academic_session_id: int):
    return (
        db.query(Exam)
        .filter(Exam.academic_session_id == academic_session_id)
        .order_by(Exam.start_date.desc())
        .all()
    )


def create_exam(db: Session, data, session: AcademicSession, created_by: int) -> Exam:
    if data.end_date < data.start_date:
        raise ValidationError("end_date must not be before start_date", errors={"end_date": "before start_date"})
    if not db.query(ExamType).filter(ExamType.id == data.exam_type_id).first():
        raise NotFoundError("Exam type not found")

    values = data.model_dump()
    values["academic_session_id"] = session.id
    exam = Exam(**values, created_by=created_by)
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam


def create_exam_subject(db: Session, exam_id: int, data) -> ExamSubject:
    get_exam(db, exam_id)
    errors = {}
    if data.total_marks <= 0:
        errors["total_marks"] = "must be positive"
    if data.passing_marks < 0 or data.passing_marks > data.total_marks:
        errors["passing_marks"] = "must be between 0 and total_marks"
    if errors:
        raise ValidationError("Invalid exam subject", errors=errors)

    exam_subject = ExamSubject(exam_id=exam_id, **data.model_dump())
    db.add(exam_subject)
    db.commit()
    db.refresh(exam_subject)
    return exam_subject


def list_exam_subjects(db: Session, exam_id: int) -> List[ExamSubject]:
    return db.query(ExamSubject).filter(ExamSubject.exam_id == exam_id).order_by(ExamSubject.exam_date).all()


def get_exam_subject(db: Session, exam_subject_id: int) -> ExamSubject:
    exam_subject = db.query(ExamSubject).filter(ExamSubject.id == exam_subject_id).first()
    if not exam_subject:
        raise NotFoundError("Exam subject not found")
    return exam_subject


def save_marks(db: Session, exam_subject_id: int, entries, entered_by: int) -> int:
    """Upsert one mark per (exam subject, student). Validates the whole batch first."""
    exam_subject = get_exam_subject(db, exam_subject_id)

    errors = {}
    for index, entry in enumerate(entries):
        if entry.is_absent:
            continue
        if entry.marks_obtained is None:
            errors[f"marks[{index}].marks_obtained"] = "required unless absent"
        elif entry.marks_obtained < 0:
            errors[f"marks[{index}].marks_obtained"] = "cannot be negative"
        elif entry.marks_obtained > exam_subject.total_marks:
            errors[f"marks[{index}].marks_obtained"] = f"exceeds total marks ({exam_subject.total_marks})"
    if errors:
        raise ValidationError(
            f"Marks cannot exceed total marks ({exam_subject.total_marks})"
            if any("exceeds" in e for e in errors.values()) else "Invalid marks",
            errors=errors,
        )

    student_ids = {e.student_id for e in entries}
    known = {sid for (sid,) in db.query(Student.id).filter(Student.id.in_(student_ids)).all()}
    unknown = student_ids - known
    if unknown:
        raise NotFoundError(f"Student not found: {', '.join(str(s) for s in sorted(unknown))}")

    existing = {
        m.student_id: m
        for m in db.query(Mark).filter(
            Mark.exam_subject_id == exam_subject_id,
            Mark.student_id.in_(student_ids),
        ).all()
    }

    for entry in entries:
        mark = existing.get(entry.student_id)
        if mark is None:
            mark = Mark(exam_subject_id=exam_subject_id, student_id=entry.student_id)
            db.add(mark)
            existing[entry.student_id] = mark
        mark.marks_obtained = None if entry.is_absent else entry.marks_obtained
        mark.is_absent = entry.is_absent
        mark.remarks = entry.remarks
        mark.entered_by = entered_by

    db.commit()
    return len(entries)


def list_marks(db: Session, exam_subject_id: int) -> List[Mark]:
    get_exam_subject(db, exam_subject_id)
    return db.query(Mark).filter(Mark.exam_subject_id == exam_subject_id).order_by(Mark.student_id).all()
