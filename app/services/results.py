# app/services/results.py
"""
Result processing for an exam and class.

Marks are read for every exam subject of the class, grouped by student,
graded per subject and overall, ranked by total marks and written back as
one ``Result`` per (exam, student) plus its ``SubjectResult`` rows.
Running it again with the same marks rewrites the same rows.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.db.models.academic import Student
from app.db.models.exam import Exam, ExamSubject, GradeBand, Mark, Result, SubjectResult
from app.services.grading import grade_for, load_bands

logger = logging.getLogger(__name__)

RANKING_POLICIES = ("sequential", "competition")


@dataclass
class SubjectScore:
    subject_id: int
    total_marks: int
    marks_obtained: float
    grade: str
    grade_point: float
    is_passed: bool


@dataclass
class StudentScore:
    student_id: int
    total_marks: int = 0
    marks_obtained: float = 0.0
    percentage: float = 0.0
    grade: str = ""
    grade_point: float = 0.0
    merit_position: Optional[int] = None
    subjects: List[SubjectScore] = field(default_factory=list)


def percentage_of(obtained: float, total: float) -> float:
    # A student with no gradable subjects scores 0% rather than dividing by zero
    if not total:
        return 0.0
    return round(obtained / total * 100, 2)


def score_student(
    student_id: int,
    marks: Sequence[Mark],
    schedules: Dict[int, ExamSubject],
    bands: Sequence[GradeBand],
) -> StudentScore:
    score = StudentScore(student_id=student_id)

    for mark in marks:
        schedule = schedules.get(mark.exam_subject_id)
        if schedule is None:
            continue

        obtained = 0.0 if mark.is_absent else float(mark.marks_obtained or 0)
        score.total_marks += schedule.total_marks
        score.marks_obtained += obtained

        outcome = grade_for(percentage_of(obtained, schedule.total_marks), bands)
        score.subjects.append(SubjectScore(
            subject_id=schedule.subject_id,
            total_marks=schedule.total_marks,
            marks_obtained=obtained,
            grade=outcome.grade,
            grade_point=outcome.grade_point,
            is_passed=obtained >= schedule.passing_marks,
        ))

    score.percentage = percentage_of(score.marks_obtained, score.total_marks)
    overall = grade_for(score.percentage, bands)
    score.grade = overall.grade
    score.grade_point = overall.grade_point
    return score


def assign_merit_positions(scores: List[StudentScore], policy: str = "sequential") -> List[StudentScore]:
    """Order by marks obtained (desc), ties by student id (asc), and number them.

    ``sequential`` gives tied students consecutive positions (1, 2, 3);
    ``competition`` gives them the same position and skips (1, 1, 3).
    """
    if policy not in RANKING_POLICIES:
        raise ValueError(f"Unknown merit ranking policy: {policy}")

    ranked = sorted(scores, key=lambda s: (-s.marks_obtained, s.student_id))
    for index, score in enumerate(ranked):
        if policy == "competition" and index > 0 and score.marks_obtained == ranked[index - 1].marks_obtained:
            score.merit_position = ranked[index - 1].merit_position
        else:
            score.merit_position = index + 1
    return ranked


def _save_student_result(
    db: Session, exam_id: int, class_id: int, section_id: Optional[int], score: StudentScore
) -> None:
    result = db.query(Result).filter(
        Result.exam_id == exam_id,
        Result.student_id == score.student_id,
    ).first()

    if result is None:
        result = Result(
            exam_id=exam_id,
            student_id=score.student_id,
            class_id=class_id,
            section_id=section_id,
            is_published=False,
        )
        db.add(result)

    # A later run for another scope moves the row with it
    result.class_id = class_id
    result.section_id = section_id
    result.total_marks = score.total_marks
    result.marks_obtained = score.marks_obtained
    result.percentage = score.percentage
    result.grade = score.grade
    result.grade_point = score.grade_point
    result.merit_position = score.merit_position

    # Replace, never merge: delete-orphan cascade drops the old rows on flush
    result.subject_results = [
        SubjectResult(
            subject_id=s.subject_id,
            total_marks=s.total_marks,
            marks_obtained=s.marks_obtained,
            grade=s.grade,
            grade_point=s.grade_point,
            is_passed=s.is_passed,
        )
        for s in score.subjects
    ]


def process_results(
    db: Session,
    exam_id: int,
    class_id: int,
    section_id: Optional[int] = None,
    policy: Optional[str] = None,
) -> dict:
    if not exam_id or not class_id:
        raise ValidationError("Missing required fields", errors={"exam_id": "required", "class_id": "required"})

    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    query = db.query(ExamSubject).filter(
        ExamSubject.exam_id == exam_id,
        ExamSubject.class_id == class_id,
    )
    if section_id:
        query = query.filter(ExamSubject.section_id == section_id)
    schedules = {es.id: es for es in query.all()}
    if not schedules:
        raise NotFoundError("No exam subjects found")

    marks = (
        db.query(Mark)
        .filter(Mark.exam_subject_id.in_(list(schedules)))
        .order_by(Mark.student_id, Mark.id)
        .all()
    )

    by_student: "OrderedDict[int, List[Mark]]" = OrderedDict()
    for mark in marks:
        by_student.setdefault(mark.student_id, []).append(mark)

    bands = load_bands(db)
    scores = [score_student(sid, student_marks, schedules, bands) for sid, student_marks in by_student.items()]
    ranked = assign_merit_positions(scores, policy or settings.MERIT_RANKING)
    sections = dict(
        db.query(Student.id, Student.section_id).filter(Student.id.in_(list(by_student))).all()
    )

    for score in ranked:
        try:
            _save_student_result(
                db, exam_id, class_id, section_id or sections.get(score.student_id), score
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Saving result failed for exam_id=%s student_id=%s", exam_id, score.student_id
            )
            raise

    logger.info(
        "Processed results for exam_id=%s class_id=%s section_id=%s: %d students",
        exam_id, class_id, section_id, len(ranked),
    )
    return {"total_students": len(ranked), "processed": len(ranked)}


def publish_results(db: Session, exam_id: int) -> int:
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    exam.results_published = True
    now = datetime.utcnow()
    count = 0
    for result in db.query(Result).filter(Result.exam_id == exam_id).all():
        result.is_published = True
        result.published_at = now
        count += 1
    db.commit()
    logger.info("Published %d results for exam_id=%s", count, exam_id)
    return count


def get_student_result(db: Session, exam_id: int, student_id: int) -> Result:
    result = db.query(Result).filter(
        Result.exam_id == exam_id,
        Result.student_id == student_id,
    ).first()
    if not result:
        raise NotFoundError("Result not found")
    return result


def merit_list(db: Session, exam_id: int, class_id: int, section_id: Optional[int] = None) -> List[Result]:
    query = db.query(Result).filter(Result.exam_id == exam_id, Result.class_id == class_id)
    if section_id:
        query = query.filter(Result.section_id == section_id)
    return query.order_by(Result.merit_position, Result.student_id).all()
