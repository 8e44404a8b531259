# app/services/notifications.py
"""
Consumers for events raised by write operations.

These run after the response has been sent (FastAPI background tasks), each
with its own database session. Nothing here may raise: a failed
notification is logged and dropped.
"""
import logging
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from app.db.models.academic import Student
from app.db.models.fees import FeePayment
from app.db.models.library import BookIssue
from app.services import sms
from app.services.attendance import StudentMarkedAbsent

logger = logging.getLogger(__name__)


def notify_absentees(events: Iterable[StudentMarkedAbsent], session_factory: Callable[[], Session]) -> int:
    """Text the guardian of every absent student. Returns how many were sent."""
    sent = 0
    db = session_factory()
    try:
        for event in events:
            try:
                student = db.query(Student).filter(Student.id == event.student_id).first()
                if not student or not student.guardian_phone:
                    logger.info("No guardian phone for student_id=%s, skipping absence SMS", event.student_id)
                    continue

                outcome = sms.send_sms(
                    db,
                    student.guardian_phone,
                    sms.absence_message(student.full_name, event.date.isoformat()),
                    "attendance",
                    recipient_name=student.guardian_name,
                    related_entity_type="student",
                    related_entity_id=student.id,
                )
                if outcome.success:
                    sent += 1
            except Exception:
                db.rollback()
                logger.exception("Absence SMS failed for student_id=%s", event.student_id)
    finally:
        db.close()
    return sent


def notify_library_fine(
    issue_id: int,
    session_factory: Callable[[], Session],
) -> bool:
    db = session_factory()
    try:
        issue = db.query(BookIssue).filter(BookIssue.id == issue_id).first()
        if not issue or not issue.fine_amount or not issue.student.guardian_phone:
            return False
        outcome = sms.send_sms(
            db,
            issue.student.guardian_phone,
            sms.library_fine_message(
                issue.student.full_name, issue.book.title, issue.due_date.isoformat(), issue.fine_amount
            ),
            "library",
            recipient_name=issue.student.guardian_name,
            related_entity_type="book_issue",
            related_entity_id=issue.id,
        )
        return outcome.success
    except Exception:
        db.rollback()
        logger.exception("Library fine SMS failed for issue_id=%s", issue_id)
        return False
    finally:
        db.close()


def notify_fee_payment(payment_id: int, session_factory: Callable[[], Session]) -> bool:
    db = session_factory()
    try:
        payment = db.query(FeePayment).filter(FeePayment.id == payment_id).first()
        if not payment or not payment.student.guardian_phone:
            return False
        outcome = sms.send_sms(
            db,
            payment.student.guardian_phone,
            sms.fee_payment_message(payment.student.full_name, payment.amount, payment.receipt_number),
            "fee",
            recipient_name=payment.student.guardian_name,
            related_entity_type="fee_payment",
            related_entity_id=payment.id,
        )
        return outcome.success
    except Exception:
        db.rollback()
        logger.exception("Fee payment SMS failed for payment_id=%s", payment_id)
        return False
    finally:
        db.close()
