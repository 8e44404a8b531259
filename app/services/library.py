# app/services/library.py
import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from app.db.models.academic import Student
from app.db.models.library import Book, BookIssue

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("issued", "overdue")


def create_book(db: Session, payload) -> Book:
    if payload.total_quantity < 1:
        raise ValidationError("total_quantity must be at least 1", errors={"total_quantity": "min 1"})
    book = Book(**payload.model_dump(), available_quantity=payload.total_quantity)
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def list_books(db: Session, category: Optional[str] = None) -> List[Book]:
    query = db.query(Book).filter(Book.is_active == True)  # noqa: E712
    if category:
        query = query.filter(Book.category == category)
    return query.order_by(Book.title).all()


def issue_book(
    db: Session,
    book_id: int,
    student_id: int,
    issue_date: Optional[date] = None,
    due_date: Optional[date] = None,
    issued_by: Optional[int] = None,
) -> BookIssue:
    # Row lock on the book keeps the availability check and decrement together
    book = db.query(Book).filter(Book.id == book_id).with_for_update().first()
    if not book:
        raise NotFoundError("Book not found")
    if not db.query(Student).filter(Student.id == student_id).first():
        raise NotFoundError("Student not found")

    if book.available_quantity < 1:
        raise CapacityError("Book is not available", available=book.available_quantity, requested=1)

    already = db.query(BookIssue).filter(
        BookIssue.book_id == book_id,
        BookIssue.student_id == student_id,
        BookIssue.status.in_(ACTIVE_STATUSES),
    ).first()
    if already:
        raise ConflictError("Student already has this book issued", context={"issue_id": already.id})

    issue_date = issue_date or date.today()
    issue = BookIssue(
        book_id=book_id,
        student_id=student_id,
        issue_date=issue_date,
        due_date=due_date or issue_date + timedelta(days=settings.LIBRARY_LOAN_DAYS),
        status="issued",
        issued_by=issued_by,
    )
    book.available_quantity -= 1
    db.add(issue)
    db.commit()
    db.refresh(issue)
    logger.info("Book %s issued to student %s (issue_id=%s)", book_id, student_id, issue.id)
    return issue


def fine_for(due_date: date, return_date: date) -> int:
    late_days = (return_date - due_date).days
    return late_days * settings.LIBRARY_FINE_PER_DAY if late_days > 0 else 0


def return_book(
    db: Session,
    issue_id: int,
    return_date: Optional[date] = None,
    fine_amount: Optional[int] = None,
    remarks: Optional[str] = None,
) -> BookIssue:
    issue = db.query(BookIssue).filter(BookIssue.id == issue_id).first()
    if not issue:
        raise NotFoundError("Issue record not found")
    if issue.status not in ACTIVE_STATUSES:
        raise ConflictError("Book is not currently issued")

    return_date = return_date or date.today()
    issue.return_date = return_date
    issue.status = "returned"
    issue.fine_amount = fine_amount if fine_amount is not None else fine_for(issue.due_date, return_date)
    issue.remarks = remarks
    issue.book.available_quantity += 1
    db.commit()
    db.refresh(issue)
    logger.info("Book issue %s returned, fine=%s", issue.id, issue.fine_amount)
    return issue


def list_issues(db: Session, status: Optional[str] = None, student_id: Optional[int] = None) -> List[BookIssue]:
    query = db.query(BookIssue)
    if status:
        query = query.filter(BookIssue.status == status)
    if student_id:
        query = query.filter(BookIssue.student_id == student_id)
    return query.order_by(BookIssue.issue_date.desc(), BookIssue.id.desc()).all()


def mark_overdue(db: Session, today: Optional[date] = None) -> int:
    """Flip ``issued`` loans past their due date to ``overdue``. Safe to run at any cadence."""
    today = today or date.today()
    count = (
        db.query(BookIssue)
        .filter(BookIssue.status == "issued", BookIssue.due_date < today)
        .update({BookIssue.status: "overdue"}, synchronize_session=False)
    )
    db.commit()
    logger.info("Overdue sweep for %s: %d issues marked overdue", today, count)
    return count
