from datetime import date

import pytest

from app.core.errors import CapacityError, ConflictError, NotFoundError
from app.db.models.library import BookIssue
from app.jobs import overdue
from app.schemas.library import BookCreate
from app.services import library


@pytest.fixture
def book(db):
    return library.create_book(
        db, BookCreate(title="A Brief History of Time", author="Stephen Hawking", category="Science", total_quantity=1)
    )


def test_issue_decrements_availability(db, school, book):
    issue = library.issue_book(db, book.id, school.students[0].id, issue_date=date(2026, 3, 1))
    db.refresh(book)
    assert book.available_quantity == 0
    assert issue.status == "issued"
    assert issue.due_date == date(2026, 3, 15)


def test_no_copies_left_is_a_capacity_error(db, school, book):
    library.issue_book(db, book.id, school.students[0].id)
    with pytest.raises(CapacityError) as exc:
        library.issue_book(db, book.id, school.students[1].id)
    assert exc.value.context == {"available": 0, "requested": 1}


def test_student_cannot_hold_two_copies(db, school, book):
    book.total_quantity = book.available_quantity = 3
    db.commit()
    library.issue_book(db, book.id, school.students[0].id)
    with pytest.raises(ConflictError, match="already has this book"):
        library.issue_book(db, book.id, school.students[0].id)


def test_unknown_book_or_student(db, school, book):
    with pytest.raises(NotFoundError, match="Book not found"):
        library.issue_book(db, 404, school.students[0].id)
    with pytest.raises(NotFoundError, match="Student not found"):
        library.issue_book(db, book.id, 404)


def test_late_return_is_fined(db, school, book):
    issue = library.issue_book(db, book.id, school.students[0].id, issue_date=date(2026, 3, 1), due_date=date(2026, 3, 10))
    returned = library.return_book(db, issue.id, return_date=date(2026, 3, 13))

    assert returned.status == "returned"
    assert returned.fine_amount == 15
    assert book.available_quantity == 1

    with pytest.raises(ConflictError, match="not currently issued"):
        library.return_book(db, issue.id)


def test_on_time_return_has_no_fine(db, school, book):
    issue = library.issue_book(db, book.id, school.students[0].id, issue_date=date(2026, 3, 1), due_date=date(2026, 3, 10))
    assert library.return_book(db, issue.id, return_date=date(2026, 3, 10)).fine_amount == 0


def test_overdue_sweep_is_idempotent(db, school, book):
    issue = library.issue_book(db, book.id, school.students[0].id, issue_date=date(2026, 3, 1), due_date=date(2026, 3, 10))

    assert library.mark_overdue(db, today=date(2026, 3, 10)) == 0
    assert library.mark_overdue(db, today=date(2026, 3, 11)) == 1
    assert library.mark_overdue(db, today=date(2026, 3, 12)) == 0

    db.expire_all()
    assert db.get(BookIssue, issue.id).status == "overdue"
    # Overdue loans can still be returned
    assert library.return_book(db, issue.id, return_date=date(2026, 3, 12)).fine_amount == 10


def test_overdue_job_uses_its_own_session(db, school, book, session_factory, monkeypatch, capsys):
    library.issue_book(db, book.id, school.students[0].id, issue_date=date(2026, 3, 1), due_date=date(2026, 3, 10))
    monkeypatch.setattr(overdue, "SessionLocal", session_factory)

    assert overdue.main(["--date", "2026-04-01"]) == 0
    assert "1 issue(s) marked overdue" in capsys.readouterr().out
