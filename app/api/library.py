# app/api/library.py
from typing import Callable, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.api.deps import ADMINS, get_current_user, get_db, get_session_factory, require_roles
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.library import BookCreate, BookOut, IssueCreate, IssueOut, OverdueSweepOut, ReturnRequest
from app.services import library as library_service
from app.services.notifications import notify_library_fine

router = APIRouter()

require_librarian = require_roles("librarian", *ADMINS)


@router.get("/books", response_model=Envelope[List[BookOut]])
def get_books(category: Optional[str] = None, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": library_service.list_books(db, category)}


@router.post("/books", response_model=Envelope[BookOut], status_code=201)
def add_book(payload: BookCreate, db: Session = Depends(get_db), current_user=Depends(require_librarian)):
    return {"message": "Book added successfully", "data": library_service.create_book(db, payload)}


@router.get("/issues", response_model=Envelope[List[IssueOut]])
def get_issues(
    status: Optional[str] = None,
    student_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_librarian),
):
    return {"data": library_service.list_issues(db, status, student_id)}


@router.post("/issues", response_model=Envelope[IssueOut], status_code=201)
def issue_book(payload: IssueCreate, db: Session = Depends(get_db), current_user: User = Depends(require_librarian)):
    issue = library_service.issue_book(
        db, payload.book_id, payload.student_id, payload.issue_date, payload.due_date, issued_by=current_user.id
    )
    return {"message": "Book issued successfully", "data": issue}


@router.post("/issues/{issue_id}/return", response_model=Envelope[IssueOut])
def return_book(
    issue_id: int,
    payload: ReturnRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    current_user=Depends(require_librarian),
):
    issue = library_service.return_book(db, issue_id, payload.return_date, payload.fine_amount, payload.remarks)
    if issue.fine_amount > 0:
        background_tasks.add_task(notify_library_fine, issue.id, session_factory)
    return {"message": "Book returned successfully", "data": issue}


@router.post("/overdue-sweep", response_model=Envelope[OverdueSweepOut])
def overdue_sweep(db: Session = Depends(get_db), current_user=Depends(require_librarian)):
    updated = library_service.mark_overdue(db)
    return {"message": "Overdue status updated successfully", "data": {"updated": updated}}
