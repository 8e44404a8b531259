# app/schemas/library.py
from datetime import date
from typing import Optional

from pydantic import BaseModel


class BookCreate(BaseModel):
    title: str
    author: str
    category: str
    total_quantity: int
    isbn: Optional[str] = None
    shelf_location: Optional[str] = None


class BookOut(BookCreate):
    id: int
    available_quantity: int

    class Config:
        from_attributes = True


class IssueCreate(BaseModel):
    book_id: int
    student_id: int
    issue_date: Optional[date] = None
    due_date: Optional[date] = None


class ReturnRequest(BaseModel):
    return_date: Optional[date] = None
    fine_amount: Optional[int] = None
    remarks: Optional[str] = None


class IssueOut(BaseModel):
    id: int
    book_id: int
    student_id: int
    issue_date: date
    due_date: date
    return_date: Optional[date] = None
    status: str
    fine_amount: int
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class OverdueSweepOut(BaseModel):
    updated: int
