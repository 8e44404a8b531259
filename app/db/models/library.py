# app/db/models/library.py
from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from app.db.base import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    isbn = Column(String(20), nullable=True)
    category = Column(String(100), nullable=False)
    total_quantity = Column(Integer, nullable=False)
    available_quantity = Column(Integer, nullable=False)
    shelf_location = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class BookIssue(Base):
    __tablename__ = "book_issues"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)
    status = Column(String(20), default="issued", nullable=False)  # issued → overdue → returned
    fine_amount = Column(Integer, default=0, nullable=False)
    remarks = Column(Text, nullable=True)
    issued_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    book = relationship("Book")
    student = relationship("Student")
