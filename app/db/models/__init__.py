from app.db.base import Base
from app.db.models.user import User
from app.db.models.academic import AcademicSession, SchoolClass, Section, Subject, Student
from app.db.models.exam import ExamType, Exam, ExamSubject, Mark, GradeBand, Result, SubjectResult
from app.db.models.attendance import AttendanceMark, ClassAttendanceSummary
from app.db.models.timetable import Period, TimetableEntry
from app.db.models.communication import Announcement, Notification, SmsLog
from app.db.models.library import Book, BookIssue
from app.db.models.fees import FeeCategory, FeePayment, FeeStructure, FeeStructureItem, StudentFee
from app.db.models.hostel import Hostel, Room, RoomAllocation
from app.db.models.expenses import Expense, ExpenseCategory

__all__ = [
    "Base", "User",
    "AcademicSession", "SchoolClass", "Section", "Subject", "Student",
    "ExamType", "Exam", "ExamSubject", "Mark", "GradeBand", "Result", "SubjectResult",
    "AttendanceMark", "ClassAttendanceSummary",
    "Period", "TimetableEntry",
    "SmsLog", "Announcement", "Notification",
    "Book", "BookIssue",
    "FeeCategory", "FeeStructure", "FeeStructureItem", "StudentFee", "FeePayment",
    "Hostel", "Room", "RoomAllocation",
    "ExpenseCategory", "Expense",
]
