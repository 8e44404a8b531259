# app/schemas/exam.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class ExamTypeCreate(BaseModel):
    name: str
    weightage: int = 100


class ExamTypeOut(ExamTypeCreate):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


class ExamCreate(BaseModel):
    name: str
    exam_type_id: int
    academic_session_id: Optional[int] = None  # defaults to the current session
    start_date: date
    end_date: date
    description: Optional[str] = None


class ExamOut(BaseModel):
    id: int
    name: str
    exam_type_id: int
    academic_session_id: int
    start_date: date
    end_date: date
    description: Optional[str] = None
    results_published: bool

    class Config:
        from_attributes = True


class ExamSubjectCreate(BaseModel):
    class_id: int
    section_id: Optional[int] = None
    subject_id: int
    exam_date: date
    start_time: str
    end_time: str
    total_marks: int
    passing_marks: int
    room_number: Optional[str] = None


class ExamSubjectOut(ExamSubjectCreate):
    id: int
    exam_id: int

    class Config:
        from_attributes = True


class MarkEntry(BaseModel):
    student_id: int
    marks_obtained: Optional[float] = None
    is_absent: bool = False
    remarks: Optional[str] = None


class MarksSubmit(BaseModel):
    exam_subject_id: int
    marks: List[MarkEntry]


class MarkOut(BaseModel):
    id: int
    exam_subject_id: int
    student_id: int
    marks_obtained: Optional[float] = None
    is_absent: bool
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class GradeBandIn(BaseModel):
    name: str
    min_percentage: float
    max_percentage: float
    grade: str
    grade_point: float


class GradeBandOut(GradeBandIn):
    id: int

    class Config:
        from_attributes = True


class ProcessResultsRequest(BaseModel):
    exam_id: int
    class_id: int
    section_id: Optional[int] = None


class ProcessResultsOut(BaseModel):
    total_students: int
    processed: int


class PublishResultsRequest(BaseModel):
    exam_id: int


class SubjectResultOut(BaseModel):
    subject_id: int
    total_marks: int
    marks_obtained: float
    grade: str
    grade_point: float
    is_passed: bool

    class Config:
        from_attributes = True


class ResultOut(BaseModel):
    id: int
    exam_id: int
    student_id: int
    class_id: int
    section_id: Optional[int] = None
    total_marks: int
    marks_obtained: float
    percentage: float
    grade: str
    grade_point: float
    merit_position: Optional[int] = None
    is_published: bool
    published_at: Optional[datetime] = None
    subject_results: List[SubjectResultOut] = []

    class Config:
        from_attributes = True
