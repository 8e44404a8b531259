# app/schemas/academic.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class AcademicSessionCreate(BaseModel):
    name: str
    start_date: date
    end_date: date
    is_current: bool = False


class AcademicSessionOut(AcademicSessionCreate):
    id: int

    class Config:
        from_attributes = True


class ClassCreate(BaseModel):
    name: str


class SectionCreate(BaseModel):
    name: str


class SectionOut(BaseModel):
    id: int
    class_id: int
    name: str

    class Config:
        from_attributes = True


class ClassOut(BaseModel):
    id: int
    name: str
    sections: List[SectionOut] = []

    class Config:
        from_attributes = True


class SubjectCreate(BaseModel):
    name: str
    code: Optional[str] = None


class SubjectOut(SubjectCreate):
    id: int

    class Config:
        from_attributes = True


class StudentCreate(BaseModel):
    admission_number: str
    full_name: str
    class_id: int
    section_id: Optional[int] = None
    roll_number: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None


class StudentOut(StudentCreate):
    id: int
    status: str

    class Config:
        from_attributes = True
