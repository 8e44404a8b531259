# app/schemas/fees.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class FeeCategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None


class FeeCategoryOut(FeeCategoryCreate):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


class FeeItemIn(BaseModel):
    fee_category_id: int
    amount: float
    due_date: Optional[date] = None
    is_optional: bool = False


class FeeItemOut(FeeItemIn):
    id: int

    class Config:
        from_attributes = True


class FeeStructureCreate(BaseModel):
    name: str
    academic_session_id: int
    class_id: Optional[int] = None
    description: Optional[str] = None
    items: List[FeeItemIn] = []


class FeeStructureOut(BaseModel):
    id: int
    name: str
    academic_session_id: int
    class_id: Optional[int] = None
    description: Optional[str] = None
    is_active: bool
    items: List[FeeItemOut] = []

    class Config:
        from_attributes = True


class FeeAssign(BaseModel):
    student_id: int
    fee_structure_id: int
    academic_session_id: int


class StudentFeeOut(BaseModel):
    id: int
    student_id: int
    fee_structure_id: int
    academic_session_id: int
    total_amount: float
    paid_amount: float
    discount_amount: float
    waiver_amount: float
    due_amount: float
    status: str

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    student_fee_id: int
    amount: float
    payment_method: str = "cash"
    payment_date: Optional[date] = None
    transaction_id: Optional[str] = None
    remarks: Optional[str] = None


class PaymentOut(BaseModel):
    id: int
    student_fee_id: int
    student_id: int
    amount: float
    payment_date: date
    payment_method: str
    transaction_id: Optional[str] = None
    receipt_number: str
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DailyCollection(BaseModel):
    date: date
    amount: float
    payments: int


class OutstandingDues(BaseModel):
    total_due: float
    students: int


class CollectionReport(BaseModel):
    total_collected: float
    payment_count: int
    daily: List[DailyCollection]
    outstanding: OutstandingDues
