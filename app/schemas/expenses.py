# app/schemas/expenses.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class ExpenseCategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None


class ExpenseCategoryOut(ExpenseCategoryCreate):
    id: int
    is_active: bool

    class Config:
        from_attributes = True


class ExpenseCreate(BaseModel):
    category_id: int
    title: str
    amount: float
    expense_date: date
    description: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    vendor_name: Optional[str] = None
    remarks: Optional[str] = None


class ExpenseUpdate(BaseModel):
    category_id: Optional[int] = None
    title: Optional[str] = None
    amount: Optional[float] = None
    expense_date: Optional[date] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    vendor_name: Optional[str] = None
    remarks: Optional[str] = None


class ExpenseOut(ExpenseCreate):
    id: int

    class Config:
        from_attributes = True


class CategoryTotal(BaseModel):
    category_id: int
    category: str
    total: float
    count: int


class ExpenseStats(BaseModel):
    total: float
    count: int
    by_category: List[CategoryTotal]


class FinancialSummary(BaseModel):
    total_income: float
    total_expense: float
    net_balance: float
    profit_margin: float
