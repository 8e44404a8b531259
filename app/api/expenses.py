# app/api/expenses.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import ADMINS, get_db, require_roles
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.expenses import (
    ExpenseCategoryCreate,
    ExpenseCategoryOut,
    ExpenseCreate,
    ExpenseOut,
    ExpenseStats,
    ExpenseUpdate,
    FinancialSummary,
)
from app.services import expenses as expense_service

router = APIRouter()

require_accountant = require_roles("accountant", *ADMINS)


@router.get("/categories", response_model=Envelope[List[ExpenseCategoryOut]])
def get_categories(db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    return {"data": expense_service.list_categories(db)}


@router.post("/categories", response_model=Envelope[ExpenseCategoryOut], status_code=201)
def add_category(
    payload: ExpenseCategoryCreate, db: Session = Depends(get_db), current_user=Depends(require_accountant)
):
    return {"message": "Expense category created successfully", "data": expense_service.create_category(db, payload)}


@router.get("/", response_model=Envelope[List[ExpenseOut]])
def get_expenses(
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_accountant),
):
    return {"data": expense_service.list_expenses(db, category_id, start_date, end_date)}


@router.post("/", response_model=Envelope[ExpenseOut], status_code=201)
def add_expense(payload: ExpenseCreate, db: Session = Depends(get_db), current_user: User = Depends(require_accountant)):
    expense = expense_service.create_expense(db, payload, recorded_by=current_user.id)
    return {"message": "Expense recorded successfully", "data": expense}


@router.get("/stats", response_model=Envelope[ExpenseStats])
def get_stats(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_accountant),
):
    return {"data": expense_service.expense_stats(db, start_date, end_date)}


@router.get("/summary", response_model=Envelope[FinancialSummary])
def get_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_accountant),
):
    return {"data": expense_service.financial_summary(db, start_date, end_date)}


@router.get("/{expense_id}", response_model=Envelope[ExpenseOut])
def get_expense(expense_id: int, db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    return {"data": expense_service.get_expense(db, expense_id)}


@router.put("/{expense_id}", response_model=Envelope[ExpenseOut])
def update_expense(
    expense_id: int, payload: ExpenseUpdate, db: Session = Depends(get_db), current_user=Depends(require_accountant)
):
    return {"message": "Expense updated successfully", "data": expense_service.update_expense(db, expense_id, payload)}


@router.delete("/{expense_id}", response_model=Envelope[None])
def delete_expense(expense_id: int, db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    expense_service.delete_expense(db, expense_id)
    return {"message": "Expense deleted successfully"}
