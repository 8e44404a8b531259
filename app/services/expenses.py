# app/services/expenses.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.expenses import Expense, ExpenseCategory
from app.db.models.fees import FeePayment

logger = logging.getLogger(__name__)


def create_category(db: Session, payload) -> ExpenseCategory:
    if db.query(ExpenseCategory).filter(ExpenseCategory.name == payload.name).first():
        raise ConflictError("Expense category already exists")
    category = ExpenseCategory(name=payload.name, description=payload.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def list_categories(db: Session) -> List[ExpenseCategory]:
    return (
        db.query(ExpenseCategory)
        .filter(ExpenseCategory.is_active == True)  # noqa: E712
        .order_by(ExpenseCategory.name)
        .all()
    )


def _check_category(db: Session, category_id: int) -> None:
    if not db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first():
        raise NotFoundError("Expense category not found")


def create_expense(db: Session, payload, recorded_by: Optional[int] = None) -> Expense:
    if payload.amount <= 0:
        raise ValidationError("Invalid expense", errors={"amount": "must be greater than zero"})
    _check_category(db, payload.category_id)

    expense = Expense(**payload.model_dump(), recorded_by=recorded_by)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Expense %s recorded: %s", expense.id, expense.amount)
    return expense


def list_expenses(
    db: Session,
    category_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Expense]:
    query = db.query(Expense)
    if category_id:
        query = query.filter(Expense.category_id == category_id)
    if start_date:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date:
        query = query.filter(Expense.expense_date <= end_date)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


def get_expense(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def update_expense(db: Session, expense_id: int, payload) -> Expense:
    expense = get_expense(db, expense_id)
    changes = payload.model_dump(exclude_unset=True)
    if "amount" in changes and (changes["amount"] is None or changes["amount"] <= 0):
        raise ValidationError("Invalid expense", errors={"amount": "must be greater than zero"})
    if changes.get("category_id"):
        _check_category(db, changes["category_id"])

    for name, value in changes.items():
        setattr(expense, name, value)
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int) -> None:
    db.delete(get_expense(db, expense_id))
    db.commit()
    logger.info("Expense %s deleted", expense_id)


def expense_stats(db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    query = db.query(
        ExpenseCategory.id,
        ExpenseCategory.name,
        func.coalesce(func.sum(Expense.amount), 0),
        func.count(Expense.id),
    ).join(Expense, Expense.category_id == ExpenseCategory.id)
    if start_date:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date:
        query = query.filter(Expense.expense_date <= end_date)
    rows = query.group_by(ExpenseCategory.id, ExpenseCategory.name).order_by(ExpenseCategory.name).all()

    by_category = [
        {"category_id": cid, "category": name, "total": round(float(total), 2), "count": count}
        for cid, name, total, count in rows
    ]
    return {
        "total": round(sum(c["total"] for c in by_category), 2),
        "count": sum(c["count"] for c in by_category),
        "by_category": by_category,
    }


def financial_summary(db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    """Fee income against recorded expenses over an optional date range."""
    income = db.query(func.coalesce(func.sum(FeePayment.amount), 0))
    spent = db.query(func.coalesce(func.sum(Expense.amount), 0))
    if start_date:
        income = income.filter(FeePayment.payment_date >= start_date)
        spent = spent.filter(Expense.expense_date >= start_date)
    if end_date:
        income = income.filter(FeePayment.payment_date <= end_date)
        spent = spent.filter(Expense.expense_date <= end_date)

    total_income = round(float(income.scalar()), 2)
    total_expense = round(float(spent.scalar()), 2)
    net = round(total_income - total_expense, 2)
    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "net_balance": net,
        "profit_margin": round(net / total_income * 100, 2) if total_income else 0.0,
    }
