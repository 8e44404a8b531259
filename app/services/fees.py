# app/services/fees.py
"""
Fee structures, per-student fee assignment and payment collection.

A ``StudentFee`` carries the running balance: ``paid_amount`` goes up and
``due_amount`` goes down with every payment, and its status follows
``pending -> partial -> paid``. A payment larger than what is due is refused.
"""
import logging
import uuid
from collections import OrderedDict
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from app.db.models.academic import AcademicSession, SchoolClass, Student
from app.db.models.fees import FeeCategory, FeePayment, FeeStructure, FeeStructureItem, StudentFee

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("cash", "bank", "mobile", "card", "cheque")


def create_category(db: Session, payload) -> FeeCategory:
    if db.query(FeeCategory).filter(FeeCategory.name == payload.name).first():
        raise ConflictError("Fee category already exists")
    category = FeeCategory(name=payload.name, description=payload.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def list_categories(db: Session) -> List[FeeCategory]:
    return db.query(FeeCategory).filter(FeeCategory.is_active == True).order_by(FeeCategory.name).all()  # noqa: E712


def create_structure(db: Session, payload) -> FeeStructure:
    errors = {}
    if not payload.name:
        errors["name"] = "required"
    if not payload.items:
        errors["items"] = "at least one item is required"
    for index, item in enumerate(payload.items):
        if item.amount < 0:
            errors[f"items[{index}].amount"] = "cannot be negative"
    if errors:
        raise ValidationError("Invalid fee structure", errors=errors)

    if not db.query(AcademicSession).filter(AcademicSession.id == payload.academic_session_id).first():
        raise NotFoundError("Academic session not found")
    if payload.class_id and not db.query(SchoolClass).filter(SchoolClass.id == payload.class_id).first():
        raise NotFoundError("Class not found")

    category_ids = {item.fee_category_id for item in payload.items}
    known = {cid for (cid,) in db.query(FeeCategory.id).filter(FeeCategory.id.in_(category_ids)).all()}
    if category_ids - known:
        raise NotFoundError(f"Fee category not found: {', '.join(str(c) for c in sorted(category_ids - known))}")

    structure = FeeStructure(
        name=payload.name,
        academic_session_id=payload.academic_session_id,
        class_id=payload.class_id,
        description=payload.description,
        items=[FeeStructureItem(**item.model_dump()) for item in payload.items],
    )
    db.add(structure)
    db.commit()
    db.refresh(structure)
    logger.info("Fee structure %s created with %d items", structure.id, len(structure.items))
    return structure


def list_structures(
    db: Session, academic_session_id: Optional[int] = None, class_id: Optional[int] = None
) -> List[FeeStructure]:
    query = db.query(FeeStructure).filter(FeeStructure.is_active == True)  # noqa: E712
    if academic_session_id:
        query = query.filter(FeeStructure.academic_session_id == academic_session_id)
    if class_id:
        query = query.filter(FeeStructure.class_id == class_id)
    return query.order_by(FeeStructure.id).all()


def get_structure(db: Session, structure_id: int) -> FeeStructure:
    structure = db.query(FeeStructure).filter(FeeStructure.id == structure_id).first()
    if not structure:
        raise NotFoundError("Fee structure not found")
    return structure


def assign_fee(db: Session, student_id: int, fee_structure_id: int, academic_session_id: int) -> StudentFee:
    if not db.query(Student).filter(Student.id == student_id).first():
        raise NotFoundError("Student not found")
    structure = get_structure(db, fee_structure_id)

    existing = db.query(StudentFee).filter(
        StudentFee.student_id == student_id,
        StudentFee.fee_structure_id == fee_structure_id,
        StudentFee.academic_session_id == academic_session_id,
    ).first()
    if existing:
        raise ConflictError("Fee structure already assigned to this student", context={"student_fee_id": existing.id})

    total = round(sum(item.amount for item in structure.items), 2)
    student_fee = StudentFee(
        student_id=student_id,
        fee_structure_id=fee_structure_id,
        academic_session_id=academic_session_id,
        total_amount=total,
        paid_amount=0,
        discount_amount=0,
        waiver_amount=0,
        due_amount=total,
        status="pending",
    )
    db.add(student_fee)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Fee structure already assigned to this student")
    db.refresh(student_fee)
    logger.info("Fee structure %s assigned to student %s, total=%s", fee_structure_id, student_id, total)
    return student_fee


def fee_status(total: float, due: float) -> str:
    if due <= 0:
        return "paid"
    if due < total:
        return "partial"
    return "pending"


def _receipt_number(payment_date: date) -> str:
    return f"RCP{payment_date:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def collect_payment(
    db: Session,
    student_fee_id: int,
    amount: float,
    payment_method: str = "cash",
    payment_date: Optional[date] = None,
    transaction_id: Optional[str] = None,
    remarks: Optional[str] = None,
    collected_by: Optional[int] = None,
) -> FeePayment:
    errors = {}
    if amount is None or amount <= 0:
        errors["amount"] = "must be greater than zero"
    if payment_method not in PAYMENT_METHODS:
        errors["payment_method"] = f"must be one of {', '.join(PAYMENT_METHODS)}"
    if errors:
        raise ValidationError("Invalid payment", errors=errors)

    # Row lock keeps the due check and the balance update together
    student_fee = db.query(StudentFee).filter(StudentFee.id == student_fee_id).with_for_update().first()
    if not student_fee:
        raise NotFoundError("Student fee not found")
    if amount > student_fee.due_amount:
        raise CapacityError("Payment amount exceeds due amount", available=student_fee.due_amount, requested=amount)

    payment_date = payment_date or date.today()
    payment = FeePayment(
        student_fee_id=student_fee.id,
        student_id=student_fee.student_id,
        amount=amount,
        payment_date=payment_date,
        payment_method=payment_method,
        transaction_id=transaction_id,
        receipt_number=_receipt_number(payment_date),
        remarks=remarks,
        collected_by=collected_by,
    )
    student_fee.paid_amount = round(student_fee.paid_amount + amount, 2)
    student_fee.due_amount = round(student_fee.due_amount - amount, 2)
    student_fee.status = fee_status(student_fee.total_amount, student_fee.due_amount)
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(
        "Payment %s of %s collected for student_fee_id=%s, due now %s",
        payment.receipt_number, amount, student_fee.id, student_fee.due_amount,
    )
    return payment


def student_fees(db: Session, student_id: int, academic_session_id: Optional[int] = None) -> List[StudentFee]:
    query = db.query(StudentFee).filter(StudentFee.student_id == student_id)
    if academic_session_id:
        query = query.filter(StudentFee.academic_session_id == academic_session_id)
    return query.order_by(StudentFee.id).all()


def payment_history(
    db: Session,
    student_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FeePayment]:
    query = db.query(FeePayment)
    if student_id:
        query = query.filter(FeePayment.student_id == student_id)
    if start_date:
        query = query.filter(FeePayment.payment_date >= start_date)
    if end_date:
        query = query.filter(FeePayment.payment_date <= end_date)
    return query.order_by(FeePayment.payment_date.desc(), FeePayment.id.desc()).all()


def collection_report(db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    payments = sorted(payment_history(db, None, start_date, end_date), key=lambda p: (p.payment_date, p.id))

    daily: "OrderedDict[date, dict]" = OrderedDict()
    for payment in payments:
        day = daily.setdefault(payment.payment_date, {"date": payment.payment_date, "amount": 0.0, "payments": 0})
        day["amount"] = round(day["amount"] + payment.amount, 2)
        day["payments"] += 1

    total_due, students = db.query(
        func.coalesce(func.sum(StudentFee.due_amount), 0),
        func.count(func.distinct(StudentFee.student_id)),
    ).filter(StudentFee.due_amount > 0).one()

    return {
        "total_collected": round(sum(p.amount for p in payments), 2),
        "payment_count": len(payments),
        "daily": list(daily.values()),
        "outstanding": {"total_due": round(float(total_due), 2), "students": students},
    }
