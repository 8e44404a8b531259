# app/api/fees.py
from datetime import date
from typing import Callable, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.api.deps import ADMINS, get_current_user, get_db, get_session_factory, require_roles
from app.crud import notification as crud_notification
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.fees import (
    CollectionReport,
    FeeAssign,
    FeeCategoryCreate,
    FeeCategoryOut,
    FeeStructureCreate,
    FeeStructureOut,
    PaymentCreate,
    PaymentOut,
    StudentFeeOut,
)
from app.services import fees as fee_service
from app.services.notifications import notify_fee_payment

router = APIRouter()

require_accountant = require_roles("accountant", *ADMINS)


@router.get("/categories", response_model=Envelope[List[FeeCategoryOut]])
def get_categories(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": fee_service.list_categories(db)}


@router.post("/categories", response_model=Envelope[FeeCategoryOut], status_code=201)
def add_category(payload: FeeCategoryCreate, db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    return {"message": "Fee category created successfully", "data": fee_service.create_category(db, payload)}


@router.get("/structures", response_model=Envelope[List[FeeStructureOut]])
def get_structures(
    academic_session_id: Optional[int] = None,
    class_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": fee_service.list_structures(db, academic_session_id, class_id)}


@router.post("/structures", response_model=Envelope[FeeStructureOut], status_code=201)
def add_structure(payload: FeeStructureCreate, db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    return {"message": "Fee structure created successfully", "data": fee_service.create_structure(db, payload)}


@router.get("/structures/{structure_id}", response_model=Envelope[FeeStructureOut])
def get_structure(structure_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": fee_service.get_structure(db, structure_id)}


@router.post("/assign", response_model=Envelope[StudentFeeOut], status_code=201)
def assign_fee(payload: FeeAssign, db: Session = Depends(get_db), current_user=Depends(require_accountant)):
    student_fee = fee_service.assign_fee(db, payload.student_id, payload.fee_structure_id, payload.academic_session_id)
    return {"message": "Fee assigned successfully", "data": student_fee}


@router.post("/payments", response_model=Envelope[PaymentOut], status_code=201)
def collect_payment(
    payload: PaymentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    current_user: User = Depends(require_accountant),
):
    payment = fee_service.collect_payment(
        db,
        payload.student_fee_id,
        payload.amount,
        payload.payment_method,
        payload.payment_date,
        payload.transaction_id,
        payload.remarks,
        collected_by=current_user.id,
    )
    if payment.student.user_id:
        crud_notification.create_notification(
            db,
            payment.student.user_id,
            "Fee payment received",
            f"Payment of {payment.amount:g} received. Receipt: {payment.receipt_number}",
            "fee",
            related_entity_type="fee_payment",
            related_entity_id=payment.id,
        )
    background_tasks.add_task(notify_fee_payment, payment.id, session_factory)
    return {"message": "Payment collected successfully", "data": payment}


@router.get("/students/{student_id}", response_model=Envelope[List[StudentFeeOut]])
def get_student_fees(
    student_id: int,
    academic_session_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"data": fee_service.student_fees(db, student_id, academic_session_id)}


@router.get("/payments", response_model=Envelope[List[PaymentOut]])
def get_payments(
    student_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_accountant),
):
    return {"data": fee_service.payment_history(db, student_id, start_date, end_date)}


@router.get("/reports/collection", response_model=Envelope[CollectionReport])
def get_collection_report(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_accountant),
):
    return {"data": fee_service.collection_report(db, start_date, end_date)}
