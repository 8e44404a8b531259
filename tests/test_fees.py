from datetime import date
from types import SimpleNamespace

import pytest

from app.core.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from app.db.models.communication import SmsLog
from app.db.models.fees import StudentFee
from app.schemas.fees import FeeCategoryCreate, FeeItemIn, FeeStructureCreate
from app.services import fees
from app.services.notifications import notify_fee_payment


@pytest.fixture
def structure(db, school):
    tuition = fees.create_category(db, FeeCategoryCreate(name="Tuition"))
    exam_fee = fees.create_category(db, FeeCategoryCreate(name="Exam"))
    structure = fees.create_structure(db, FeeStructureCreate(
        name="Class 8 Annual",
        academic_session_id=school.session.id,
        class_id=school.school_class.id,
        items=[
            FeeItemIn(fee_category_id=tuition.id, amount=1200),
            FeeItemIn(fee_category_id=exam_fee.id, amount=300.5),
        ],
    ))
    return SimpleNamespace(structure=structure, tuition=tuition, exam_fee=exam_fee)


def assign(db, school, structure, student=None):
    student = student or school.students[0]
    return fees.assign_fee(db, student.id, structure.structure.id, school.session.id)


def test_structure_needs_items(db, school):
    with pytest.raises(ValidationError) as exc:
        fees.create_structure(db, FeeStructureCreate(name="Empty", academic_session_id=school.session.id))
    assert "items" in exc.value.errors


def test_structure_with_unknown_category(db, school):
    with pytest.raises(NotFoundError, match="Fee category not found: 77"):
        fees.create_structure(db, FeeStructureCreate(
            name="Broken", academic_session_id=school.session.id, items=[FeeItemIn(fee_category_id=77, amount=10)],
        ))


def test_assignment_totals_the_items(db, school, structure):
    student_fee = assign(db, school, structure)
    assert student_fee.total_amount == 1500.5
    assert student_fee.due_amount == 1500.5
    assert student_fee.paid_amount == 0
    assert student_fee.status == "pending"


def test_duplicate_assignment_is_a_conflict(db, school, structure):
    first = assign(db, school, structure)
    with pytest.raises(ConflictError, match="already assigned") as exc:
        assign(db, school, structure)
    assert exc.value.context == {"student_fee_id": first.id}
    assert db.query(StudentFee).count() == 1


def test_partial_then_full_payment(db, school, structure):
    student_fee = assign(db, school, structure)

    first = fees.collect_payment(db, student_fee.id, 500, payment_date=date(2026, 4, 2))
    db.refresh(student_fee)
    assert (student_fee.paid_amount, student_fee.due_amount, student_fee.status) == (500, 1000.5, "partial")
    assert first.receipt_number.startswith("RCP20260402-")

    fees.collect_payment(db, student_fee.id, 1000.5, payment_date=date(2026, 4, 3))
    db.refresh(student_fee)
    assert (student_fee.due_amount, student_fee.status) == (0, "paid")


def test_overpayment_is_a_capacity_error(db, school, structure):
    student_fee = assign(db, school, structure)
    fees.collect_payment(db, student_fee.id, 1000)

    with pytest.raises(CapacityError, match="exceeds due amount") as exc:
        fees.collect_payment(db, student_fee.id, 600)
    assert exc.value.context == {"available": 500.5, "requested": 600}
    db.refresh(student_fee)
    assert student_fee.paid_amount == 1000


def test_payment_validation(db, school, structure):
    student_fee = assign(db, school, structure)
    with pytest.raises(ValidationError) as exc:
        fees.collect_payment(db, student_fee.id, 0, payment_method="barter")
    assert set(exc.value.errors) == {"amount", "payment_method"}
    with pytest.raises(NotFoundError, match="Student fee not found"):
        fees.collect_payment(db, 999, 10)


def test_collection_report(db, school, structure):
    arif, nadia = school.students[:2]
    arif_fee = assign(db, school, structure, arif)
    nadia_fee = assign(db, school, structure, nadia)
    fees.collect_payment(db, arif_fee.id, 1500.5, payment_date=date(2026, 4, 1))
    fees.collect_payment(db, nadia_fee.id, 200, payment_date=date(2026, 4, 1))
    fees.collect_payment(db, nadia_fee.id, 100, payment_date=date(2026, 4, 5))

    report = fees.collection_report(db, start_date=date(2026, 4, 1), end_date=date(2026, 4, 30))
    assert report["total_collected"] == 1800.5
    assert report["payment_count"] == 3
    assert [(d["date"], d["amount"], d["payments"]) for d in report["daily"]] == [
        (date(2026, 4, 1), 1700.5, 2),
        (date(2026, 4, 5), 100, 1),
    ]
    assert report["outstanding"] == {"total_due": 1200.5, "students": 1}


def test_payment_texts_the_guardian(db, school, structure, session_factory):
    student_fee = assign(db, school, structure)
    payment = fees.collect_payment(db, student_fee.id, 500)

    assert notify_fee_payment(payment.id, session_factory) is True
    log = db.query(SmsLog).one()
    assert log.message_type == "fee"
    assert f"Receipt: {payment.receipt_number}" in log.message
    assert "Arif Hossain" in log.message


def test_no_guardian_phone_no_text(db, school, structure, session_factory):
    student_fee = assign(db, school, structure, school.students[2])
    payment = fees.collect_payment(db, student_fee.id, 100)
    assert notify_fee_payment(payment.id, session_factory) is False
    assert db.query(SmsLog).count() == 0
