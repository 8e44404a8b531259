import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_session_factory
from app.core.security import create_user_token
from app.crud import academic as crud_academic
from app.crud import exam as crud_exam
from app.crud import user as crud_user
from app.db import Base
from app.main import app
from app.schemas.academic import AcademicSessionCreate, StudentCreate, SubjectCreate
from app.schemas.exam import ExamCreate, ExamSubjectCreate, ExamTypeCreate
from app.schemas.user import UserCreate


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db, session_factory):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, email, role, password="secret123"):
    return crud_user.create_user(
        db, UserCreate(email=email, password=password, full_name=email.split("@")[0].title(), role=role)
    )


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin@school.test", "admin")


@pytest.fixture
def teacher(db):
    return make_user(db, "teacher@school.test", "teacher")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def teacher_headers(teacher):
    return auth_headers(teacher)


@pytest.fixture
def librarian_headers(db):
    return auth_headers(make_user(db, "librarian@school.test", "librarian"))


@pytest.fixture
def accountant_headers(db):
    return auth_headers(make_user(db, "accounts@school.test", "accountant"))


@pytest.fixture
def school(db):
    """One class with one section, two subjects and three students."""
    session = crud_academic.create_session(
        db, AcademicSessionCreate(name="2025-2026", start_date=date(2025, 4, 1), end_date=date(2026, 3, 31), is_current=True)
    )
    school_class = crud_academic.create_class(db, "Class 8")
    section = crud_academic.create_section(db, school_class.id, "A")
    math = crud_academic.create_subject(db, SubjectCreate(name="Mathematics", code="MATH"))
    english = crud_academic.create_subject(db, SubjectCreate(name="English", code="ENG"))

    students = [
        crud_academic.create_student(db, StudentCreate(
            admission_number=f"ADM-{n:03d}",
            full_name=name,
            class_id=school_class.id,
            section_id=section.id,
            roll_number=str(n),
            guardian_name=f"{name} Sr." if phone else None,
            guardian_phone=phone,
        ))
        for n, (name, phone) in enumerate(
            [("Arif Hossain", "01711000001"), ("Nadia Rahman", "01711000002"), ("Tanvir Ahmed", None)],
            start=1,
        )
    ]
    return SimpleNamespace(
        session=session,
        school_class=school_class,
        section=section,
        math=math,
        english=english,
        students=students,
    )


@pytest.fixture
def exam(db, school):
    """A final exam for the school's class with Mathematics and English papers out of 100."""
    exam_type = crud_exam.create_exam_type(db, ExamTypeCreate(name="Final"))
    exam = crud_exam.create_exam(
        db,
        ExamCreate(name="Annual Examination", exam_type_id=exam_type.id, start_date=date(2026, 2, 1), end_date=date(2026, 2, 10)),
        school.session,
        created_by=None,
    )
    papers = {}
    for day, subject in ((1, school.math), (2, school.english)):
        papers[subject.name] = crud_exam.create_exam_subject(db, exam.id, ExamSubjectCreate(
            class_id=school.school_class.id,
            section_id=school.section.id,
            subject_id=subject.id,
            exam_date=date(2026, 2, day),
            start_time="10:00",
            end_time="13:00",
            total_marks=100,
            passing_marks=33,
        ))
    return SimpleNamespace(exam=exam, math=papers["Mathematics"], english=papers["English"])
