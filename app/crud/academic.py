# app/crud/academic.py
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.models.academic import AcademicSession, SchoolClass, Section, Student, Subject


def get_current_session(db: Session) -> Optional[AcademicSession]:
    return db.query(AcademicSession).filter(AcademicSession.is_current == True).first()  # noqa: E712


def list_sessions(db: Session):
    return db.query(AcademicSession).order_by(AcademicSession.start_date.desc()).all()


def create_session(db: Session, data) -> AcademicSession:
    if data.end_date <= data.start_date:
        raise ValidationError("end_date must be after start_date", errors={"end_date": "before start_date"})
    if db.query(AcademicSession).filter(AcademicSession.name == data.name).first():
        raise ConflictError("Academic session already exists")

    if data.is_current:
        # Exactly one current session: clear the flag in the same transaction
        db.query(AcademicSession).update({AcademicSession.is_current: False}, synchronize_session=False)

    session = AcademicSession(**data.model_dump())
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def list_classes(db: Session):
    return db.query(SchoolClass).order_by(SchoolClass.name).all()


def get_class(db: Session, class_id: int) -> SchoolClass:
    school_class = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if not school_class:
        raise NotFoundError("Class not found")
    return school_class


def create_class(db: Session, name: str) -> SchoolClass:
    if db.query(SchoolClass).filter(SchoolClass.name == name).first():
        raise ConflictError("Class already exists")
    school_class = SchoolClass(name=name)
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return school_class


def create_section(db: Session, class_id: int, name: str) -> Section:
    get_class(db, class_id)
    if db.query(Section).filter(Section.class_id == class_id, Section.name == name).first():
        raise ConflictError("Section already exists in this class")
    section = Section(class_id=class_id, name=name)
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


def list_subjects(db: Session):
    return db.query(Subject).order_by(Subject.name).all()


def create_subject(db: Session, data) -> Subject:
    if db.query(Subject).filter(Subject.name == data.name).first():
        raise ConflictError("Subject already exists")
    subject = Subject(**data.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


def create_student(db: Session, data) -> Student:
    get_class(db, data.class_id)
    if data.section_id:
        section = db.query(Section).filter(Section.id == data.section_id).first()
        if not section or section.class_id != data.class_id:
            raise NotFoundError("Section not found in this class")
    if db.query(Student).filter(Student.admission_number == data.admission_number).first():
        raise ConflictError("Admission number already in use")

    student = Student(**data.model_dump())
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


def list_students(db: Session, class_id: Optional[int] = None, section_id: Optional[int] = None):
    query = db.query(Student).filter(Student.status == "active")
    if class_id:
        query = query.filter(Student.class_id == class_id)
    if section_id:
        query = query.filter(Student.section_id == section_id)
    return query.order_by(Student.roll_number, Student.id).all()


def get_session(db: Session, session_id: int) -> AcademicSession:
    session = db.query(AcademicSession).filter(AcademicSession.id == session_id).first()
    if not session:
        raise NotFoundError("Academic session not found")
    return session
