from sqlalchemy.orm import Session
from app.db.models.user import ROLES, User
from app.core.errors import ConflictError, ValidationError
from app.core.security import get_password_hash


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, user_data):
    if user_data.role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}", errors={"role": "invalid"})
    if get_user_by_email(db, user_data.email):
        raise ConflictError("Email is already registered")

    db_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        role=user_data.role,
        phone=user_data.phone,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_users_by_role(db: Session, role: str):
    return db.query(User).filter(User.role == role, User.is_active == True).all()  # noqa: E712
