# app/api/deps.py
from typing import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.security import decode_access_token
from app.crud import academic as crud_academic
from app.crud.user import get_user_by_email
from app.db.models.academic import AcademicSession
from app.db.models.user import User
from app.db.session import SessionLocal

bearer_scheme = HTTPBearer(auto_error=False)

ADMINS = ("superadmin", "admin")


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> Callable[[], Session]:
    """Session factory for work that outlives the request (background tasks)."""
    return SessionLocal


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise unauthorized

    email = payload.get("sub")
    if not email:
        raise unauthorized
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        raise unauthorized
    return user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this resource",
            )
        return current_user
    return checker


require_admin = require_roles(*ADMINS)
require_teacher = require_roles("teacher", *ADMINS)


def get_current_session(db: Session = Depends(get_db)) -> AcademicSession:
    """The active academic session, resolved once per request."""
    session = crud_academic.get_current_session(db)
    if not session:
        raise NotFoundError("No current academic session is configured")
    return session
