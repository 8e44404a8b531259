from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.api.deps import get_db, get_current_user, require_admin
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.user import UserCreate, UserLogin, Token, User as UserOut
from app.crud import user as crud_user
from app.core.security import verify_password, create_user_token

router = APIRouter()

# Staff accounts with wider access are created by an administrator
SELF_SERVICE_ROLES = ("teacher", "student", "guardian")


@router.post("/register", response_model=Token)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    if user_in.role not in SELF_SERVICE_ROLES:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(SELF_SERVICE_ROLES)}")
    user = crud_user.create_user(db, user_in)
    access_token = create_user_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/login", response_model=Token)
def login(form: UserLogin, db: Session = Depends(get_db)):
    user = crud_user.get_user_by_email(db, form.email)
    if not user or not verify_password(form.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")
    access_token = create_user_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=Envelope[UserOut])
def me(current_user: User = Depends(get_current_user)):
    return {"data": current_user}


@router.post("/users", response_model=Envelope[UserOut], status_code=201)
def create_staff_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = crud_user.create_user(db, user_in)
    return {"message": "User created", "data": user}
