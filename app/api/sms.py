# app/api/sms.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.db.models.communication import SmsLog
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.sms import SmsLogOut, SmsResult, SmsSend
from app.services import sms as sms_service

router = APIRouter()


@router.post("/send", response_model=Envelope[SmsResult])
def send_message(payload: SmsSend, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    outcome = sms_service.send_sms(
        db,
        payload.phone,
        payload.message,
        "custom",
        recipient_name=payload.recipient_name,
        sent_by=current_user.id,
    )
    return {
        "success": outcome.success,
        "message": "SMS sent" if outcome.success else "SMS failed",
        "data": outcome,
    }


@router.get("/logs", response_model=Envelope[List[SmsLogOut]])
def get_logs(limit: int = 100, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"data": db.query(SmsLog).order_by(SmsLog.id.desc()).limit(limit).all()}
