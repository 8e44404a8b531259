# app/schemas/sms.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SmsSend(BaseModel):
    phone: str
    message: str
    recipient_name: Optional[str] = None


class SmsResult(BaseModel):
    success: bool
    provider_id: Optional[str] = None
    error: Optional[str] = None

    class Config:
        from_attributes = True


class SmsLogOut(BaseModel):
    id: int
    recipient_phone: str
    recipient_name: Optional[str] = None
    message: str
    message_type: str
    status: str
    provider: str
    provider_id: Optional[str] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
