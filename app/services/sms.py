# app/services/sms.py
"""
SMS gateway adapter.

When ``SMS_API_URL`` is configured messages are POSTed to it with httpx;
otherwise a mock gateway accepts everything and hands back a generated id.
Every attempt, successful or not, is written to ``sms_logs``.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import TransientExternalError
from app.db.models.communication import SmsLog

logger = logging.getLogger(__name__)


@dataclass
class SmsOutcome:
    success: bool
    provider_id: Optional[str] = None
    error: Optional[str] = None


def _send_via_gateway(phone: str, message: str) -> str:
    headers = {
        "Authorization": f"Bearer {settings.SMS_API_TOKEN}",
        "Content-Type": "application/json",
    }
    payload = {"to": phone, "from": settings.SMS_SENDER_ID, "text": message}
    timeout = httpx.Timeout(settings.SMS_TIMEOUT_SECONDS)

    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.post(settings.SMS_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        raise TransientExternalError(f"SMS gateway error: {e}") from e

    if not isinstance(data, dict):
        raise TransientExternalError(f"SMS gateway returned an unexpected body: {data!r}")
    message_id = data.get("id") or data.get("message_id")
    if not message_id:
        raise TransientExternalError("SMS gateway did not return a message id")
    return str(message_id)


def _send_via_mock(phone: str, message: str) -> str:
    return f"MOCK-{uuid.uuid4().hex[:12]}"


def provider_name() -> str:
    return "http" if settings.SMS_API_URL else "mock"


def send_sms(
    db: Session,
    phone: str,
    message: str,
    message_type: str,
    recipient_name: Optional[str] = None,
    related_entity_type: Optional[str] = None,
    related_entity_id: Optional[int] = None,
    sent_by: Optional[int] = None,
) -> SmsOutcome:
    try:
        if settings.SMS_API_URL:
            outcome = SmsOutcome(success=True, provider_id=_send_via_gateway(phone, message))
        else:
            outcome = SmsOutcome(success=True, provider_id=_send_via_mock(phone, message))
    except TransientExternalError as e:
        outcome = SmsOutcome(success=False, error=str(e))

    db.add(SmsLog(
        recipient_phone=phone,
        recipient_name=recipient_name,
        message=message,
        message_type=message_type,
        status="sent" if outcome.success else "failed",
        provider=provider_name(),
        provider_id=outcome.provider_id,
        error_message=outcome.error,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        sent_by=sent_by,
    ))
    db.commit()

    if outcome.success:
        logger.info("SMS SENT: %s - %s", phone, message[:50])
    else:
        logger.warning("SMS FAILED: %s - %s", phone, outcome.error)
    return outcome


def absence_message(student_name: str, day: str) -> str:
    return f"Dear Guardian, {student_name} was marked ABSENT on {day}. - {settings.INSTITUTION_NAME}"


def library_fine_message(student_name: str, book_title: str, due_date: str, fine: int) -> str:
    return (
        f"Dear Guardian, {student_name} returned \"{book_title}\" late (due: {due_date}). "
        f"Fine: {fine}. - {settings.INSTITUTION_NAME} Library"
    )


def fee_payment_message(student_name: str, amount: float, receipt_number: str) -> str:
    return (
        f"Dear Guardian, Fee payment of {amount:g} received for {student_name}. "
        f"Receipt: {receipt_number}. Thank you! - {settings.INSTITUTION_NAME}"
    )
