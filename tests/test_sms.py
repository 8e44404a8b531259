from datetime import date

import httpx
import pytest

from app.core.config import settings
from app.db.models.communication import SmsLog
from app.schemas.attendance import AttendanceRecord
from app.services import attendance, sms
from app.services.notifications import notify_absentees

GATEWAY = "https://sms.gateway.test/send"


@pytest.fixture
def gateway(monkeypatch):
    """Route the SMS adapter's httpx client through a MockTransport answering with ``handler``."""
    monkeypatch.setattr(settings, "SMS_API_URL", GATEWAY)
    real_client = httpx.Client
    requests = []

    def install(handler):
        def recording(request):
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording)
        monkeypatch.setattr(sms.httpx, "Client", lambda **kwargs: real_client(transport=transport, **kwargs))
        return requests

    return install


def test_gateway_success_records_provider_id(db, gateway):
    requests = gateway(lambda request: httpx.Response(200, json={"id": "gw-123"}))

    outcome = sms.send_sms(db, "01711000001", "hello", "general")

    assert outcome.success is True
    assert outcome.provider_id == "gw-123"
    log = db.query(SmsLog).one()
    assert (log.status, log.provider, log.provider_id, log.error_message) == ("sent", "http", "gw-123", None)
    assert requests[0].url == GATEWAY
    assert b'"to":"01711000001"' in requests[0].content.replace(b" ", b"")


def test_gateway_server_error_is_logged_as_failed(db, gateway):
    gateway(lambda request: httpx.Response(500, json={"error": "down"}))

    outcome = sms.send_sms(db, "01711000001", "hello", "general")

    assert outcome.success is False
    log = db.query(SmsLog).one()
    assert log.status == "failed"
    assert log.provider_id is None
    assert "500" in log.error_message


def test_gateway_list_body_is_logged_as_failed(db, gateway):
    gateway(lambda request: httpx.Response(200, json=["queued"]))

    outcome = sms.send_sms(db, "01711000001", "hello", "general")

    assert outcome.success is False
    log = db.query(SmsLog).one()
    assert log.status == "failed"
    assert "unexpected body" in log.error_message


def test_gateway_reply_without_id_is_logged_as_failed(db, gateway):
    gateway(lambda request: httpx.Response(200, json={"status": "ok"}))

    assert sms.send_sms(db, "01711000001", "hello", "general").success is False
    assert "message id" in db.query(SmsLog).one().error_message


def test_gateway_invalid_url_is_logged_as_failed(db, gateway):
    def reject(request):
        raise httpx.InvalidURL("bad gateway url")

    gateway(reject)

    assert sms.send_sms(db, "01711000001", "hello", "general").success is False
    assert db.query(SmsLog).one().status == "failed"


def test_malformed_gateway_reply_does_not_stop_absence_notifications(db, school, session_factory, gateway):
    gateway(lambda request: httpx.Response(200, json=["queued"]))
    arif, nadia, tanvir = school.students
    day = date(2026, 3, 4)

    _, absences = attendance.mark_attendance(
        db, school.school_class.id, school.section.id, day,
        [
            AttendanceRecord(student_id=arif.id, status="absent"),
            AttendanceRecord(student_id=nadia.id, status="absent"),
            AttendanceRecord(student_id=tanvir.id, status="present"),
        ],
    )

    assert notify_absentees(absences, session_factory) == 0

    logs = db.query(SmsLog).order_by(SmsLog.id).all()
    assert [(log.recipient_phone, log.status) for log in logs] == [
        (arif.guardian_phone, "failed"),
        (nadia.guardian_phone, "failed"),
    ]
    stats = attendance.get_attendance_stats(db, school.school_class.id, school.section.id)
    assert stats["total_days"] == 1
    assert stats["total_absent"] == 2


def test_unexpected_error_for_one_absentee_does_not_skip_the_rest(db, school, session_factory, monkeypatch):
    arif, nadia, _ = school.students
    real_send = sms.send_sms

    def flaky(db, phone, *args, **kwargs):
        if phone == arif.guardian_phone:
            raise RuntimeError("boom")
        return real_send(db, phone, *args, **kwargs)

    monkeypatch.setattr(sms, "send_sms", flaky)
    _, absences = attendance.mark_attendance(
        db, school.school_class.id, school.section.id, date(2026, 3, 5),
        [AttendanceRecord(student_id=arif.id, status="absent"), AttendanceRecord(student_id=nadia.id, status="absent")],
    )

    assert notify_absentees(absences, session_factory) == 1
    assert [log.recipient_phone for log in db.query(SmsLog).all()] == [nadia.guardian_phone]
