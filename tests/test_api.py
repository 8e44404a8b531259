from datetime import date

from app.db.models.communication import SmsLog
from app.services.grading import ensure_default_bands


def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "email": "rahim@school.test", "password": "pass1234", "full_name": "Rahim", "role": "teacher",
    })
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.post("/api/auth/login", json={"email": "rahim@school.test", "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid email or password"}

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.json()["data"]["role"] == "teacher"


def test_self_registration_cannot_pick_admin(client):
    response = client.post("/api/auth/register", json={
        "email": "sneaky@school.test", "password": "pass1234", "full_name": "Sneaky", "role": "admin",
    })
    assert response.status_code == 400


def test_missing_token_is_unauthorized(client):
    assert client.get("/api/academic/classes").status_code == 401


def test_teacher_cannot_process_results(client, teacher_headers, exam, school):
    response = client.post(
        "/api/exams/results/process",
        json={"exam_id": exam.exam.id, "class_id": school.school_class.id},
        headers=teacher_headers,
    )
    assert response.status_code == 403


def test_request_validation_is_400(client, admin_headers):
    response = client.post("/api/exams/results/process", json={"exam_id": "x"}, headers=admin_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "class_id" in body["errors"]


def test_marks_over_total_name_the_limit(client, teacher_headers, exam, school):
    response = client.post("/api/exams/marks", headers=teacher_headers, json={
        "exam_subject_id": exam.math.id,
        "marks": [{"student_id": school.students[0].id, "marks_obtained": 101}],
    })
    assert response.status_code == 400
    assert response.json()["error"] == "Marks cannot exceed total marks (100)"


def test_results_flow_over_http(client, db, admin_headers, teacher_headers, exam, school):
    ensure_default_bands(db)
    arif = school.students[0]
    for paper, marks in ((exam.math, {"marks_obtained": 80}), (exam.english, {"is_absent": True})):
        response = client.post("/api/exams/marks", headers=teacher_headers, json={
            "exam_subject_id": paper.id, "marks": [dict(student_id=arif.id, **marks)],
        })
        assert response.json()["data"] == {"updated_count": 1}

    response = client.post(
        "/api/exams/results/process",
        json={"exam_id": exam.exam.id, "class_id": school.school_class.id},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"total_students": 1, "processed": 1}

    response = client.get(f"/api/exams/{exam.exam.id}/results/{arif.id}", headers=teacher_headers)
    data = response.json()["data"]
    assert data["percentage"] == 40.0
    assert data["grade"] == "D"
    assert len(data["subject_results"]) == 2


def test_grading_table_rejects_gaps(client, admin_headers):
    response = client.put("/api/exams/grading/bands", headers=admin_headers, json=[
        {"name": "Pass", "grade": "P", "min_percentage": 50, "max_percentage": 100, "grade_point": 1},
        {"name": "Fail", "grade": "F", "min_percentage": 0, "max_percentage": 40, "grade_point": 0},
    ])
    assert response.status_code == 400
    assert response.json()["errors"] == {"P": "gap after F"}


def test_attendance_over_http_texts_guardians(client, db, teacher_headers, school):
    arif, nadia, _ = school.students
    payload = {
        "class_id": school.school_class.id,
        "section_id": school.section.id,
        "date": "2026-03-02",
        "records": [{"student_id": arif.id}, {"student_id": nadia.id, "status": "absent"}],
    }
    response = client.post("/api/attendance/mark", json=payload, headers=teacher_headers)
    assert response.status_code == 200
    assert response.json()["data"]["absent_count"] == 1
    assert db.query(SmsLog).filter(SmsLog.recipient_phone == nadia.guardian_phone).count() == 1

    day = {"class_id": school.school_class.id, "section_id": school.section.id, "date": "2026-03-02"}
    assert client.post("/api/attendance/finalize", json=day, headers=teacher_headers).status_code == 200

    response = client.post("/api/attendance/mark", json=payload, headers=teacher_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "Attendance for this date is already finalized"


def test_timetable_conflict_returns_the_clash(client, admin_headers, teacher, school):
    period = client.post("/api/timetable/periods", headers=admin_headers, json={
        "name": "Period 1", "start_time": "09:00", "end_time": "09:45", "order_index": 1,
    }).json()["data"]
    other = client.post(
        f"/api/academic/classes/{school.school_class.id}/sections", headers=admin_headers, json={"name": "B"}
    ).json()["data"]

    slot = {
        "class_id": school.school_class.id, "section_id": school.section.id, "subject_id": school.math.id,
        "teacher_id": teacher.id, "period_id": period["id"], "day_of_week": 0,
    }
    response = client.post("/api/timetable/entries", headers=admin_headers, json=slot)
    assert response.status_code == 201
    first_id = response.json()["data"]["id"]

    response = client.post("/api/timetable/entries", headers=admin_headers, json={**slot, "room_number": "101"})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == first_id

    response = client.post("/api/timetable/entries", headers=admin_headers, json={**slot, "section_id": other["id"]})
    assert response.status_code == 409
    assert response.json()["context"]["id"] == first_id

    response = client.get(
        "/api/timetable/conflicts",
        params={"teacher_id": teacher.id, "period_id": period["id"], "day_of_week": 0, "exclude_entry_id": first_id},
        headers=admin_headers,
    )
    assert response.json()["data"] == {"has_conflict": False, "conflicts": []}


def test_library_requires_librarian(client, teacher_headers, librarian_headers):
    book = {"title": "Gitanjali", "author": "Rabindranath Tagore", "category": "Poetry", "total_quantity": 2}
    assert client.post("/api/library/books", json=book, headers=teacher_headers).status_code == 403
    response = client.post("/api/library/books", json=book, headers=librarian_headers)
    assert response.status_code == 201
    assert response.json()["data"]["available_quantity"] == 2


def test_late_return_over_http_texts_guardian(client, db, librarian_headers, school):
    book = client.post("/api/library/books", headers=librarian_headers, json={
        "title": "Gitanjali", "author": "Rabindranath Tagore", "category": "Poetry", "total_quantity": 1,
    }).json()["data"]
    arif = school.students[0]
    issue = client.post("/api/library/issues", headers=librarian_headers, json={
        "book_id": book["id"], "student_id": arif.id, "issue_date": "2026-03-01", "due_date": "2026-03-10",
    }).json()["data"]

    response = client.post(
        f"/api/library/issues/{issue['id']}/return", headers=librarian_headers, json={"return_date": "2026-03-12"}
    )
    assert response.json()["data"]["fine_amount"] == 10
    log = db.query(SmsLog).filter(SmsLog.message_type == "library").one()
    assert log.recipient_phone == arif.guardian_phone

    response = client.post("/api/library/issues", headers=librarian_headers, json={
        "book_id": book["id"], "student_id": arif.id, "issue_date": date.today().isoformat(),
    })
    assert response.status_code == 201


def test_sms_send_and_logs(client, admin_headers):
    response = client.post("/api/sms/send", headers=admin_headers, json={"phone": "01700000000", "message": "Hello"})
    assert response.json()["data"]["success"] is True
    assert response.json()["data"]["provider_id"].startswith("MOCK-")

    logs = client.get("/api/sms/logs", headers=admin_headers).json()["data"]
    assert [entry["message_type"] for entry in logs] == ["custom"]


def test_fee_collection_over_http(client, db, accountant_headers, school):
    headers = accountant_headers
    category = client.post("/api/fees/categories", headers=headers, json={"name": "Tuition"}).json()["data"]
    structure = client.post("/api/fees/structures", headers=headers, json={
        "name": "Annual", "academic_session_id": school.session.id,
        "items": [{"fee_category_id": category["id"], "amount": 1000}],
    }).json()["data"]
    assign = {"student_id": school.students[0].id, "fee_structure_id": structure["id"], "academic_session_id": school.session.id}
    student_fee = client.post("/api/fees/assign", headers=headers, json=assign).json()["data"]

    assert client.post("/api/fees/assign", headers=headers, json=assign).status_code == 409

    response = client.post("/api/fees/payments", headers=headers, json={"student_fee_id": student_fee["id"], "amount": 1200})
    assert response.status_code == 409
    assert response.json() == {
        "success": False, "error": "Payment amount exceeds due amount", "context": {"available": 1000, "requested": 1200},
    }

    response = client.post("/api/fees/payments", headers=headers, json={"student_fee_id": student_fee["id"], "amount": 400})
    assert response.status_code == 201
    assert db.query(SmsLog).filter(SmsLog.message_type == "fee").count() == 1

    fees = client.get(f"/api/fees/students/{school.students[0].id}", headers=headers).json()["data"]
    assert (fees[0]["due_amount"], fees[0]["status"]) == (600, "partial")


def test_teacher_cannot_collect_fees(client, teacher_headers):
    response = client.post("/api/fees/payments", headers=teacher_headers, json={"student_fee_id": 1, "amount": 1})
    assert response.status_code == 403


def test_full_room_over_http(client, admin_headers, school):
    building = client.post("/api/hostel/", headers=admin_headers, json={"name": "South", "hostel_type": "girls"}).json()["data"]
    room = client.post(
        f"/api/hostel/{building['id']}/rooms", headers=admin_headers, json={"room_number": "1", "capacity": 1}
    ).json()["data"]

    first = {"room_id": room["id"], "student_id": school.students[0].id}
    assert client.post("/api/hostel/allocations", headers=admin_headers, json=first).status_code == 201

    response = client.post(
        "/api/hostel/allocations", headers=admin_headers, json={**first, "student_id": school.students[1].id}
    )
    assert response.status_code == 409
    assert response.json()["context"] == {"available": 0, "requested": 1}


def test_announcement_lands_in_inbox(client, admin_headers, teacher_headers):
    response = client.post("/api/announcements/", headers=admin_headers, json={
        "title": "Holiday", "content": "School is closed on Monday.", "target_audience": "teacher",
    })
    assert response.status_code == 201
    assert response.json()["message"] == "Announcement published to 1 user(s)"

    inbox = client.get("/api/notifications/", headers=teacher_headers).json()["data"]
    assert inbox["unread_count"] == 1
    assert inbox["items"][0]["title"] == "Holiday"

    note_id = inbox["items"][0]["id"]
    assert client.put(f"/api/notifications/{note_id}/read", headers=teacher_headers).json()["data"]["is_read"] is True
    assert client.get("/api/notifications/unread-count", headers=teacher_headers).json()["data"] == {"unread_count": 0}
    assert client.delete(f"/api/notifications/{note_id}", headers=admin_headers).status_code == 404


def test_expense_summary_over_http(client, admin_headers):
    category = client.post("/api/expenses/categories", headers=admin_headers, json={"name": "Utilities"}).json()["data"]
    response = client.post("/api/expenses/", headers=admin_headers, json={
        "category_id": category["id"], "title": "Electricity", "amount": 250, "expense_date": "2026-04-01",
    })
    assert response.status_code == 201

    summary = client.get("/api/expenses/summary", headers=admin_headers).json()["data"]
    assert summary == {"total_income": 0, "total_expense": 250, "net_balance": -250, "profit_margin": 0}
