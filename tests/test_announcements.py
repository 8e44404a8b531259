from datetime import datetime

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.crud import notification as crud_notification
from app.crud import user as crud_user
from app.db.models.communication import Notification
from app.schemas.communication import AnnouncementCreate, AnnouncementUpdate
from app.schemas.user import UserCreate
from app.services import announcements


def announce(db, audience="all", **fields):
    fields.setdefault("title", "Sports Day")
    fields.setdefault("content", "Sports day is on Friday.")
    return announcements.create_announcement(db, AnnouncementCreate(target_audience=audience, **fields))


def test_all_audience_notifies_every_active_user(db, admin, teacher):
    announcement, notified = announce(db)
    assert notified == 2
    rows = db.query(Notification).order_by(Notification.user_id).all()
    assert [n.user_id for n in rows] == sorted([admin.id, teacher.id])
    assert all(n.related_entity_id == announcement.id and n.notification_type == "announcement" for n in rows)


def test_role_audience_only_reaches_that_role(db, admin, teacher):
    _, notified = announce(db, "teacher")
    assert notified == 1
    assert db.query(Notification).one().user_id == teacher.id


def test_class_specific_reaches_linked_student_accounts(db, school, admin):
    account = crud_user.create_user(
        db, UserCreate(email="arif@school.test", password="secret123", full_name="Arif", role="student")
    )
    school.students[0].user_id = account.id
    db.commit()

    _, notified = announce(db, "class_specific", target_class_ids=[school.school_class.id])
    assert notified == 1
    assert db.query(Notification).one().user_id == account.id


def test_class_specific_needs_classes(db):
    with pytest.raises(ValidationError) as exc:
        announce(db, "class_specific")
    assert "target_class_ids" in exc.value.errors


def test_unknown_audience_and_priority(db):
    with pytest.raises(ValidationError) as exc:
        announce(db, "aliens", priority="meh")
    assert set(exc.value.errors) == {"target_audience", "priority"}


def test_long_content_is_shortened_in_notifications(db, admin):
    announce(db, content="x" * 250)
    assert db.query(Notification).one().message == "x" * 200 + "..."


def test_pinned_first(db):
    plain, _ = announce(db, title="Plain")
    pinned, _ = announce(db, title="Pinned", is_pinned=True)
    items, total = announcements.list_announcements(db)
    assert total == 2
    assert [a.id for a in items] == [pinned.id, plain.id]


def test_user_feed_skips_expired_and_other_roles(db, teacher):
    current, _ = announce(db, "teacher", title="Staff meeting")
    announce(db, "teacher", title="Old", expires_at=datetime(2020, 1, 1))
    announce(db, "guardian", title="PTA")
    assert [a.id for a in announcements.announcements_for_user(db, teacher)] == [current.id]


def test_update_delete_and_stats(db):
    announcement, _ = announce(db, priority="urgent")
    updated = announcements.update_announcement(db, announcement.id, AnnouncementUpdate(is_pinned=True))
    assert updated.is_pinned is True
    assert announcements.announcement_stats(db) == {"total": 1, "pinned": 1, "urgent": 1, "active": 1}

    announcements.delete_announcement(db, announcement.id)
    with pytest.raises(NotFoundError, match="Announcement not found"):
        announcements.get_announcement(db, announcement.id)


def test_inbox_read_and_delete(db, admin, teacher):
    announce(db)
    announce(db, title="Exam routine")
    assert crud_notification.unread_count(db, teacher.id) == 2

    items, total = crud_notification.list_for_user(db, teacher.id, unread_only=True, limit=1)
    assert (len(items), total) == (1, 2)

    read = crud_notification.mark_read(db, teacher.id, items[0].id)
    assert read.is_read is True and read.read_at is not None
    assert crud_notification.unread_count(db, teacher.id) == 1
    assert crud_notification.mark_all_read(db, teacher.id) == 1
    assert crud_notification.unread_count(db, admin.id) == 2

    with pytest.raises(NotFoundError, match="Notification not found"):
        crud_notification.mark_read(db, admin.id, items[0].id)
    crud_notification.delete_notification(db, teacher.id, items[0].id)
    assert crud_notification.list_for_user(db, teacher.id)[1] == 1
