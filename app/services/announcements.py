# app/services/announcements.py
"""
Announcements and their fan-out to in-app notifications.

Publishing an announcement writes one ``Notification`` per targeted user in
the same transaction. The audience is ``all``, ``class_specific`` (users
linked to students of ``target_class_ids``) or a user role.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.crud import notification as crud_notification
from app.db.models.academic import Student
from app.db.models.communication import Announcement
from app.db.models.user import ROLES, User

logger = logging.getLogger(__name__)

AUDIENCES = ("all", "class_specific") + ROLES
PRIORITIES = ("low", "normal", "high", "urgent")
PREVIEW_LENGTH = 200


def preview(content: str) -> str:
    return content if len(content) <= PREVIEW_LENGTH else content[:PREVIEW_LENGTH] + "..."


def _validate(title, content, audience, priority, class_ids) -> None:
    errors = {}
    if not title:
        errors["title"] = "required"
    if not content:
        errors["content"] = "required"
    if audience not in AUDIENCES:
        errors["target_audience"] = f"must be one of {', '.join(AUDIENCES)}"
    elif audience == "class_specific" and not class_ids:
        errors["target_class_ids"] = "required for class_specific announcements"
    if priority not in PRIORITIES:
        errors["priority"] = f"must be one of {', '.join(PRIORITIES)}"
    if errors:
        raise ValidationError("Invalid announcement", errors=errors)


def target_user_ids(db: Session, audience: str, class_ids: Optional[List[int]] = None) -> List[int]:
    active = User.is_active == True  # noqa: E712
    if audience == "all":
        query = db.query(User.id).filter(active)
    elif audience == "class_specific":
        query = (
            db.query(User.id)
            .join(Student, Student.user_id == User.id)
            .filter(active, Student.class_id.in_(class_ids or []))
        )
    else:
        query = db.query(User.id).filter(active, User.role == audience)
    return sorted({uid for (uid,) in query.all()})


def create_announcement(db: Session, payload, created_by: Optional[int] = None) -> Tuple[Announcement, int]:
    _validate(payload.title, payload.content, payload.target_audience, payload.priority, payload.target_class_ids)

    announcement = Announcement(**payload.model_dump(), created_by=created_by)
    db.add(announcement)
    db.flush()

    recipients = target_user_ids(db, payload.target_audience, payload.target_class_ids)
    notified = crud_notification.add_for_users(
        db,
        recipients,
        title=payload.title,
        message=preview(payload.content),
        notification_type="announcement",
        related_entity_type="announcement",
        related_entity_id=announcement.id,
    )
    db.commit()
    db.refresh(announcement)
    logger.info("Announcement %s published to %s (%d users)", announcement.id, payload.target_audience, notified)
    return announcement, notified


def list_announcements(
    db: Session,
    audience: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Announcement], int]:
    query = db.query(Announcement)
    if audience:
        query = query.filter(Announcement.target_audience == audience)
    if priority:
        query = query.filter(Announcement.priority == priority)
    total = query.count()
    items = (
        query.order_by(Announcement.is_pinned.desc(), Announcement.published_at.desc(), Announcement.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def get_announcement(db: Session, announcement_id: int) -> Announcement:
    announcement = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not announcement:
        raise NotFoundError("Announcement not found")
    return announcement


def update_announcement(db: Session, announcement_id: int, payload) -> Announcement:
    announcement = get_announcement(db, announcement_id)
    changes = payload.model_dump(exclude_unset=True)
    _validate(
        changes.get("title", announcement.title),
        changes.get("content", announcement.content),
        announcement.target_audience,
        changes.get("priority", announcement.priority),
        announcement.target_class_ids,
    )
    for name, value in changes.items():
        setattr(announcement, name, value)
    db.commit()
    db.refresh(announcement)
    return announcement


def delete_announcement(db: Session, announcement_id: int) -> None:
    db.delete(get_announcement(db, announcement_id))
    db.commit()


def _not_expired(now: datetime):
    return or_(Announcement.expires_at.is_(None), Announcement.expires_at > now)


def announcements_for_user(db: Session, user: User, now: Optional[datetime] = None) -> List[Announcement]:
    now = now or datetime.utcnow()
    return (
        db.query(Announcement)
        .filter(Announcement.target_audience.in_(("all", user.role)), _not_expired(now))
        .order_by(Announcement.is_pinned.desc(), Announcement.published_at.desc(), Announcement.id.desc())
        .all()
    )


def announcement_stats(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or datetime.utcnow()
    query = db.query(Announcement)
    return {
        "total": query.count(),
        "pinned": query.filter(Announcement.is_pinned == True).count(),  # noqa: E712
        "urgent": query.filter(Announcement.priority == "urgent").count(),
        "active": query.filter(_not_expired(now)).count(),
    }
