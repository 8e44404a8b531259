from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db.models.communication import Notification


def create_notification(
    db: Session,
    user_id: int,
    title: str,
    message: str,
    notification_type: str = "general",
    related_entity_type: Optional[str] = None,
    related_entity_id: Optional[int] = None,
    action_url: Optional[str] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=notification_type,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        action_url=action_url,
        is_read=False,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def add_for_users(db: Session, user_ids: Iterable[int], **fields) -> int:
    """Queue one notification per user on the session; the caller commits."""
    count = 0
    for user_id in user_ids:
        db.add(Notification(user_id=user_id, is_read=False, **fields))
        count += 1
    return count


def unread_count(db: Session, user_id: int) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id, Notification.is_read == False  # noqa: E712
    ).count()


def list_for_user(
    db: Session, user_id: int, unread_only: bool = False, page: int = 1, limit: int = 20
) -> Tuple[List[Notification], int]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    total = query.count()
    items = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total


def _get_own(db: Session, user_id: int, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id, Notification.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, user_id: int, notification_id: int) -> Notification:
    notification = _get_own(db, user_id, notification_id)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = datetime.utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .update({Notification.is_read: True, Notification.read_at: datetime.utcnow()}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
    db.delete(_get_own(db, user_id, notification_id))
    db.commit()
