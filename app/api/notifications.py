# app/api/notifications.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.crud import notification as crud_notification
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.communication import MarkedRead, NotificationOut, NotificationPage, UnreadCount

router = APIRouter()


@router.get("/", response_model=Envelope[NotificationPage])
def get_notifications(
    unread_only: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items, total = crud_notification.list_for_user(db, current_user.id, unread_only, page, limit)
    return {
        "data": {
            "items": items,
            "pagination": {"page": page, "limit": limit, "total": total},
            "unread_count": crud_notification.unread_count(db, current_user.id),
        }
    }


@router.get("/unread-count", response_model=Envelope[UnreadCount])
def get_unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"data": {"unread_count": crud_notification.unread_count(db, current_user.id)}}


@router.put("/read-all", response_model=Envelope[MarkedRead])
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    updated = crud_notification.mark_all_read(db, current_user.id)
    return {"message": "All notifications marked as read", "data": {"updated": updated}}


@router.put("/{notification_id}/read", response_model=Envelope[NotificationOut])
def mark_read(notification_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {
        "message": "Notification marked as read",
        "data": crud_notification.mark_read(db, current_user.id, notification_id),
    }


@router.delete("/{notification_id}", response_model=Envelope[None])
def delete_notification(
    notification_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    crud_notification.delete_notification(db, current_user.id, notification_id)
    return {"message": "Notification deleted successfully"}
