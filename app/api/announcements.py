# app/api/announcements.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_admin
from app.db.models.user import User
from app.schemas.common import Envelope
from app.schemas.communication import (
    AnnouncementCreate,
    AnnouncementOut,
    AnnouncementPage,
    AnnouncementStats,
    AnnouncementUpdate,
)
from app.services import announcements as announcement_service

router = APIRouter()


@router.post("/", response_model=Envelope[AnnouncementOut], status_code=201)
def create_announcement(
    payload: AnnouncementCreate, db: Session = Depends(get_db), current_user: User = Depends(require_admin)
):
    announcement, notified = announcement_service.create_announcement(db, payload, created_by=current_user.id)
    return {"message": f"Announcement published to {notified} user(s)", "data": announcement}


@router.get("/", response_model=Envelope[AnnouncementPage])
def get_announcements(
    target_audience: Optional[str] = None,
    priority: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    items, total = announcement_service.list_announcements(db, target_audience, priority, page, limit)
    return {"data": {"items": items, "pagination": {"page": page, "limit": limit, "total": total}}}


@router.get("/mine", response_model=Envelope[List[AnnouncementOut]])
def get_my_announcements(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"data": announcement_service.announcements_for_user(db, current_user)}


@router.get("/stats", response_model=Envelope[AnnouncementStats])
def get_stats(db: Session = Depends(get_db), current_user=Depends(require_admin)):
    return {"data": announcement_service.announcement_stats(db)}


@router.get("/{announcement_id}", response_model=Envelope[AnnouncementOut])
def get_announcement(announcement_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    return {"data": announcement_service.get_announcement(db, announcement_id)}


@router.put("/{announcement_id}", response_model=Envelope[AnnouncementOut])
def update_announcement(
    announcement_id: int,
    payload: AnnouncementUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_admin),
):
    announcement = announcement_service.update_announcement(db, announcement_id, payload)
    return {"message": "Announcement updated successfully", "data": announcement}


@router.delete("/{announcement_id}", response_model=Envelope[None])
def delete_announcement(announcement_id: int, db: Session = Depends(get_db), current_user=Depends(require_admin)):
    announcement_service.delete_announcement(db, announcement_id)
    return {"message": "Announcement deleted successfully"}
