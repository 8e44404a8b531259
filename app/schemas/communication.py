# app/schemas/communication.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class AnnouncementCreate(BaseModel):
    title: str
    content: str
    target_audience: str
    target_class_ids: Optional[List[int]] = None
    priority: str = "normal"
    is_pinned: bool = False
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[str] = None
    is_pinned: Optional[bool] = None
    expires_at: Optional[datetime] = None


class AnnouncementOut(AnnouncementCreate):
    id: int
    published_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class AnnouncementPage(BaseModel):
    items: List[AnnouncementOut]
    pagination: Pagination


class AnnouncementStats(BaseModel):
    total: int
    pinned: int
    urgent: int
    active: int


class NotificationOut(BaseModel):
    id: int
    title: str
    message: str
    notification_type: str
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[int] = None
    action_url: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationPage(BaseModel):
    items: List[NotificationOut]
    pagination: Pagination
    unread_count: int


class UnreadCount(BaseModel):
    unread_count: int


class MarkedRead(BaseModel):
    updated: int
