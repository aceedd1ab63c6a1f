# app/schemas/notification.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, List

from app.models.notification import NotificationStatus

class NotificationRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: Optional[int] = None
    email: str
    sent_at: Optional[datetime] = None
    status: NotificationStatus
    notification_type: str
    created_at: datetime

class NotificationLog(BaseModel):
    notifications: List[NotificationRecordOut]

class ReminderRunResult(BaseModel):
    status: str
    reason: Optional[str] = None
    checked: int = 0
    sent: int = 0
    failed: int = 0

class ReminderSendResult(BaseModel):
    success: bool
    message: Optional[str] = None
    task: Optional[str] = None
    email: Optional[str] = None
