# app/models/notification.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database import Base
import enum
from datetime import datetime

class NotificationStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"

class NotificationType(str, enum.Enum):
    DUE_REMINDER = "due_reminder"

class NotificationRecord(Base):
    """One email send attempt. Rows are appended, never updated."""
    __tablename__ = "email_notifications"

    id = Column(Integer, primary_key=True, index=True)
    # Plain reference to tasks.id; rows outlive the task they describe
    task_id = Column(Integer, nullable=True, index=True)
    email = Column(String, nullable=False)
    sent_at = Column(DateTime, nullable=True)
    status = Column(String(10), nullable=False, default=NotificationStatus.PENDING.value)
    notification_type = Column(String(50), nullable=False, default=NotificationType.DUE_REMINDER.value)
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)

    task = relationship("Task", primaryjoin="foreign(NotificationRecord.task_id) == Task.id", viewonly=True)

    def __repr__(self):
        return f"<NotificationRecord(id={self.id}, task_id={self.task_id}, status='{self.status}', type='{self.notification_type}')>"
