from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text
from sqlalchemy.orm import relationship
from app.database import Base
import enum
from datetime import datetime

class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Dates (date only, no time component)
    due_date = Column(Date, nullable=False, index=True)

    # Task properties
    status = Column(String(20), default=TaskStatus.PENDING.value, nullable=False, index=True)
    priority = Column(String(20), default=TaskPriority.MEDIUM.value, nullable=False)

    # Relationships
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Equipment details
    equipment_id = Column(String, nullable=True)
    location = Column(String, nullable=True)
    estimated_hours = Column(Integer, nullable=True)
    actual_hours = Column(Integer, nullable=True)
    completion_notes = Column(Text, nullable=True)

    # System dates; completed_at is set iff status is completed
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    creator = relationship("User", foreign_keys=[created_by], back_populates="created_tasks")
    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")
    # Read-only so deleting a task never rewrites its notification log
    notifications = relationship(
        "NotificationRecord", primaryjoin="Task.id == foreign(NotificationRecord.task_id)", viewonly=True
    )

    def set_status(self, status: str, now: datetime = None):
        """Move the task to `status`, keeping completed_at in step with it"""
        status = TaskStatus(status).value
        self.status = status
        if status == TaskStatus.COMPLETED.value:
            self.completed_at = now or datetime.now()
        else:
            self.completed_at = None

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}', due_date={self.due_date})>"
