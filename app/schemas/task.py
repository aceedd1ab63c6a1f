# app/schemas/task.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import Optional, List

from app.models.task import TaskStatus, TaskPriority

class TaskCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3)
    description: Optional[str] = None
    due_date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[int] = None
    equipment_id: Optional[str] = None
    location: Optional[str] = None
    estimated_hours: Optional[int] = Field(default=None, ge=1)

class TaskUpdate(BaseModel):
    """Fields a client may change; anything else is rejected"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[int] = None
    equipment_id: Optional[str] = None
    location: Optional[str] = None
    estimated_hours: Optional[int] = Field(default=None, ge=1)
    actual_hours: Optional[int] = Field(default=None, ge=1)
    completion_notes: Optional[str] = None

    @field_validator("title", "due_date", "priority", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    due_date: date
    status: TaskStatus
    priority: TaskPriority
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    equipment_id: Optional[str] = None
    location: Optional[str] = None
    estimated_hours: Optional[int] = None
    actual_hours: Optional[int] = None
    completion_notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Joined user details
    assigned_to_name: Optional[str] = None
    assigned_to_email: Optional[str] = None
    created_by_name: Optional[str] = None

    # Computed against today
    days_until_due: int
    is_overdue: bool
    is_due_soon: bool

class TaskList(BaseModel):
    tasks: List[TaskOut]

class TaskCreated(BaseModel):
    message: str
    taskId: int

class TaskStatusChanged(BaseModel):
    message: str
    status: TaskStatus

class TaskStats(BaseModel):
    total: int
    pending: int
    completed: int
    overdue: int
