# app/services/task_service.py
"""
Maintenance task persistence. Every status change goes through
Task.set_status so completed_at is set exactly when a task is completed.
"""

import enum
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models import Task, TaskStatus
from app.schemas.task import TaskCreate, TaskUpdate
from app.services.knowledge_search import like_pattern
from app.utils.errors import EmptyUpdate, NotFound, StoreFailure

logger = logging.getLogger(__name__)

DUE_SOON_DAYS = 7

SORT_FIELDS = {
    "due_date": Task.due_date,
    "priority": Task.priority,
    "created_at": Task.created_at,
    "title": Task.title,
}
SORT_ORDERS = ("ASC", "DESC")


def serialize_task(task: Task, today: date) -> Dict[str, Any]:
    """Task columns plus assignee/creator names and due-date flags"""
    days_until_due = (task.due_date - today).days
    pending = task.status == TaskStatus.PENDING.value
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "due_date": task.due_date,
        "status": task.status,
        "priority": task.priority,
        "assigned_to": task.assigned_to,
        "created_by": task.created_by,
        "equipment_id": task.equipment_id,
        "location": task.location,
        "estimated_hours": task.estimated_hours,
        "actual_hours": task.actual_hours,
        "completion_notes": task.completion_notes,
        "completed_at": task.completed_at,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
        "assigned_to_name": task.assignee.name if task.assignee else None,
        "assigned_to_email": task.assignee.email if task.assignee else None,
        "created_by_name": task.creator.name if task.creator else None,
        "days_until_due": days_until_due,
        "is_overdue": days_until_due < 0 and pending,
        "is_due_soon": 0 <= days_until_due <= DUE_SOON_DAYS and pending,
    }


def list_tasks(
    db: Session,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort: str = "due_date",
    order: str = "ASC",
) -> List[Task]:
    query = db.query(Task).options(joinedload(Task.assignee), joinedload(Task.creator))

    # Apply filters
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if assigned_to:
        query = query.filter(Task.assigned_to == assigned_to)
    if search:
        pattern = like_pattern(search)
        query = query.filter(
            or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
                Task.equipment_id.ilike(pattern, escape="\\"),
            )
        )

    # Unknown sort fields fall back to due date ascending
    column = SORT_FIELDS.get(sort)
    if column is not None and order.upper() in SORT_ORDERS:
        query = query.order_by(column.desc() if order.upper() == "DESC" else column.asc())
    else:
        query = query.order_by(Task.due_date.asc())

    page = max(page, 1)
    try:
        return query.offset((page - 1) * limit).limit(limit).all()
    except SQLAlchemyError as e:
        logger.error(f"Error listing tasks: {e}")
        raise StoreFailure(str(e)) from e


def get_task(db: Session, task_id: int) -> Task:
    try:
        task = (
            db.query(Task)
            .options(joinedload(Task.assignee), joinedload(Task.creator))
            .filter(Task.id == task_id)
            .first()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching task {task_id}: {e}")
        raise StoreFailure(str(e)) from e

    if not task:
        raise NotFound("Task not found")
    return task


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error during {action}: {e}")
        raise StoreFailure(str(e)) from e


def create_task(db: Session, data: TaskCreate, created_by: int) -> Task:
    task = Task(
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        priority=data.priority.value,
        status=TaskStatus.PENDING.value,
        assigned_to=data.assigned_to,
        created_by=created_by,
        equipment_id=data.equipment_id,
        location=data.location,
        estimated_hours=data.estimated_hours,
    )
    db.add(task)
    _commit(db, "task creation")
    db.refresh(task)
    logger.info(f"Task created with ID: {task.id}")
    return task


def update_task(db: Session, task_id: int, update: TaskUpdate, now: datetime = None) -> Task:
    """Apply the fields present in `update`"""
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        raise EmptyUpdate()

    task = get_task(db, task_id)
    status = changes.pop("status", None)
    for key, value in changes.items():
        if isinstance(value, enum.Enum):
            value = value.value
        setattr(task, key, value)
    if status is not None:
        task.set_status(status, now)

    _commit(db, f"update of task {task_id}")
    db.refresh(task)
    logger.info(f"Task {task.id} updated with fields: {sorted(update.model_fields_set)}")
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = get_task(db, task_id)
    db.delete(task)
    _commit(db, f"deletion of task {task_id}")


def set_task_status(db: Session, task_id: int, status: str, now: datetime = None) -> Task:
    task = get_task(db, task_id)
    task.set_status(status, now)
    _commit(db, f"status update of task {task_id}")
    db.refresh(task)
    logger.info(f"Task {task.id} status updated to {task.status}")
    return task


def toggle_task_status(db: Session, task_id: int, now: datetime = None) -> Task:
    """pending <-> completed"""
    task = get_task(db, task_id)
    if task.status == TaskStatus.PENDING.value:
        task.set_status(TaskStatus.COMPLETED, now)
    else:
        task.set_status(TaskStatus.PENDING, now)
    _commit(db, f"status toggle of task {task_id}")
    db.refresh(task)
    return task


def task_stats(db: Session, today: date) -> Dict[str, int]:
    try:
        total = db.query(func.count(Task.id)).scalar()
        pending = db.query(func.count(Task.id)).filter(Task.status == TaskStatus.PENDING.value).scalar()
        completed = db.query(func.count(Task.id)).filter(Task.status == TaskStatus.COMPLETED.value).scalar()
        # Pending tasks past their due date
        overdue = (
            db.query(func.count(Task.id))
            .filter(Task.status == TaskStatus.PENDING.value, Task.due_date < today)
            .scalar()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error computing task stats: {e}")
        raise StoreFailure(str(e)) from e

    return {"total": total, "pending": pending, "completed": completed, "overdue": overdue}
