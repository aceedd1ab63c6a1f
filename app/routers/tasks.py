from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import user as user_model
from app.schemas import task as task_schema
from app.services import task_service
from app.utils.auth import get_current_user

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("/", response_model=task_schema.TaskList)
def get_tasks(
    status: Optional[task_schema.TaskStatus] = None,
    priority: Optional[task_schema.TaskPriority] = None,
    assigned_to: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=500),
    sort: str = "due_date",
    order: str = "ASC",
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    """Get tasks with filtering, sorting and pagination"""
    tasks = task_service.list_tasks(
        db,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
        search=search,
        page=page,
        limit=limit,
        sort=sort,
        order=order,
    )
    today = date.today()
    return {"tasks": [task_service.serialize_task(task, today) for task in tasks]}


@router.get("/stats/overview", response_model=task_schema.TaskStats)
def get_task_stats(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    return task_service.task_stats(db, date.today())


@router.get("/{task_id}", response_model=task_schema.TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    task = task_service.get_task(db, task_id)
    return task_service.serialize_task(task, date.today())


@router.post("/", response_model=task_schema.TaskCreated, status_code=status.HTTP_201_CREATED)
def create_task(
    task: task_schema.TaskCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    db_task = task_service.create_task(db, task, created_by=current_user.id)
    return {"message": "Task created successfully", "taskId": db_task.id}


@router.put("/{task_id}", response_model=task_schema.TaskOut)
def update_task(
    task_id: int,
    task_update: task_schema.TaskUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    task = task_service.update_task(db, task_id, task_update)
    return task_service.serialize_task(task, date.today())


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    task_service.delete_task(db, task_id)
    return {"message": "Task deleted successfully"}


@router.put("/{task_id}/status", response_model=task_schema.TaskStatusChanged)
def update_task_status(
    task_id: int,
    status_update: task_schema.TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    task = task_service.set_task_status(db, task_id, status_update.status)
    return {"message": f"Task marked as {task.status}", "status": task.status}


@router.patch("/{task_id}/toggle", response_model=task_schema.TaskStatusChanged)
def toggle_task_status(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    task = task_service.toggle_task_status(db, task_id)
    return {"message": f"Task marked as {task.status}", "status": task.status}
