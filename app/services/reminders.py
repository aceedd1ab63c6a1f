# app/services/reminders.py
"""
Which tasks are due a reminder email.

A task qualifies when it is pending, due between today and today + 7 days,
assigned to a user with an email address, and has no `sent` due_reminder
logged since the start of yesterday. That look-back is the only guard
against repeat emails, so a task gets at most about one reminder a day.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import and_, exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models import NotificationRecord, NotificationStatus, NotificationType, Task, TaskStatus, User
from app.utils.errors import StoreFailure

logger = logging.getLogger(__name__)


def suppression_cutoff(today: date, lookback_days: int = None) -> datetime:
    """Reminders sent at or after this moment suppress another one"""
    if lookback_days is None:
        lookback_days = settings.REMINDER_LOOKBACK_DAYS
    return datetime.combine(today - timedelta(days=lookback_days), time.min)


def recently_reminded(today: date, lookback_days: int = None):
    """Correlated EXISTS clause over the notification log for the outer Task"""
    return exists().where(
        and_(
            NotificationRecord.task_id == Task.id,
            NotificationRecord.status == NotificationStatus.SENT.value,
            NotificationRecord.notification_type == NotificationType.DUE_REMINDER.value,
            NotificationRecord.created_at >= suppression_cutoff(today, lookback_days),
        )
    )


def find_eligible_tasks(
    db: Session,
    today: date,
    window_days: int = None,
    lookback_days: int = None,
) -> List[Tuple[Task, User]]:
    """Pending tasks due within the window whose assignee has not been reminded recently"""
    if window_days is None:
        window_days = settings.REMINDER_WINDOW_DAYS
    try:
        return (
            db.query(Task, User)
            .join(User, Task.assigned_to == User.id)
            .filter(
                Task.status == TaskStatus.PENDING.value,
                Task.due_date >= today,
                Task.due_date <= today + timedelta(days=window_days),
                User.email.isnot(None),
                User.email != "",
                ~recently_reminded(today, lookback_days),
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error querying tasks due for reminders: {e}")
        raise StoreFailure(str(e)) from e


def find_first_pending_task(db: Session) -> Optional[Tuple[Task, User]]:
    try:
        return (
            db.query(Task, User)
            .join(User, Task.assigned_to == User.id)
            .filter(Task.status == TaskStatus.PENDING.value)
            .order_by(Task.id.asc())
            .first()
        )
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e


def find_next_task_for_user(db: Session, user_id: int, today: date) -> Optional[Tuple[Task, User]]:
    """Earliest upcoming pending task assigned to the user"""
    try:
        return (
            db.query(Task, User)
            .join(User, Task.assigned_to == User.id)
            .filter(
                Task.status == TaskStatus.PENDING.value,
                Task.assigned_to == user_id,
                Task.due_date >= today,
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
            .first()
        )
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e


def log_notification(
    db: Session,
    task_id: Optional[int],
    email: str,
    status: str,
    now: datetime,
    notification_type: str = NotificationType.DUE_REMINDER.value,
) -> NotificationRecord:
    """Append one record to the notification log"""
    record = NotificationRecord(
        task_id=task_id,
        email=email,
        status=status,
        notification_type=notification_type,
        sent_at=now if status == NotificationStatus.SENT.value else None,
        created_at=now,
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error logging email notification for task {task_id}: {e}")
        raise StoreFailure(str(e)) from e
    return record


def recent_notifications(db: Session, limit: int = 50) -> List[NotificationRecord]:
    try:
        return (
            db.query(NotificationRecord)
            .order_by(NotificationRecord.created_at.desc(), NotificationRecord.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e
