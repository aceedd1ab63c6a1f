# app/routers/reminders.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import user as user_model
from app.schemas import notification as notification_schema
from app.services import reminders
from app.services.scheduler import ReminderScheduler
from app.utils.auth import get_current_user

router = APIRouter(prefix="/api/reminders", tags=["Reminders"])


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    """The scheduler built at startup"""
    return request.app.state.reminder_scheduler


@router.post("/run", response_model=notification_schema.ReminderRunResult)
async def run_reminders(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    current_user: user_model.User = Depends(get_current_user)
):
    """Manually trigger one reminder pass"""
    return await scheduler.run_once()


@router.post("/test", response_model=notification_schema.ReminderSendResult)
async def send_test_reminder(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    current_user: user_model.User = Depends(get_current_user)
):
    """Send a reminder for the first pending task"""
    return await scheduler.send_test_reminder()


@router.post("/force/{user_id}", response_model=notification_schema.ReminderSendResult)
async def force_user_reminder(
    user_id: int,
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    current_user: user_model.User = Depends(get_current_user)
):
    """Send a reminder for a user's next pending task, even if one went out today"""
    return await scheduler.force_user_reminder(user_id)


@router.get("/status")
async def get_scheduler_status(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
    current_user: user_model.User = Depends(get_current_user)
):
    """Get scheduler status and job information"""
    return await scheduler.get_scheduler_status()


@router.get("/log", response_model=notification_schema.NotificationLog)
def get_notification_log(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user)
):
    """Most recent reminder send attempts"""
    return {"notifications": reminders.recent_notifications(db, limit=limit)}
