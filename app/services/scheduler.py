# app/services/scheduler.py
"""
Scheduler service for task due-soon reminder emails
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict
from sqlalchemy.orm import Session
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.triggers.cron import CronTrigger
import logging

from app.config.settings import settings
from app.database import SessionLocal
from app.models import NotificationStatus, Task, User
from app.services.email_service import reminder_subject, render_reminder_email
from app.services import reminders
from app.utils.errors import StoreFailure, TransportFailure

logger = logging.getLogger(__name__)

class ReminderScheduler:
    """Sends reminder emails for tasks due soon and logs every attempt.

    Args:
        transport: object with `async send(to, subject, html_body)` returning a
            message id and raising TransportFailure on failure.
        session_factory: callable returning a new SQLAlchemy session.
        clock: callable returning the current local datetime.
        send_delay: seconds to wait between consecutive emails.
        production: when False an extra every-30-minutes job is scheduled.
    """

    def __init__(
        self,
        transport,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Callable[[], datetime] = datetime.now,
        send_delay: float = None,
        production: bool = None,
    ):
        self.transport = transport
        self.session_factory = session_factory
        self.clock = clock
        self.send_delay = settings.REMINDER_SEND_DELAY if send_delay is None else send_delay
        self.production = settings.is_production() if production is None else production
        self.scheduler = AsyncIOScheduler()
        self.is_running = False
        self._pass_lock = asyncio.Lock()

    def start(self):
        """Start the scheduler"""
        if self.is_running:
            return

        # Daily reminder check at a fixed wall-clock time
        self.scheduler.add_job(
            self._scheduled_run,
            trigger=CronTrigger(hour=settings.REMINDER_HOUR, minute=settings.REMINDER_MINUTE),
            id='daily_due_reminders',
            name='Daily Due Reminder Check',
            replace_existing=True
        )

        # Frequent check outside production so reminders can be tried out
        if not self.production:
            self.scheduler.add_job(
                self._scheduled_run,
                trigger=IntervalTrigger(minutes=settings.REMINDER_INTERVAL_MINUTES),
                id='frequent_due_reminders',
                name='Frequent Due Reminder Check',
                replace_existing=True
            )

        self.scheduler.start()
        self.is_running = True
        logger.info("Email reminder scheduler started")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Email reminder scheduler stopped")

    async def _scheduled_run(self):
        try:
            await self.run_once()
        except Exception as e:
            logger.error(f"Error in scheduled reminder check: {e}")

    async def run_once(self) -> Dict[str, Any]:
        """Run one reminder pass.

        Safe to call repeatedly: tasks reminded since the start of yesterday are
        skipped, and a call made while another pass is in progress does nothing.
        """
        if self._pass_lock.locked():
            logger.info("Reminder pass already running, skipping")
            return {"status": "skipped", "reason": "already running", "sent": 0, "failed": 0}

        async with self._pass_lock:
            if not getattr(self.transport, "is_configured", True):
                logger.info("Email service not configured. Skipping reminder check.")
                return {"status": "skipped", "reason": "email not configured", "sent": 0, "failed": 0}

            logger.info("Checking for tasks due soon...")
            db = self.session_factory()
            try:
                try:
                    due = reminders.find_eligible_tasks(db, self.clock().date())
                except StoreFailure as e:
                    logger.error(f"Error checking for reminder tasks: {e}")
                    return {"status": "error", "reason": "store failure", "sent": 0, "failed": 0}

                logger.info(f"Found {len(due)} tasks requiring reminders")

                sent = failed = 0
                for index, (task, user) in enumerate(due):
                    if index and self.send_delay:
                        await asyncio.sleep(self.send_delay)
                    if await self.send_task_reminder(db, task, user):
                        sent += 1
                    else:
                        failed += 1

                return {"status": "completed", "checked": len(due), "sent": sent, "failed": failed}
            finally:
                db.close()

    async def send_task_reminder(self, db: Session, task: Task, user: User) -> bool:
        """Email one reminder and log the attempt. Never raises."""
        status = NotificationStatus.SENT.value
        try:
            message_id = await self.transport.send(
                user.email,
                reminder_subject(task),
                render_reminder_email(task, user.name),
            )
            logger.info(f"Reminder email sent for task {task.id} to {user.email}: {message_id}")
        except TransportFailure as e:
            status = NotificationStatus.FAILED.value
            logger.error(f"Error sending reminder email for task {task.id}: {e.reason}")
        except Exception as e:
            status = NotificationStatus.FAILED.value
            logger.exception(f"Unexpected error sending reminder email for task {task.id}: {e}")

        try:
            reminders.log_notification(db, task.id, user.email, status, self.clock())
        except StoreFailure:
            # already logged by log_notification; the next task still gets its turn
            pass

        return status == NotificationStatus.SENT.value

    async def send_test_reminder(self) -> Dict[str, Any]:
        """Send a reminder for the first pending task, ignoring the due window"""
        db = self.session_factory()
        try:
            found = reminders.find_first_pending_task(db)
            if not found:
                return {"success": False, "message": "No pending tasks found for testing"}
            task, user = found
            success = await self.send_task_reminder(db, task, user)
            return {"success": success, "task": task.title, "email": user.email}
        finally:
            db.close()

    async def force_user_reminder(self, user_id: int) -> Dict[str, Any]:
        """Send a reminder for the user's next pending task, bypassing the dedup window"""
        db = self.session_factory()
        try:
            found = reminders.find_next_task_for_user(db, user_id, self.clock().date())
            if not found:
                return {"success": False, "message": "No pending tasks found for this user"}
            task, user = found
            logger.info(f"Forcing reminder for task: {task.title} to {user.email}")
            success = await self.send_task_reminder(db, task, user)
            return {"success": success, "task": task.title, "email": user.email}
        finally:
            db.close()

    async def get_scheduler_status(self) -> Dict[str, Any]:
        """Get scheduler status and job information"""
        if not self.is_running:
            return {"status": "stopped", "pass_running": self._pass_lock.locked(), "jobs": []}

        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger)
            })

        return {
            "status": "running",
            "pass_running": self._pass_lock.locked(),
            "jobs": jobs
        }
