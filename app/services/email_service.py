# app/services/email_service.py
"""
Outbound email for task reminders.

EmailTransport is constructed once at startup and handed to the reminder
scheduler; tests hand the scheduler their own object with the same `send`.
"""

import asyncio
import html
import logging
from datetime import date, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from app.config.settings import settings
from app.utils.errors import TransportFailure

logger = logging.getLogger(__name__)


class EmailTransport:
    """SMTP sender (STARTTLS on 587, implicit TLS on 465)"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "EmailTransport":
        return cls(
            host=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            from_address=settings.EMAIL_FROM,
            timeout=settings.EMAIL_TIMEOUT,
        )

    @property
    def is_configured(self) -> bool:
        if not self.username or not self.password:
            return False
        return self.username != "your_email@gmail.com" and self.password != "your_app_password"

    def _build_message(self, to: str, subject: str, html_body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.attach(MIMEText(html_body, "html", "utf-8"))
        return message

    async def send(self, to: str, subject: str, html_body: str) -> str:
        """Send one message and return its Message-ID.

        Raises TransportFailure on any SMTP, network or timeout error.
        """
        if not self.is_configured:
            raise TransportFailure("Email service not configured")

        message = self._build_message(to, subject, html_body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.port == 465,
                start_tls=self.port != 465,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            raise TransportFailure(str(e)) from e

        logger.info(f"Email sent to {to}: {subject}")
        return message["Message-ID"]


def _format_due_date(due: date) -> str:
    # e.g. "Monday, January 15, 2024"
    return f"{due.strftime('%A')}, {due.strftime('%B')} {due.day}, {due.year}"


def reminder_subject(task) -> str:
    return f"🔧 Service Reminder: {task.title} - Due Soon"


def render_reminder_email(task, user_name: str, frontend_url: Optional[str] = None) -> str:
    """HTML body for a due-soon reminder"""
    frontend_url = frontend_url or settings.FRONTEND_URL
    esc = html.escape

    details = []
    if task.location:
        details.append(f"<p><strong>Location:</strong> {esc(task.location)}</p>")
    if task.equipment_id:
        details.append(f"<p><strong>Equipment:</strong> {esc(task.equipment_id)}</p>")
    if task.estimated_hours:
        details.append(f"<p><strong>Estimated Time:</strong> {task.estimated_hours} hours</p>")

    return f"""<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: #d32f2f; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }}
        .content {{ background: #f9f9f9; padding: 30px; border: 1px solid #ddd; }}
        .task-details {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #d32f2f; }}
        .priority {{ display: inline-block; padding: 4px 12px; border-radius: 20px; font-size: 12px; font-weight: bold; text-transform: uppercase; }}
        .priority.high {{ background: #ffebee; color: #c62828; }}
        .priority.medium {{ background: #fff3e0; color: #ef6c00; }}
        .priority.low {{ background: #e8f5e8; color: #2e7d32; }}
        .button {{ display: inline-block; background: #d32f2f; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
        .footer {{ background: #333; color: white; padding: 20px; text-align: center; font-size: 12px; border-radius: 0 0 8px 8px; }}
    </style>
</head>
<body>
    <div class="header">
        <div>Facilities Service Department</div>
    </div>
    <div class="content">
        <h2>🔔 Maintenance Task Reminder</h2>
        <p>Hello {esc(user_name or '')},</p>
        <p>This is a friendly reminder that you have a maintenance task due soon:</p>
        <div class="task-details">
            <h3>{esc(task.title)}</h3>
            <p><strong>Due Date:</strong> {_format_due_date(task.due_date)}</p>
            <p><strong>Priority:</strong> <span class="priority {esc(task.priority)}">{esc(task.priority)}</span></p>
            {''.join(details)}
            <h4>Description:</h4>
            <p>{esc(task.description or 'No description provided.')}</p>
        </div>
        <p>Please ensure this task is completed by the due date.</p>
        <a href="{esc(frontend_url)}/tasks" class="button">View Task Details</a>
        <p><em>This is an automated reminder from the Facilities Service Management System.</em></p>
    </div>
    <div class="footer">
        <p>&copy; {datetime.now().year} Facilities Service Department</p>
        <p>This email was sent automatically. Please do not reply to this email.</p>
    </div>
</body>
</html>
"""
