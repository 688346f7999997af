import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.config import settings
from app.schemas.budget import BudgetStatusResponse

logger = logging.getLogger(__name__)


def budget_warning_message(status: BudgetStatusResponse) -> Optional[str]:
    if status.status == "over":
        return (f"Budget exceeded for {status.category}: "
                f"{status.spending:.2f} / {status.limit:.2f} ({status.remaining_or_overage:.2f} over)")
    if status.status == "warning":
        return (f"{status.percentage:.0f}% of the {status.category} budget used: "
                f"{status.spending:.2f} / {status.limit:.2f}")
    return None


class EmailNotifier:
    """Best-effort SMTP delivery. Never raises to the caller."""

    def __init__(self, host: str = None, port: int = None, user: str = None,
                 password: str = None, use_tls: bool = None, sender: str = None):
        self.host = settings.SMTP_HOST if host is None else host
        self.port = settings.SMTP_PORT if port is None else port
        self.user = settings.SMTP_USER if user is None else user
        self.password = settings.SMTP_PASSWORD if password is None else password
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls
        self.sender = settings.MAIL_FROM if sender is None else sender

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def _deliver(self, msg: EmailMessage):
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

    def send(self, to: Optional[str], subject: str, text: str, html: Optional[str] = None) -> bool:
        if not self.enabled:
            logger.info("Email not configured - skipping '%s' to %s", subject, to)
            return False
        if not to:
            logger.warning("No recipient address - skipping '%s'", subject)
            return False

        try:
            msg = EmailMessage()
            msg["From"] = self.sender
            msg["To"] = to
            msg["Subject"] = subject
            msg.set_content(text)
            if html:
                msg.add_alternative(html, subtype="html")
            self._deliver(msg)
        except Exception:
            logger.exception("Error sending '%s' to %r", subject, to)
            return False

        logger.info("Email '%s' sent to %s", subject, to)
        return True

    def send_budget_alert(self, to: Optional[str], status: BudgetStatusResponse) -> bool:
        message = budget_warning_message(status)
        if message is None:
            return False

        subject = (f"Budget exceeded: {status.category}" if status.is_over_budget
                   else f"Budget warning: {status.category}")
        html = (
            f"<h1>{subject}</h1>"
            f"<p>{message}</p>"
            "<p>Best regards,<br>The Expense Tracker Team</p>"
        )
        return self.send(to, subject, message, html)


notifier = EmailNotifier()
