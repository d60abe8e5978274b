"""SMTP notification dispatcher."""
import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def html_to_text(html_content: str) -> str:
    """Plain text fallback for an HTML body."""
    plain_text = html_content.replace("<br>", "\n").replace("</p>", "\n\n")
    plain_text = re.sub(r"<[^>]+>", "", plain_text)
    return re.sub(r"\n{3,}", "\n\n", plain_text).strip()


class EmailSender:
    """Sends HTML emails through the configured SMTP server."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def build_message(self, to_email: str, subject: str, html_content: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.settings.smtp_from_email
        msg["To"] = to_email
        msg.attach(MIMEText(html_to_text(html_content), "plain"))
        msg.attach(MIMEText(html_content, "html"))
        return msg

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        """Send an email. Returns False when SMTP is not configured or delivery fails."""
        if not self.settings.smtp_host:
            logger.info(f"SMTP not configured, skipping email '{subject}'")
            return False

        msg = self.build_message(to_email, subject, html_content)
        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port) as server:
                server.starttls()
                if self.settings.smtp_user and self.settings.smtp_password:
                    server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            return False

        logger.info(f"Email '{subject}' was sent")
        return True


def get_email_sender() -> EmailSender:
    """Dependency that provides the email dispatcher."""
    return EmailSender()
