from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from app.utils.logger import get_logger
from app.utils.email_templates import create_welcome_email_template
import requests
from app.config import settings

logger = get_logger(__name__)

class EmailSender(ABC):
    @abstractmethod
    def send_email(self, to_email: str, subject: str, html_content: str, **kwargs) -> Any:
        pass

class MailgunEmailSender(EmailSender):
    """Sends through the Mailgun HTTP API."""

    def __init__(self, api_key: str, domain: str, sender_email: str, sender_name: Optional[str] = None, base_url: str = "https://api.mailgun.net"):
        self.api_key = api_key
        self.domain = domain
        self.sender_email = sender_email
        self.sender_name = sender_name or sender_email
        self.base_url = base_url.rstrip('/')

    def send_email(self, to_email: str, subject: str, html_content: str, **kwargs) -> Any:
        url = f"{self.base_url}/v3/{self.domain}/messages"
        data: Dict[str, str] = {
            "from": f"{self.sender_name} <{self.sender_email}>",
            "to": to_email,
            "subject": subject,
            "html": html_content,
        }
        tag = kwargs.get("tag")
        if tag:
            data["o:tag"] = tag
        resp = requests.post(url, auth=("api", self.api_key), data=data, timeout=10)
        if 200 <= resp.status_code < 300:
            logger.info("Email sent via Mailgun to %s", to_email)
            return resp.json()
        logger.error("Mailgun send failed: %s %s", resp.status_code, resp.text)
        raise RuntimeError(f"Mailgun send email failed: {resp.status_code} {resp.text}")

class LoggingEmailSender(EmailSender):
    """Logs the email instead of sending it; used when no provider is configured."""

    def __init__(self, sender_email: str, sender_name: Optional[str] = None):
        self.sender_email = sender_email
        self.sender_name = sender_name or sender_email

    def send_email(self, to_email: str, subject: str, html_content: str, **kwargs) -> Any:
        logger.info(f"EMAIL WOULD BE SENT from {self.sender_name} to {to_email}: {subject}")
        return {"message": "Email logged (no provider configured)"}

def create_email_sender() -> EmailSender:
    provider = (settings.EMAIL_PROVIDER or "logging").lower()
    if provider == "mailgun" and settings.MAILGUN_API_KEY and settings.MAILGUN_DOMAIN:
        return MailgunEmailSender(
            api_key=settings.MAILGUN_API_KEY,
            domain=settings.MAILGUN_DOMAIN,
            sender_email=settings.EMAIL_FROM,
            sender_name=settings.EMAIL_FROM_NAME,
            base_url=settings.MAILGUN_BASE_URL,
        )
    if provider != "logging":
        logger.warning("Falling back to LoggingEmailSender (provider=%s)", provider)
    return LoggingEmailSender(settings.EMAIL_FROM, settings.EMAIL_FROM_NAME)

def send_welcome_email(email: Optional[str], full_name: str, sender: Optional[EmailSender] = None) -> bool:
    """
    Send the signup welcome email.

    Failures are logged and reported as False; signup never fails because
    of email delivery.
    """
    if not email:
        return False
    sender = sender or create_email_sender()
    try:
        sender.send_email(
            email,
            f"Welcome to {settings.EMAIL_FROM_NAME}!",
            create_welcome_email_template(full_name, settings.CLIENT_URL),
            tag="welcome",
        )
        return True
    except Exception as e:
        logger.error(f"Failed to send welcome email to {email}: {e}")
        return False
