"""
Email delivery.

Senders report success as a boolean and never raise: a failed delivery is an
infrastructure problem that callers log, not a reason to undo their work.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

import structlog

from gestia.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html: str) -> bool:
        ...


class ConsoleEmailSender:
    """Development backend: logs the message instead of delivering it"""

    def send(self, to: str, subject: str, html: str) -> bool:
        logger.info("email_logged", to=to, subject=subject)
        return True


class SmtpEmailSender:
    """SMTP backend with SSL or STARTTLS"""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(html, "html", "utf-8"))
        return message

    def send(self, to: str, subject: str, html: str) -> bool:
        message = self._build_message(to, subject, html)
        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                if not self.use_ssl:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.sendmail(self.sender, [to], message.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_delivery_failed", to=to, subject=subject, error=str(exc))
            return False

        logger.info("email_sent", to=to, subject=subject)
        return True


VERIFICATION_SUBJECT = "Verify your email - GestIA"

VERIFICATION_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<body style="margin:0;padding:0;background:#f4f4f5;font-family:system-ui,sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="padding:40px 16px;">
    <tr><td align="center">
      <table width="100%" style="max-width:480px;background:#ffffff;border-radius:12px;">
        <tr><td style="padding:32px;">
          <h1 style="margin:0 0 8px;font-size:20px;color:#18181b;">Verify your email</h1>
          <p style="margin:0 0 24px;font-size:14px;color:#71717a;">
            Welcome to GestIA! Confirm your email address to activate your account.
          </p>
          <a href="{verify_url}" style="background:#18181b;color:#ffffff;padding:12px 24px;
             border-radius:8px;text-decoration:none;">Verify email</a>
          <p style="margin:24px 0 0;font-size:12px;color:#a1a1aa;">
            The link expires in <strong>{ttl_hours} hours</strong>.
            If you did not create a GestIA account, ignore this email.
          </p>
          <p style="margin:16px 0 0;font-size:11px;color:#a1a1aa;word-break:break-all;">
            {verify_url}
          </p>
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>
"""


def build_verification_url(raw_token: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return f"{settings.APP_URL.rstrip('/')}/verify-email?token={raw_token}"


def send_verification_email(sender: EmailSender, to: str, raw_token: str) -> bool:
    """Send the verification link carrying the raw (unhashed) token"""
    settings = get_settings()
    html = VERIFICATION_TEMPLATE.format(
        verify_url=build_verification_url(raw_token, settings),
        ttl_hours=settings.EMAIL_VERIFY_TOKEN_TTL_HOURS,
    )
    return sender.send(to, VERIFICATION_SUBJECT, html)


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.EMAIL_BACKEND == "smtp":
        return SmtpEmailSender(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.EMAIL_FROM,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_ssl=settings.SMTP_USE_SSL,
        )
    return ConsoleEmailSender()
