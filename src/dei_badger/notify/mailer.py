"""SMTP mailer for badge notifications.

Sends plain-text mail for awarded badges and for consolidated scan results.
Mail is disabled when SMTP_HOST is not set.
"""

import smtplib
from email.mime.text import MIMEText
from typing import Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from ..config import Settings, get_settings
from ..log import get_logger

logger = get_logger("mailer")

def build_subject(badge_tier: str, repository_url: Optional[str] = None) -> str:
    if repository_url:
        return f"{badge_tier} badge awarded for {repository_url}"
    return f"{badge_tier} badge scan results"

def build_body(name: Optional[str], body: str, badge_url: Optional[str] = None) -> str:
    parts = []
    if name:
        parts.append(f"Hi {name},")
    parts.append(body)
    if badge_url:
        parts.append(f"Badge: {badge_url}")
    return "\n\n".join(parts)

class Mailer:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @retry(
        retry=retry_if_exception_type((smtplib.SMTPServerDisconnected, ConnectionError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True
    )
    def _deliver(self, to_email: str, msg: MIMEText):
        s = self.settings
        with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT) as server:
            if s.SMTP_USER and s.SMTP_PASSWORD:
                server.starttls()
                server.login(s.SMTP_USER, s.SMTP_PASSWORD)
            server.sendmail(s.SMTP_FROM, [to_email], msg.as_string())

    def send(
        self,
        email: str,
        name: Optional[str],
        badge_tier: str,
        repository_url: Optional[str] = None,
        badge_url: Optional[str] = None,
        body: str = "",
    ) -> bool:
        """
        Send one notification mail.
        Returns True if handed to the SMTP server, False if disabled or failed.
        """
        if not self.settings.SMTP_HOST:
            logger.warning(f"SMTP_HOST not set, mail to {email} not sent")
            return False

        msg = MIMEText(build_body(name, body, badge_url), "plain", "utf-8")
        msg["Subject"] = build_subject(badge_tier, repository_url)
        msg["From"] = self.settings.SMTP_FROM
        msg["To"] = email

        try:
            self._deliver(email, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail to {email}: {e}")
            return False

        logger.info(f"Sent '{msg['Subject']}' to {email}")
        return True

mailer = Mailer()
