import logging
import os
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)


def _smtp_settings() -> dict | None:
    host = os.getenv("SMTP_HOST")
    user = os.getenv("SMTP_USER")
    password = os.getenv("SMTP_PASSWORD")
    sender = os.getenv("SMTP_FROM", user or "")
    if not host or not user or not password or not sender:
        return None
    return {
        "host": host,
        "port": int(os.getenv("SMTP_PORT", "587")),
        "user": user,
        "password": password,
        "sender": sender,
        "use_tls": os.getenv("SMTP_USE_TLS", "true").lower() == "true",
    }


def send_password_reset_email(email: str, token: str, reset_url: str | None = None) -> bool:
    settings = _smtp_settings()
    if settings is None:
        logger.info("password_reset_mail_skipped reason=smtp_not_configured")
        return False

    link = f"{reset_url}?token={token}" if reset_url else token
    msg = EmailMessage()
    msg["Subject"] = "Reset your BountyHub password"
    msg["From"] = settings["sender"]
    msg["To"] = email
    msg.set_content(
        "We received a request to reset your password.\n"
        f"Use this link or code to choose a new one: {link}\n"
        "If you did not ask for this, you can ignore this message."
    )

    with smtplib.SMTP(settings["host"], settings["port"], timeout=10) as server:
        if settings["use_tls"]:
            server.starttls()
        server.login(settings["user"], settings["password"])
        server.send_message(msg)

    return True
