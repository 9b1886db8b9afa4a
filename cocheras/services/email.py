"""
Reporte por email de errores no controlados de la API.
"""

import os
import smtplib
import logging
import traceback
from email.mime.text import MIMEText
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class EmailService:
    """Service for sending error reports via SMTP"""

    def __init__(self):
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_pass = os.getenv("SMTP_PASS")
        self.smtp_use_tls = _env_flag("SMTP_USE_TLS", "true")
        self.enabled = _env_flag("ENABLE_ERROR_EMAILS")
        self.from_addr = os.getenv("ERROR_FROM", "errors@cocheras.local")
        self.to_addrs = [
            addr.strip()
            for addr in os.getenv("ERROR_TO", "").split(",")
            if addr.strip()
        ]

    def is_configured(self) -> bool:
        return bool(
            self.enabled
            and self.smtp_host
            and self.smtp_user
            and self.smtp_pass
            and self.to_addrs
        )

    def build_error_report(self, error_data: dict) -> str:
        exception: Optional[BaseException] = error_data.get("exception")
        if exception is not None:
            trace = "".join(
                traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                )
            )
        else:
            trace = "No traceback available"

        return (
            f"Endpoint: {error_data.get('method', 'Unknown')} {error_data.get('path', 'Unknown')}\n"
            f"Cliente: {error_data.get('client', 'Unknown')}\n"
            f"Fecha (UTC): {error_data.get('timestamp', 'Unknown')}\n"
            f"Entorno: {os.getenv('ENV', 'development')}\n\n"
            f"{trace}"
        )

    def send_error_email(self, error_data: dict) -> bool:
        """
        Envía el reporte de un error.

        Args:
            error_data: path, method, client, exception y timestamp del error
        """
        if not self.is_configured():
            logger.warning("Email service not configured, skipping error email")
            return False

        msg = MIMEText(self.build_error_report(error_data), "plain", "utf-8")
        msg["Subject"] = f"[Cocheras API][{os.getenv('ENV', 'development')}] ERROR"
        msg["From"] = self.from_addr
        msg["To"] = ", ".join(self.to_addrs)

        try:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10)
            try:
                if self.smtp_use_tls:
                    server.starttls()
                server.login(self.smtp_user, self.smtp_pass)
                server.send_message(msg)
            finally:
                server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send error email: {e}")
            return False

        logger.info(f"Error email sent to {', '.join(self.to_addrs)}")
        return True


# Global email service instance
email_service = EmailService()
