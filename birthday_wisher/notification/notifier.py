"""Notifier transports — one implementation per delivery channel.

``SmtpNotifier`` talks to an SMTP relay (Gmail by default) with STARTTLS
and login.  ``LogNotifier`` is a dry-run transport for local runs that
only logs what it would have sent.  ``build_notifier`` picks one from
settings at construction time.

``send`` makes exactly one attempt and raises ``DeliveryError`` on
failure; retrying is the caller's decision.
"""
from __future__ import annotations

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

from birthday_wisher.core.errors import ConfigurationInvalid, DeliveryError
from birthday_wisher.core.settings import Settings
from birthday_wisher.notification.template import render_birthday_message

logger = logging.getLogger(__name__)

DeliveryId = str


class Notifier(ABC):
    """Delivers one birthday message to one address."""

    @abstractmethod
    def send(self, address: str, display_name: str) -> DeliveryId:
        """Deliver the birthday message; return the transport's delivery id.

        Raises ``DeliveryError`` when the message could not be delivered.
        """
        ...

    @abstractmethod
    def verify_configuration(self) -> bool:
        """Return True if the transport is usable.  Sends nothing."""
        ...

    def ensure_configured(self) -> None:
        """Raise ``ConfigurationInvalid`` unless ``verify_configuration`` passes."""
        if not self.verify_configuration():
            raise ConfigurationInvalid(f"{type(self).__name__} is not usable with the current configuration")


# ---------------------------------------------------------------------------
# SmtpNotifier
# ---------------------------------------------------------------------------

class SmtpNotifier(Notifier):
    """Send birthday emails through an SMTP relay."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 30.0,
        from_name: str = "Birthday Wisher",
        from_address: str | None = None,
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_name = from_name
        self.from_address = from_address or username or "noreply@localhost"

    def _open_session(self, server: smtplib.SMTP) -> None:
        if self.use_tls:
            server.starttls(context=ssl.create_default_context())
        if self.username:
            server.login(self.username, self.password or "")

    def _build_message(self, address: str, display_name: str) -> MIMEMultipart:
        rendered = render_birthday_message(display_name)
        domain = self.from_address.rpartition("@")[2] or None

        msg = MIMEMultipart("alternative")
        msg["Subject"] = rendered.subject
        msg["From"] = formataddr((self.from_name, self.from_address))
        msg["To"] = address
        msg["Message-ID"] = make_msgid(domain=domain)
        msg.attach(MIMEText(rendered.text, "plain", "utf-8"))
        msg.attach(MIMEText(rendered.html, "html", "utf-8"))
        return msg

    # -- single send --------------------------------------------------------

    def send(self, address: str, display_name: str) -> DeliveryId:
        msg = self._build_message(address, display_name)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                self._open_session(server)
                server.sendmail(self.from_address, [address], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP error delivering to %s: %s", address, exc)
            raise DeliveryError(address, exc) from exc

        logger.info("Birthday email sent to %s (message id %s)", address, msg["Message-ID"])
        return msg["Message-ID"]

    # -- diagnostics --------------------------------------------------------

    def verify_configuration(self) -> bool:
        if not self.username or not self.password:
            logger.error("Email configuration test failed: SMTP credentials are not set")
            return False
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                self._open_session(server)
                server.noop()
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email configuration test failed: %s", exc)
            return False

        logger.info("Email configuration is valid")
        return True


# ---------------------------------------------------------------------------
# LogNotifier
# ---------------------------------------------------------------------------

class LogNotifier(Notifier):
    """Dry-run transport: logs the rendered subject instead of sending."""

    def send(self, address: str, display_name: str) -> DeliveryId:
        rendered = render_birthday_message(display_name)
        delivery_id = make_msgid(domain="birthday-wisher.local")
        logger.info("[dry-run] %r to %s (message id %s)", rendered.subject, address, delivery_id)
        return delivery_id

    def verify_configuration(self) -> bool:
        return True


def build_notifier(settings: Settings) -> Notifier:
    """Return the transport named by ``settings.notifier_transport``."""
    if settings.notifier_transport == "log":
        return LogNotifier()
    if settings.notifier_transport == "smtp":
        return SmtpNotifier(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
            from_name=settings.mail_from_name,
        )
    raise ConfigurationInvalid(f"Unknown notifier transport {settings.notifier_transport!r}")
