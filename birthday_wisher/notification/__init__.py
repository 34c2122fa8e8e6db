"""Birthday notification delivery.

Renders the birthday message from a fixed template and delivers it
through a ``Notifier`` transport chosen once from configuration
(SMTP or a log-only dry run).
"""
from birthday_wisher.notification.notifier import (
    DeliveryId,
    LogNotifier,
    Notifier,
    SmtpNotifier,
    build_notifier,
)
from birthday_wisher.notification.template import RenderedMessage, render_birthday_message

__all__ = [
    "DeliveryId",
    "LogNotifier",
    "Notifier",
    "RenderedMessage",
    "SmtpNotifier",
    "build_notifier",
    "render_birthday_message",
]
