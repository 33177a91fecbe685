"""
Email and notification delivery.
"""
from projectit.services.notifications.email import EmailClient
from projectit.services.notifications.sender import (
    NotificationEmailSender,
    render_notification_html,
    send_email,
)

__all__ = ["EmailClient", "NotificationEmailSender", "render_notification_html", "send_email"]
