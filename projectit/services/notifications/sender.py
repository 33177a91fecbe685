"""
Instant notification emails, gated by each recipient's preferences.
"""
from typing import Any, Dict, Optional

import structlog
from jinja2 import Environment, PackageLoader, select_autoescape

from projectit.core.config import settings
from projectit.models.notification import PREFERENCE_KEYS, TYPE_COLORS, TYPE_LABELS, EmailFrequency
from projectit.schemas.functions import NotificationEmailRequest, SendEmailRequest
from projectit.services.entities import Entities, get_app_settings, get_integration_settings
from projectit.services.notifications.email import EmailClient

logger = structlog.get_logger(__name__)

templates = Environment(
    loader=PackageLoader("projectit", "templates"),
    autoescape=select_autoescape(["html"]),
)


def render_notification_html(
    app_name: str,
    type: Optional[str],
    title: str,
    message: Optional[str] = None,
    project_name: Optional[str] = None,
    from_user_name: Optional[str] = None,
    link: Optional[str] = None,
    app_logo: Optional[str] = None,
) -> str:
    """Render the branded notification email body."""
    return templates.get_template("notification_email.html").render(
        app_name=app_name,
        app_logo=app_logo,
        color=TYPE_COLORS.get(type, "#6366f1"),
        label=TYPE_LABELS.get(type, "Notification"),
        title=title,
        message=message,
        project_name=project_name,
        from_user_name=from_user_name,
        link=link,
        preferences_link=f"{settings.APP_BASE_URL.rstrip('/')}/Settings",
    )


class NotificationEmailSender:
    """Send a single notification email if the recipient wants it now."""

    def __init__(self, entities: Entities, email_client: Optional[EmailClient] = None):
        self.entities = entities
        self.email_client = email_client

    def preferences_for(self, email: str) -> Dict[str, Any]:
        return self.entities.notification_settings.first({"user_email": email}) or {}

    async def send(self, request: NotificationEmailRequest) -> Dict[str, Any]:
        if not request.to or not request.title:
            raise ValueError("Missing required fields: to, title")

        prefs = self.preferences_for(request.to)

        pref_key = PREFERENCE_KEYS.get(request.type)
        if pref_key and prefs.get(pref_key) is False:
            logger.info("Notification type disabled by user", to=request.to, type=request.type)
            return {"success": True, "skipped": True, "reason": "User disabled this notification type"}

        frequency = prefs.get("email_frequency")
        if frequency and frequency != EmailFrequency.INSTANT.value:
            logger.info("User prefers digest, skipping instant email", to=request.to, frequency=frequency)
            return {"success": True, "skipped": True, "reason": "User prefers digest emails"}

        app_config = get_app_settings(self.entities)
        integration_config = get_integration_settings(self.entities)

        app_name = app_config.get("app_name") or settings.APP_NAME
        from_email = integration_config.get("resend_from_email") or settings.RESEND_FROM_EMAIL
        from_name = integration_config.get("resend_from_name") or app_name

        html = render_notification_html(
            app_name=app_name,
            app_logo=app_config.get("app_logo_url"),
            type=request.type,
            title=request.title,
            message=request.message,
            project_name=request.project_name,
            from_user_name=request.from_user_name,
            link=request.link,
        )

        client = self.email_client or EmailClient(api_key=integration_config.get("resend_api_key"))
        result = await client.send(
            request.to,
            f"{app_name}: {request.title}",
            html=html,
            from_name=from_name,
            from_email=from_email,
        )
        if not result.get("success"):
            return result

        logger.info("Notification email sent", to=request.to, title=request.title)
        return {"success": True}


async def send_email(
    entities: Entities,
    request: SendEmailRequest,
    email_client: Optional[EmailClient] = None,
) -> Dict[str, Any]:
    """Send an ad-hoc email with the admin-configured Resend account.

    Configuration problems come back as ``{success: False, error}``. A provider
    rejection raises ``IntegrationRequestError`` carrying the raw error text.
    """
    config = get_integration_settings(entities)

    if not config.get("resend_enabled"):
        return {
            "success": False,
            "error": "Resend integration is not enabled. Please enable it in Adminland.",
        }
    if not config.get("resend_api_key"):
        return {
            "success": False,
            "error": "Resend API Key is not configured. Please enter it in Adminland.",
        }

    client = email_client or EmailClient(
        api_key=config["resend_api_key"],
        from_email=config.get("resend_from_email") or "onboarding@resend.dev",
        from_name=config.get("resend_from_name") or "IT Projects",
    )

    result = await client.send(request.to, request.subject, html=request.html, text=request.text)

    if not result.get("success"):
        return result

    message = (
        "Test email sent successfully via Resend!"
        if request.test_only
        else "Email sent successfully via Resend"
    )
    return {"success": True, "message": message, "id": result.get("id")}
