# raffle_service/core/email.py
"""
Email service using Resend for sending transactional emails.
"""
import logging
import resend
from raffle_service.core.config import settings

logger = logging.getLogger(__name__)


def init_resend():
    """Initialize Resend with API key."""
    resend.api_key = settings.RESEND_API_KEY


def send_email(to_email: str, subject: str, text: str) -> dict:
    """
    Send a plain-text email.

    Delivery problems never raise; they come back in the result so the
    caller can report them next to a committed state change.

    Returns:
        {"success": True, "id": ...} or {"success": False, "error": ...}
    """
    init_resend()

    params = {
        "from": f"{settings.BRAND_NAME} <noreply@{settings.RESEND_FROM_DOMAIN}>",
        "to": [to_email],
        "subject": subject,
        "text": text,
    }

    try:
        response = resend.Emails.send(params)
        logger.info(f"Email '{subject}' sent to {to_email}")
        return {"success": True, "id": response.get("id")}
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}", exc_info=True)
        return {"success": False, "error": str(e)}
