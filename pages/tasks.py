import logging
from datetime import datetime, timezone

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import ContactMessage

logger = logging.getLogger(__name__)


@shared_task
def notify_contact_message(message_id: int) -> str:
    message = ContactMessage.objects.select_related("recipient").filter(pk=message_id).first()
    if message is None:
        logger.warning("Contact message %s vanished before notification", message_id)
        return "missing"
    recipient = message.recipient
    if not recipient.email:
        logger.info("Recipient %s has no e-mail, skipping notification", recipient.username)
        return "skipped"

    subject = f"New message from {message.name}"
    inbox_url = f"{getattr(settings, 'FRONTEND_URL', '').rstrip('/')}/admin/messages"
    body = (
        f"From: {message.name} <{message.email}>\n\n"
        f"{message.message}\n\n"
        f"Read it in your inbox: {inbox_url}"
    )
    send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [recipient.email])
    return f"sent:{datetime.now(timezone.utc).isoformat()}"
