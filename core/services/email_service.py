# core/services/email_service.py
"""
Transactional email through the Resend HTTP API.
"""
import html
import logging
from typing import Optional

import requests

from core.config import Settings, get_settings
from core.schemas.contact import ContactForm

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 10

AUTO_REPLY_SUBJECT = "We've received your message"
AUTO_REPLY_TEXT = (
    "Hi {name},\n\n"
    "Thanks for contacting Book Assembly. We've received your message and will respond within 48 hours.\n\n"
    "Best regards,\nThe Book Assembly Team"
)


class EmailNotConfigured(Exception):
    pass


class EmailDeliveryError(Exception):
    pass


class EmailService:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        if not self.settings.resend_api_key:
            raise EmailNotConfigured("Email service not configured")

    def send(self, to: str, subject: str, text: str, html_body: str, reply_to: Optional[str] = None) -> str:
        """Send one email. Returns the provider's message id.

        Raises:
            EmailDeliveryError: If the request fails or the provider rejects it
        """
        payload = {
            "from": self.settings.email_from,
            "to": [to],
            "subject": subject,
            "text": text,
            "html": html_body,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            response = requests.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.settings.resend_api_key}"},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.json().get("id", "")
        except (requests.RequestException, ValueError) as e:
            raise EmailDeliveryError(str(e)) from e

    def send_contact_message(self, form: ContactForm) -> None:
        """Forward a contact form to support, then send the sender an auto-reply.

        A failed auto-reply is logged only; the support message is what counts.
        """
        label = form.subject_label
        name = html.escape(form.name)
        email = html.escape(str(form.email))
        message = html.escape(form.message).replace("\n", "<br />")

        self.send(
            to=self.settings.support_email,
            reply_to=str(form.email),
            subject=f"[{label}] from {form.name}",
            text=f"Name: {form.name}\nEmail: {form.email}\nSubject: {label}\n\nMessage:\n{form.message}",
            html_body=(
                "<h2>New Support Message</h2>"
                f"<p><strong>Name:</strong> {name}</p>"
                f"<p><strong>Email:</strong> {email}</p>"
                f"<p><strong>Subject:</strong> {label}</p>"
                "<hr />"
                "<p><strong>Message:</strong></p>"
                f"<p>{message}</p>"
            ),
        )

        try:
            self.send(
                to=str(form.email),
                subject=AUTO_REPLY_SUBJECT,
                text=AUTO_REPLY_TEXT.format(name=form.name),
                html_body=(
                    f"<p>Hi {name},</p>"
                    "<p>Thanks for contacting Book Assembly. We've received your message and will respond within 48 hours.</p>"
                    "<p>Best regards,<br />The Book Assembly Team</p>"
                ),
            )
        except EmailDeliveryError as e:
            logger.error(f"Failed to send auto-reply to {form.email}: {e}")
