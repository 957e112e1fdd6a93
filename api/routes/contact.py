# api/routes/contact.py
import logging
from typing import Any
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.deps import json_body
from core.schemas import ContactForm, first_error
from core.services.email_service import EmailDeliveryError, EmailNotConfigured, EmailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("")
def send_contact_message(payload: Any = Depends(json_body)):
    """
    Validate a contact form and email it to support, with an auto-reply to the sender.

    Returns {"success": true}, or {"error": message} with 400 for invalid input
    and 500 when the email could not be sent.
    """
    try:
        service = EmailService()
    except EmailNotConfigured as e:
        logger.error("Contact form submitted but RESEND_API_KEY is not set")
        return JSONResponse({"error": str(e)}, status_code=500)

    if not isinstance(payload, dict):
        return JSONResponse({"error": "Invalid request body"}, status_code=400)
    try:
        form = ContactForm.model_validate(payload)
    except ValidationError as e:
        return JSONResponse({"error": first_error(e)}, status_code=400)

    try:
        service.send_contact_message(form)
    except EmailDeliveryError as e:
        logger.error(f"Failed to send contact message from {form.email}: {e}")
        return JSONResponse({"error": "Failed to send message. Please try again."}, status_code=500)

    return {"success": True}
