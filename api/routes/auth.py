# api/routes/auth.py
import logging
from typing import Optional
from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from core.auth import SESSION_COOKIE_NAME, InvalidSession, session_cookie_options, verify_identity_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class SessionRequest(BaseModel):
    id_token: Optional[str] = Field(None, validation_alias=AliasChoices("idToken", "id_token"))


@router.post("/session")
def create_session(body: Optional[SessionRequest] = Body(None)):
    """
    Store the identity token in an HTTP-only session cookie.

    Accepts {"idToken": ...} as sent by the web client, or {"id_token": ...}.
    Errors come back as {"error": message}.
    """
    id_token = body.id_token if body else None
    if not id_token:
        return JSONResponse({"error": "ID token is required"}, status_code=400)
    try:
        user_id = verify_identity_token(id_token)
    except InvalidSession as e:
        logger.warning(f"Rejected session token: {e}")
        return JSONResponse({"error": str(e)}, status_code=401)

    logger.info(f"Session created for user {user_id}")
    response = JSONResponse({"success": True})
    response.set_cookie(SESSION_COOKIE_NAME, id_token, **session_cookie_options())
    return response


@router.delete("/session")
def delete_session():
    response = JSONResponse({"success": True})
    options = session_cookie_options()
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path=options["path"],
        secure=options["secure"],
        httponly=options["httponly"],
        samesite=options["samesite"],
    )
    return response
