"""Shared-password login, logout and session status."""

from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from tandembrief.api.auth_config import (
    COOKIE_NAME,
    get_jwt_secret,
    get_site_password,
    is_dev_mode,
)
from tandembrief.api.deps import require_session
from tandembrief.api.jwt_utils import create_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    password: str


@router.post("/login")
def login(req: LoginRequest):
    """Check the shared password and issue a session cookie."""
    if not hmac.compare_digest(req.password.encode(), get_site_password().encode()):
        logger.info("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Incorrect password")

    response = JSONResponse({"authenticated": True})
    _set_session_cookie(response, create_token(get_jwt_secret()))
    return response


@router.post("/logout")
def logout():
    """Clear the session cookie."""
    response = JSONResponse({"authenticated": False})
    response.delete_cookie(COOKIE_NAME, path="/")
    return response


@router.get("/me")
def get_me(request: Request):
    """Report whether the caller holds a valid session."""
    try:
        require_session(request)
    except HTTPException:
        return {"authenticated": False}
    return {"authenticated": True}


def _set_session_cookie(response: Response, token: str) -> None:
    """Set the JWT session cookie with appropriate security flags."""
    secure = not is_dev_mode()
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=secure,
        path="/",
        max_age=7 * 24 * 3600,  # 7 days
    )
