"""FastAPI dependencies for the session gate, data paths and collaborators."""

from __future__ import annotations

from pathlib import Path

import jwt
from fastapi import HTTPException, Request

from tandembrief.api.auth_config import COOKIE_NAME, get_jwt_secret, is_dev_mode
from tandembrief.api.jwt_utils import decode_token
from tandembrief.fetch.open_meteo import OpenMeteoClient
from tandembrief.insights.llm_config import InsightsConfig, load_insights_config


def require_session(request: Request) -> str:
    """Validate the session cookie issued at login and return its subject.

    In dev mode no login is required.
    Raises 401 if no valid session is present.
    """
    if is_dev_mode():
        return "dev"

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_token(token, get_jwt_secret())
        return payload["sub"]
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expired")
    except (jwt.InvalidTokenError, KeyError):
        raise HTTPException(status_code=401, detail="Invalid session")


def get_data_dir(request: Request) -> Path:
    return request.app.state.data_dir


def get_weather_client() -> OpenMeteoClient:
    return OpenMeteoClient()


def get_insights_config() -> InsightsConfig:
    return load_insights_config()
