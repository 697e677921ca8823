"""Shared-password and session cookie configuration."""

from __future__ import annotations

import os

COOKIE_NAME = "session"

# Insecure defaults for local dev only; production MUST set both env vars
_DEV_JWT_SECRET = "dev-insecure-jwt-secret-do-not-use-in-production"
_DEV_SITE_PASSWORD = "dev-password"


def is_dev_mode() -> bool:
    return os.environ.get("ENVIRONMENT", "development") != "production"


def get_jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if secret:
        return secret
    if is_dev_mode():
        return _DEV_JWT_SECRET
    raise ValueError("JWT_SECRET environment variable must be set in production")


def get_site_password() -> str:
    password = os.environ.get("SITE_PASSWORD")
    if password:
        return password
    if is_dev_mode():
        return _DEV_SITE_PASSWORD
    raise ValueError("SITE_PASSWORD environment variable must be set in production")
