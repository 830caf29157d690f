"""Authorized-user credentials for the Google APIs.

The token file is produced once by an interactive OAuth consent flow (not
part of this package) and contains the client id, client secret and refresh
token. Here it is only loaded and refreshed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from loguru import logger

from voice2action.errors import ConfigurationError

SCOPES = [
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/calendar.events",
]


def load_credentials(token_path: Path, scopes: list[str] = SCOPES) -> Credentials:
    if not token_path.exists():
        raise ConfigurationError(f"OAuth token not found at {token_path}. Please run OAuth setup first.")
    try:
        creds = Credentials.from_authorized_user_file(str(token_path), scopes)
    except ValueError as e:
        raise ConfigurationError(f"OAuth token at {token_path} is malformed: {e}") from e

    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise ConfigurationError(f"OAuth token refresh failed: {e}") from e
        token_path.write_text(creds.to_json(), encoding="utf-8")
        logger.info("Google OAuth token refreshed")

    if not creds.valid:
        raise ConfigurationError("OAuth token is not valid. Please run OAuth setup again.")
    return creds


def build_service(api: str, version: str, token_path: Path) -> Any:
    """Build a googleapiclient resource for *api* using the stored token."""
    creds = load_credentials(token_path)
    service = build(api, version, credentials=creds, cache_discovery=False)
    logger.info(f"Google {api} service initialized")
    return service
