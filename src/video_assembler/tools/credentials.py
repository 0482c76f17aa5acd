"""Google service-account credentials for authorized Drive downloads."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import structlog
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from video_assembler.config import Settings
from video_assembler.errors import CredentialsError

logger = structlog.get_logger()

DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"


class DriveCredentials:
    """Holds one service account and hands out fresh bearer tokens.

    Built once at startup and passed to the fetcher; nothing here is global.
    """

    def __init__(self, credentials: service_account.Credentials):
        self._credentials = credentials
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["DriveCredentials"]:
        """Load the service account named in settings, or None when unset.

        Raises:
            CredentialsError: the file is missing or the JSON is invalid.
        """
        scopes = [DRIVE_READONLY_SCOPE]
        try:
            if settings.google_credentials_json:
                info = json.loads(settings.google_credentials_json)
                credentials = service_account.Credentials.from_service_account_info(info, scopes=scopes)
                source = "inline"
            elif settings.google_credentials_file:
                credentials = service_account.Credentials.from_service_account_file(
                    settings.google_credentials_file, scopes=scopes
                )
                source = settings.google_credentials_file
            else:
                return None
        except (OSError, ValueError) as exc:
            raise CredentialsError(f"Invalid service account credentials: {exc}") from exc

        logger.info("credentials.loaded", source=source, account=getattr(credentials, "service_account_email", None))
        return cls(credentials)

    def _refresh(self) -> None:
        self._credentials.refresh(Request())

    async def authorize(self) -> None:
        """Fetch the first access token. Called at startup; failure is fatal.

        Raises:
            CredentialsError: the token endpoint rejected the account or was unreachable.
        """
        try:
            await asyncio.to_thread(self._refresh)
        except (GoogleAuthError, OSError) as exc:
            raise CredentialsError(f"Service account authorization failed: {exc}") from exc
        logger.info("credentials.authorized")

    async def token(self) -> str:
        """Return a valid access token, refreshing it when expired."""
        async with self._lock:
            if not self._credentials.valid:
                logger.debug("credentials.refresh")
                await asyncio.to_thread(self._refresh)
            return self._credentials.token
