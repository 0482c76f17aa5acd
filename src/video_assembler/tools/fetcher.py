"""Remote asset download over a shared httpx client."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlparse

import httpx
import structlog
from google.auth.exceptions import GoogleAuthError

from video_assembler.errors import FetchError
from video_assembler.models.assets import AssetKind, LocalAsset
from video_assembler.tools.credentials import DriveCredentials

logger = structlog.get_logger()

_CHUNK_SIZE = 1024 * 1024
_DRIVE_FILE_PATH = re.compile(r"^/file/d/([A-Za-z0-9_-]+)")
_GOOGLE_HOST_SUFFIXES = (".google.com", ".googleapis.com", ".googleusercontent.com")


def normalize_drive_url(url: str) -> str:
    """Rewrite Google Drive share links to the direct-download form.

    ``/file/d/<id>/view`` and ``open?id=<id>`` both become
    ``https://drive.google.com/uc?export=download&id=<id>``. Other URLs are
    returned unchanged.
    """
    parsed = urlparse(url)
    if parsed.netloc.lower() != "drive.google.com":
        return url

    match = _DRIVE_FILE_PATH.match(parsed.path)
    if match:
        file_id = match.group(1)
    elif parsed.path in ("/open", "/uc"):
        ids = parse_qs(parsed.query).get("id")
        if not ids:
            return url
        file_id = ids[0]
    else:
        return url
    return f"https://drive.google.com/uc?export=download&id={file_id}"


def is_google_host(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return host == "google.com" or host.endswith(_GOOGLE_HOST_SUFFIXES)


class AssetFetcher:
    """Downloads job assets through one long-lived ``httpx.AsyncClient``.

    One GET per call and no retries. When credentials are configured, requests
    to Google hosts carry a bearer token; other hosts never see it.
    """

    def __init__(self, client: httpx.AsyncClient, credentials: Optional[DriveCredentials] = None):
        self._client = client
        self._credentials = credentials

    async def _headers_for(self, url: str) -> dict[str, str]:
        if self._credentials is None or not is_google_host(url):
            return {}
        return {"Authorization": f"Bearer {await self._credentials.token()}"}

    async def fetch(self, source_uri: str, destination: Path, kind: AssetKind, index: int) -> LocalAsset:
        """Download *source_uri* into *destination*, overwriting it.

        Args:
            source_uri: Remote URL as given in the request.
            destination: Job-owned path; registered for cleanup by the caller.
            kind: Expected media kind of the asset.
            index: 1-based position of the asset in the request.

        Returns:
            LocalAsset describing the downloaded file.

        Raises:
            FetchError: non-2xx status, transport failure, or an HTML page
                where media was expected.
        """
        url = normalize_drive_url(source_uri)
        logger.info("fetch.start", url=url, kind=kind.value, index=index)

        try:
            headers = await self._headers_for(url)
            async with self._client.stream("GET", url, headers=headers) as response:
                if not response.is_success:
                    raise FetchError(source_uri, response.status_code, response.reason_phrase)

                content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
                if content_type == "text/html":
                    raise FetchError(
                        source_uri,
                        response.status_code,
                        "received an HTML page instead of media; check the link permissions",
                    )

                size = 0
                with destination.open("wb") as fh:
                    async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                        fh.write(chunk)
                        size += len(chunk)
        except httpx.HTTPError as exc:
            raise FetchError(source_uri, None, str(exc) or type(exc).__name__) from exc
        except GoogleAuthError as exc:
            raise FetchError(source_uri, None, f"could not obtain an access token: {exc}") from exc
        except OSError as exc:
            raise FetchError(source_uri, None, f"could not write {destination.name}: {exc}") from exc

        logger.info("fetch.done", url=url, kind=kind.value, index=index, bytes_written=size)
        return LocalAsset(source_uri=source_uri, local_path=destination, kind=kind, index=index)
