"""
Tests for asset downloads over httpx.MockTransport
"""

import httpx
import pytest
from google.auth.exceptions import RefreshError

from video_assembler.config import Settings
from video_assembler.errors import CredentialsError, FetchError
from video_assembler.models.assets import AssetKind
from video_assembler.tools.credentials import DriveCredentials
from video_assembler.tools.fetcher import AssetFetcher, is_google_host, normalize_drive_url


class FakeGoogleCredentials:
    """Mimics the parts of google.oauth2 credentials the wrapper touches."""

    def __init__(self, fail=False):
        self.valid = False
        self.token = None
        self.refreshes = 0
        self.fail = fail

    def refresh(self, request):
        if self.fail:
            raise RefreshError("invalid_grant: account disabled")
        self.refreshes += 1
        self.token = f"token-{self.refreshes}"
        self.valid = True


class TestNormalizeDriveUrl:

    def test_file_view_link(self):
        url = "https://drive.google.com/file/d/1AbC_d-9/view?usp=sharing"
        assert normalize_drive_url(url) == "https://drive.google.com/uc?export=download&id=1AbC_d-9"

    def test_open_link(self):
        url = "https://drive.google.com/open?id=XYZ123"
        assert normalize_drive_url(url) == "https://drive.google.com/uc?export=download&id=XYZ123"

    def test_direct_link_kept_equivalent(self):
        url = "https://drive.google.com/uc?export=download&id=XYZ123"
        assert normalize_drive_url(url) == url

    def test_other_hosts_untouched(self):
        url = "https://cdn.example.com/file/d/abc/view"
        assert normalize_drive_url(url) == url

    def test_google_host_detection(self):
        assert is_google_host("https://drive.google.com/uc?id=1")
        assert is_google_host("https://www.googleapis.com/drive/v3/files/1")
        assert is_google_host("https://doc-0s-8c-docs.googleusercontent.com/x")
        assert not is_google_host("https://google.com.evil.example/x")
        assert not is_google_host("https://cdn.example.com/x")


class TestAssetFetcher:

    @pytest.mark.asyncio
    async def test_downloads_to_destination(self, fetcher, remote, tmp_path):
        dest = tmp_path / "image1.png"
        dest.write_bytes(b"stale contents that must be replaced")

        asset = await fetcher.fetch("https://cdn.example.com/a.png", dest, AssetKind.IMAGE, 1)

        assert asset.local_path == dest
        assert asset.kind == AssetKind.IMAGE
        assert asset.index == 1
        assert dest.read_bytes() == b"media:https://cdn.example.com/a.png"
        assert len(remote.requests) == 1

    @pytest.mark.asyncio
    async def test_non_success_status(self, fetcher, remote, tmp_path):
        remote.status_for["https://cdn.example.com/missing.mp3"] = 404
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://cdn.example.com/missing.mp3", tmp_path / "a.mp3", AssetKind.AUDIO, 2)
        err = exc_info.value
        assert err.status == 404
        assert err.url == "https://cdn.example.com/missing.mp3"
        assert "HTTP 404" in err.message

    @pytest.mark.asyncio
    async def test_no_retry_on_server_error(self, fetcher, remote, tmp_path):
        remote.status_for["https://cdn.example.com/flaky.png"] = 503
        with pytest.raises(FetchError):
            await fetcher.fetch("https://cdn.example.com/flaky.png", tmp_path / "a.png", AssetKind.IMAGE, 1)
        assert len(remote.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FetchError) as exc_info:
                await AssetFetcher(client).fetch("https://down.example.com/a.png", tmp_path / "a.png", AssetKind.IMAGE, 1)
        assert exc_info.value.status is None
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_html_page_rejected(self, tmp_path):
        def handler(request):
            return httpx.Response(200, text="<html>Sign in</html>", headers={"content-type": "text/html; charset=utf-8"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(FetchError) as exc_info:
                await AssetFetcher(client).fetch("https://drive.google.com/uc?id=1", tmp_path / "a.png", AssetKind.IMAGE, 1)
        assert "HTML" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_drive_share_link_requested_in_direct_form(self, fetcher, remote, tmp_path):
        await fetcher.fetch("https://drive.google.com/file/d/FILE42/view", tmp_path / "a.mp3", AssetKind.AUDIO, 1)
        assert str(remote.requests[0].url) == "https://drive.google.com/uc?export=download&id=FILE42"

    @pytest.mark.asyncio
    async def test_bearer_token_only_for_google_hosts(self, http_client, remote, tmp_path):
        creds = DriveCredentials(FakeGoogleCredentials())
        fetcher = AssetFetcher(http_client, creds)

        await fetcher.fetch("https://drive.google.com/uc?export=download&id=1", tmp_path / "a.png", AssetKind.IMAGE, 1)
        await fetcher.fetch("https://cdn.example.com/b.mp3", tmp_path / "b.mp3", AssetKind.AUDIO, 1)

        assert remote.requests[0].headers.get("authorization") == "Bearer token-1"
        assert "authorization" not in remote.requests[1].headers


class TestDriveCredentials:

    def test_not_configured(self):
        assert DriveCredentials.from_settings(Settings(google_credentials_json="", google_credentials_file="")) is None

    def test_invalid_inline_json(self):
        with pytest.raises(CredentialsError):
            DriveCredentials.from_settings(Settings(google_credentials_json="{not json"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(CredentialsError):
            DriveCredentials.from_settings(
                Settings(google_credentials_json="", google_credentials_file=str(tmp_path / "nope.json"))
            )

    @pytest.mark.asyncio
    async def test_authorize_failure_is_fatal(self):
        creds = DriveCredentials(FakeGoogleCredentials(fail=True))
        with pytest.raises(CredentialsError):
            await creds.authorize()

    @pytest.mark.asyncio
    async def test_token_refreshed_only_when_invalid(self):
        google_creds = FakeGoogleCredentials()
        creds = DriveCredentials(google_creds)

        await creds.authorize()
        assert await creds.token() == "token-1"
        assert google_creds.refreshes == 1

        google_creds.valid = False
        assert await creds.token() == "token-2"
