import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from kanopi_pack.web.static import is_fingerprinted, mount_assets


@pytest.fixture
def build_directory(tmp_path):
    (tmp_path / "js").mkdir()
    (tmp_path / "js" / "app.3f2a1b9c.js").write_text("console.log('app');")
    (tmp_path / "js" / "legacy.js").write_text("console.log('legacy');")
    (tmp_path / "manifest.json").write_text('{"app": {"js": "/js/app.3f2a1b9c.js"}}')
    return tmp_path


@pytest.fixture
def app(build_directory):
    application = FastAPI()
    mount_assets(application, str(build_directory), max_age=600)
    return application


class TestFingerprint:
    """Test hashed file name detection."""

    @pytest.mark.parametrize(
        "path", ["js/app.3f2a1b9c.js", "main-3c1d7a5f.css", "chunks/vendor_0123456789abcdef.js"]
    )
    def test_fingerprinted(self, path):
        assert is_fingerprinted(path) is True

    @pytest.mark.parametrize("path", ["manifest.json", "js/app.js", "v1234567/app.js", "app.1234.js"])
    def test_not_fingerprinted(self, path):
        assert is_fingerprinted(path) is False


class TestCachedStaticFiles:
    """Test caching headers on served build output."""

    def test_fingerprinted_file_is_immutable(self, app):
        client = TestClient(app)

        response = client.get("/assets/js/app.3f2a1b9c.js")

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "public, max-age=600, immutable"
        assert "Expires" in response.headers

    def test_manifest_is_revalidated(self, app):
        client = TestClient(app)

        response = client.get("/assets/manifest.json")

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "no-cache"
        assert "Expires" not in response.headers

    def test_missing_file(self, app):
        client = TestClient(app)

        assert client.get("/assets/js/missing.js").status_code == 404

    @pytest.mark.asyncio
    async def test_async_client(self, app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            response = await ac.get("/assets/js/legacy.js")

        assert response.status_code == 200
        assert response.text == "console.log('legacy');"
        assert response.headers["Cache-Control"] == "no-cache"
