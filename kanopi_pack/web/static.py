"""Static file serving for built assets with long-term caching of fingerprinted files."""
import re
from datetime import datetime, timedelta, timezone
from posixpath import basename

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response as StarletteResponse

# e.g. app.3f2a1b9c.js, main-3c1d7a5f.css
FINGERPRINT_PATTERN = re.compile(r"[.\-_][0-9a-fA-F]{8,}\.")


def is_fingerprinted(path: str) -> bool:
    return bool(FINGERPRINT_PATTERN.search(basename(path)))


class CachedStaticFiles(StaticFiles):
    """StaticFiles that lets browsers keep hashed bundles and revalidate everything else."""

    def __init__(self, *args, max_age: int = 31536000, **kwargs):
        """
        Initialize CachedStaticFiles.

        Args:
            max_age: Cache max-age in seconds for fingerprinted files (default: 1 year)
        """
        super().__init__(*args, **kwargs)
        self.max_age = max_age

    async def get_response(self, path: str, scope: dict) -> StarletteResponse:
        response = await super().get_response(path, scope)

        if response.status_code == 200:
            if is_fingerprinted(path):
                response.headers["Cache-Control"] = f"public, max-age={self.max_age}, immutable"
                response.headers["Expires"] = self._get_expires_header()
            else:
                # Unhashed files such as the manifest change between builds
                response.headers["Cache-Control"] = "no-cache"

        return response

    def _get_expires_header(self) -> str:
        expires_date = datetime.now(timezone.utc) + timedelta(seconds=self.max_age)
        return expires_date.strftime("%a, %d %b %Y %H:%M:%S GMT")


def mount_assets(
    app: FastAPI,
    directory: str,
    path: str = "/assets",
    name: str = "kanopi-assets",
    max_age: int = 31536000,
) -> None:
    """Serve a build output directory from the application."""
    app.mount(path, CachedStaticFiles(directory=directory, max_age=max_age), name=name)
