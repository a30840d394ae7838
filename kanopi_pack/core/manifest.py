"""
Manifest loading for bundler-built assets.

A manifest maps entry names to file types, each holding a path or a list of
chunk variants:

    {"app": {"js": ["/build/app.legacy.js", "/build/app.modern.js"], "css": "/build/app.css"}}
"""
import json
import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import logfire
import requests
from urllib3.exceptions import InsecureRequestWarning

from .config import settings
from .exceptions import ManifestLoadError

logger = logging.getLogger(__name__)


def fetch_remote_manifest(url: str, timeout: float) -> str:
    """
    Fetch a manifest over HTTP(S).

    Certificate verification is disabled: development servers usually run
    with self-signed certificates.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", InsecureRequestWarning)
            response = requests.get(url, verify=False, timeout=timeout)
    except requests.RequestException as e:
        raise ManifestLoadError(f"Failed to fetch manifest {url}: {e}") from e

    if not 200 <= response.status_code < 300:
        raise ManifestLoadError(
            f"Manifest request to {url} returned HTTP {response.status_code}"
        )
    return response.text


def read_local_manifest(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestLoadError(f"Failed to read manifest {path}: {e}") from e


def parse_manifest(data: str, source: str) -> Dict[str, Any]:
    if not data or not data.strip():
        raise ManifestLoadError(f"Manifest {source} is empty")

    try:
        manifest = json.loads(data)
    except json.JSONDecodeError as e:
        raise ManifestLoadError(f"Invalid JSON in manifest {source}: {e}") from e

    if not isinstance(manifest, dict):
        raise ManifestLoadError(
            f"Manifest {source} must be a JSON object, got {type(manifest).__name__}"
        )
    return manifest


def load_manifest(source: str, timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Load and parse a manifest from a URL or a filesystem path.

    Args:
        source: An http(s) URL or a local file path
        timeout: Seconds allowed for a network fetch, defaults to the
            KANOPI_MANIFEST_TIMEOUT setting

    Returns:
        The parsed manifest mapping

    Raises:
        ManifestLoadError: On any fetch, read or parse failure
    """
    with logfire.span("kanopi_pack.load_manifest", source=source):
        if source.startswith("http"):
            data = fetch_remote_manifest(
                source,
                timeout if timeout is not None else settings.KANOPI_MANIFEST_TIMEOUT,
            )
        else:
            data = read_local_manifest(source)

        manifest = parse_manifest(data, source)
        logger.debug(f"Loaded asset manifest {source} with {len(manifest)} entries")
        logfire.info("Asset manifest loaded", source=source, entries=len(manifest))
        return manifest
