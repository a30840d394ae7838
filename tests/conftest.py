import json

import logfire
import pytest

from kanopi_pack.services.hooks import default_scheduler
from kanopi_pack.core.templates import AssetTagCollector
from kanopi_pack.services.registry import instances

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def reset_process_state():
    """Start every test with an empty instance registry and hook scheduler."""
    instances.clear()
    default_scheduler.clear()
    yield
    instances.clear()
    default_scheduler.clear()


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest under tmp_path and return its directory."""

    def _write(content, name="manifest.json"):
        data = content if isinstance(content, str) else json.dumps(content)
        (tmp_path / name).write_text(data, encoding="utf-8")
        return str(tmp_path)

    return _write


@pytest.fixture
def collector():
    return AssetTagCollector()
