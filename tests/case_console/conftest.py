"""Fixtures for case-console tests: app.* isolation and a temp local store."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

_TOOL_DIR = str(Path(__file__).resolve().parent.parent.parent / "case-console")
if _TOOL_DIR not in sys.path:
    sys.path.insert(0, _TOOL_DIR)

import shared.local_store as local_store_mod
import shared.usage_tracker as tracker_mod


def pytest_collect_file(parent, file_path):
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        for key in list(sys.modules.keys()):
            if key == "app" or key.startswith("app."):
                del sys.modules[key]
    return None


@pytest.fixture(autouse=True)
def _isolate_store(tmp_path):
    """Redirect the local store and usage log to tmp_path for every test."""
    store_dir = tmp_path / "local_store"
    config_dir = tmp_path / "config"
    with patch.object(local_store_mod, "STORE_DIR", store_dir), \
         patch.object(tracker_mod, "_CONFIG_DIR", config_dir), \
         patch.object(tracker_mod, "_USAGE_FILE", config_dir / "api-usage.json"):
        yield store_dir
