"""
Per-file sys.modules isolation for API tests.

API test files put case-console/ on sys.path and import `app.*` inside
fixtures. Module-level tests under tests/case_console import the same
`app` package at collection time, so cached `app.*` entries (and the API's
module-level CaseStore with them) are dropped before each API test file is
collected.
"""

import sys


def pytest_collect_file(parent, file_path):
    """Clear cached app.* modules before every API test file is collected."""
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        for key in list(sys.modules.keys()):
            if key == "app" or key.startswith("app."):
                del sys.modules[key]
    return None
