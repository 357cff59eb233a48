"""Per-view access gate for case detail screens.

This is a cosmetic lock, not a security boundary: the universal bypass code
opens every case.
"""

from __future__ import annotations

import sys
from pathlib import Path

from app.errors import AuthMismatch
from app.models import Case

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared import local_store

SETTINGS_KEY = "case-console.settings"
DEFAULT_BYPASS_CODE = "1234"
AUTH_FAILED_MSG = "AUTHENTICATION FAILED. Access Denied."


def bypass_code() -> str:
    return str(local_store.get_json_value(SETTINGS_KEY, "bypass_code", DEFAULT_BYPASS_CODE))


class AccessGate:
    """Locked/unlocked state for one detail view."""

    def __init__(self) -> None:
        self.locked = True

    def enter(self) -> None:
        """Re-lock; called every time the detail view is (re-)entered."""
        self.locked = True

    def unlock(self, case: Case, code: str) -> None:
        """Unlock on the case's code or the bypass code, else raise AuthMismatch."""
        if code == case.access_code or code == bypass_code():
            self.locked = False
            return
        self.locked = True
        raise AuthMismatch(AUTH_FAILED_MSG)
