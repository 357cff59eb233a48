"""Case list persistence over the shared local store.

The whole case list lives under one string key as a JSON array. Absent or
unusable data falls back to the seed dataset.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from app.models import Case
from app.seed import seed_cases

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared import local_store

logger = logging.getLogger(__name__)

SETTINGS_KEY = "case-console.settings"
DEFAULT_STORAGE_KEY = "veritas_cases"


def storage_key() -> str:
    return local_store.get_json_value(SETTINGS_KEY, "storage_key", DEFAULT_STORAGE_KEY)


def serialize_cases(cases: list[Case]) -> str:
    return json.dumps([c.to_dict() for c in cases], ensure_ascii=False)


def deserialize_cases(raw: str) -> list[Case]:
    """Parse a stored blob. Raises ValueError/KeyError/TypeError on bad data."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored case data is not a list.")
    return [Case.from_dict(item) for item in data]


def load_cases() -> list[Case]:
    """Read the case list once at startup, seeding when nothing usable is stored."""
    raw = local_store.get_item(storage_key())
    if raw is None:
        return seed_cases()
    try:
        return deserialize_cases(raw)
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Failed to parse saved cases, using seed data: %s", exc)
        return seed_cases()


def save_cases(cases: list[Case]) -> None:
    """Write the full case list. Empty lists are not written; errors are logged."""
    if not cases:
        return
    try:
        local_store.set_item(storage_key(), serialize_cases(cases))
    except OSError as exc:
        logger.warning("Failed to save cases: %s", exc)


def reset_cases() -> None:
    """Forget the stored list so the next load starts from the seed data."""
    local_store.remove_item(storage_key())
