"""Opaque string key-value store backing the case console.

Stands in for a browser profile's local storage: one file per key under
data/local_store/, values are plain strings. Callers own serialization.
A small JSON helper reads tool settings with fallback to hardcoded defaults.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

STORE_DIR = Path(__file__).resolve().parent.parent / "data" / "local_store"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _key_path(key: str) -> Path:
    """Map a store key to its backing file."""
    if not key:
        raise ValueError("Store key must be a non-empty string.")
    return STORE_DIR / f"{_UNSAFE_CHARS.sub('_', key)}.txt"


def get_item(key: str) -> str | None:
    """Return the stored string for *key*, or None if absent or unreadable."""
    path = _key_path(key)
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError:
        return None


def set_item(key: str, value: str) -> None:
    """Store *value* under *key*, replacing any previous value."""
    STORE_DIR.mkdir(parents=True, exist_ok=True)
    _key_path(key).write_text(value, encoding="utf-8")


def remove_item(key: str) -> bool:
    """Delete *key*. Returns True if it existed."""
    path = _key_path(key)
    if path.exists():
        path.unlink()
        return True
    return False


def clear() -> None:
    """Remove every key in the store."""
    if not STORE_DIR.exists():
        return
    for path in STORE_DIR.glob("*.txt"):
        path.unlink()


def get_json_value(key: str, field: str, default: Any) -> Any:
    """Read *field* from the JSON object stored under *key*.

    Falls back to *default* when the key is missing, the value is not a JSON
    object, or the field is absent.
    """
    raw = get_item(key)
    if raw is None:
        return default
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return default
    if not isinstance(data, dict):
        return default
    return data.get(field, default)
