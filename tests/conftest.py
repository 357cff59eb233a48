"""Shared fixtures for all tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = str(Path(__file__).resolve().parent.parent)
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)


@pytest.fixture()
def sample_case_record():
    """A stored case record as it appears in the persisted JSON array."""
    return {
        "id": "CS-2025-318",
        "title": "Lease Dispute: Harbor Cafe",
        "client": "Harbor Cafe LLC",
        "status": "Active",
        "description": "Landlord claims breach of the exclusive-use clause.",
        "access_code": "5150",
        "documents": [
            {
                "id": "doc-1a2b3c4d",
                "title": "Commercial Lease.txt",
                "type": "Text Document",
                "content": "Tenant shall have the exclusive right to sell coffee within the Premises.",
                "date_added": "2025-03-02",
            },
        ],
        "people": [
            {"id": "person-9f8e7d6c", "name": "Rosa Diaz", "role": "Owner",
             "organization": "Harbor Cafe LLC", "email": "rosa@harborcafe.example"},
        ],
        "notes": [],
        "financials": [
            {"id": "fin-00aa11bb", "date": "2025-03-02", "description": "Retainer",
             "amount": 3000, "type": "Income", "category": "Flat Fee"},
            {"id": "fin-22cc33dd", "date": "2025-03-04", "description": "Filing",
             "amount": 410.5, "type": "Expense", "category": "Court Fee"},
        ],
        "last_updated": "Just now",
        "progress": 20,
    }
