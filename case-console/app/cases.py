"""In-memory case list with a narrow command/query API.

CaseStore is the single source of truth for a session. Every mutation goes
through it and triggers the on_change callback (persistence). Aggregates are
recomputed on each read.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date

from app.errors import CaseNotFound, InvalidInput
from app.models import (
    CASE_STATUSES,
    FINANCIAL_CATEGORIES,
    FINANCIAL_TYPES,
    PDF_DOCUMENT,
    TEXT_DOCUMENT,
    Case,
    CaseDocument,
    CaseNote,
    FinancialRecord,
    Person,
)

logger = logging.getLogger(__name__)

PDF_PLACEHOLDER = "Content simulation for PDF..."
DEFAULT_ACCESS_CODE = "1234"


def new_case_id(year: int | None = None) -> str:
    """Generate CS-<year>-<3 digits>. Collisions are possible and not checked."""
    return f"CS-{year or date.today().year}-{random.randint(100, 999)}"


def _new_entity_id(prefix: str, existing: list) -> str:
    taken = {item.id for item in existing}
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


def _parse_amount(amount: float | int | str | None) -> float:
    if amount is None or isinstance(amount, bool):
        raise InvalidInput("Amount is required.")
    if isinstance(amount, str):
        if not amount.strip():
            raise InvalidInput("Amount is required.")
        try:
            value = float(amount.strip())
        except ValueError:
            raise InvalidInput(f"Amount must be a number, got {amount!r}.") from None
    else:
        value = float(amount)
    if not math.isfinite(value):
        raise InvalidInput(f"Amount must be a finite number, got {amount!r}.")
    return value


def _check_unique_ids(case: Case) -> None:
    """Raise InvalidInput if any sub-entity list repeats an id."""
    for label, items in (
        ("document", case.documents),
        ("person", case.people),
        ("note", case.notes),
        ("financial record", case.financials),
    ):
        seen: set[str] = set()
        for item in items:
            if item.id in seen:
                raise InvalidInput(f"Duplicate {label} id in case {case.id}: {item.id}")
            seen.add(item.id)


def document_type_for(mime_type: str) -> str:
    return PDF_DOCUMENT if "pdf" in (mime_type or "").lower() else TEXT_DOCUMENT


def read_document_content(mime_type: str, data: bytes | str) -> str:
    """Return the text stored for an upload.

    PDFs are not decoded; a placeholder stands in for their content.
    """
    if document_type_for(mime_type) == PDF_DOCUMENT:
        return PDF_PLACEHOLDER
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    return text or PDF_PLACEHOLDER


class CaseStore:
    """Holds the case list and the current selection."""

    def __init__(
        self,
        cases: list[Case],
        on_change: Callable[[list[Case]], None] | None = None,
    ) -> None:
        self._cases = list(cases)
        self._on_change = on_change
        self._selected_id: str | None = None

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def cases(self) -> list[Case]:
        return list(self._cases)

    @property
    def selected(self) -> Case | None:
        if self._selected_id is None:
            return None
        return self.find_case(self._selected_id)

    def find_case(self, case_id: str) -> Case | None:
        return next((c for c in self._cases if c.id == case_id), None)

    def get_case(self, case_id: str) -> Case:
        case = self.find_case(case_id)
        if case is None:
            raise CaseNotFound(f"Case not found: {case_id}")
        return case

    def total_income(self) -> float:
        return sum(c.total_income for c in self._cases)

    def total_expenses(self) -> float:
        return sum(c.total_expenses for c in self._cases)

    def net_revenue(self) -> float:
        return self.total_income() - self.total_expenses()

    def group_by_status(self) -> dict[str, list[Case]]:
        """Partition cases into the Active, Pending and Archived buckets."""
        groups: dict[str, list[Case]] = {status: [] for status in CASE_STATUSES}
        for case in self._cases:
            groups[case.status].append(case)
        return groups

    def dashboard_summary(self) -> dict:
        groups = self.group_by_status()
        return {
            "counts": {status: len(items) for status, items in groups.items()},
            "total_cases": len(self._cases),
            "total_income": self.total_income(),
            "total_expenses": self.total_expenses(),
            "net_revenue": self.net_revenue(),
        }

    # ── Commands ─────────────────────────────────────────────────────────

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.cases)

    def create_case(self) -> Case:
        """Create a new matter with default fields, put it first and select it."""
        case = Case(
            id=new_case_id(),
            title="New Legal Matter",
            client="Unassigned Client",
            status="Pending",
            description="New matter created via dashboard.",
            access_code=DEFAULT_ACCESS_CODE,
            last_updated="Just now",
            progress=0,
        )
        self._cases.insert(0, case)
        self._selected_id = case.id
        self._changed()
        return case

    def select_case(self, case_id: str | None) -> Case | None:
        """Select a case by id. Unknown ids clear the selection and return None."""
        case = self.find_case(case_id) if case_id else None
        self._selected_id = case.id if case else None
        return case

    def update_case(self, updated: Case) -> bool:
        """Replace the case with the same id. Last writer wins; no merge."""
        if updated.status not in CASE_STATUSES:
            raise InvalidInput(f"Unknown case status: {updated.status}")
        if isinstance(updated.progress, bool) or not isinstance(updated.progress, int) \
                or not 0 <= updated.progress <= 100:
            raise InvalidInput(f"Progress must be an integer from 0 to 100, got {updated.progress!r}.")
        _check_unique_ids(updated)
        for i, case in enumerate(self._cases):
            if case.id == updated.id:
                self._cases[i] = updated
                self._changed()
                return True
        logger.warning("update_case ignored unknown case id %s", updated.id)
        return False

    def append_document(
        self,
        case_id: str,
        filename: str,
        mime_type: str,
        data: bytes | str,
    ) -> CaseDocument:
        case = self.get_case(case_id)
        doc = CaseDocument(
            id=_new_entity_id("doc", case.documents),
            title=filename or "Untitled document",
            type=document_type_for(mime_type),
            content=read_document_content(mime_type, data),
            date_added=date.today().isoformat(),
        )
        self.update_case(replace(case, documents=[*case.documents, doc]))
        return doc

    def append_financial_record(
        self,
        case_id: str,
        description: str,
        amount: float | int | str | None,
        type: str = "Income",
        category: str = "Billable Hours",
    ) -> FinancialRecord:
        """Add a ledger line. Description and a numeric amount are required."""
        case = self.get_case(case_id)
        if not description or not description.strip():
            raise InvalidInput("Description is required.")
        value = _parse_amount(amount)
        if type not in FINANCIAL_TYPES:
            raise InvalidInput(f"Type must be one of {', '.join(FINANCIAL_TYPES)}.")
        if category not in FINANCIAL_CATEGORIES:
            raise InvalidInput(f"Category must be one of {', '.join(FINANCIAL_CATEGORIES)}.")
        record = FinancialRecord(
            id=_new_entity_id("fin", case.financials),
            date=date.today().isoformat(),
            description=description.strip(),
            amount=value,
            type=type,
            category=category,
        )
        self.update_case(replace(case, financials=[*case.financials, record]))
        return record

    def append_note(self, case_id: str, content: str, author: str) -> CaseNote:
        case = self.get_case(case_id)
        if not content or not content.strip():
            raise InvalidInput("Note content is required.")
        note = CaseNote(
            id=_new_entity_id("note", case.notes),
            content=content.strip(),
            date=date.today().isoformat(),
            author=author.strip() or "Unknown",
        )
        self.update_case(replace(case, notes=[*case.notes, note]))
        return note

    def append_person(
        self,
        case_id: str,
        name: str,
        role: str = "",
        organization: str = "",
        email: str = "",
    ) -> Person:
        case = self.get_case(case_id)
        if not name or not name.strip():
            raise InvalidInput("Name is required.")
        person = Person(
            id=_new_entity_id("person", case.people),
            name=name.strip(),
            role=role.strip(),
            organization=organization.strip(),
            email=email.strip(),
        )
        self.update_case(replace(case, people=[*case.people, person]))
        return person
