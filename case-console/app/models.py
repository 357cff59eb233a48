"""Case record data model and typed AI results for the case console.

Case records round-trip through plain dicts for JSON persistence. AI result
types are always fully populated; app.normalize builds them from untrusted
model output.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime

# ── Enumerations ─────────────────────────────────────────────────────────────

CASE_STATUSES: tuple[str, ...] = ("Active", "Pending", "Archived")
FINANCIAL_TYPES: tuple[str, ...] = ("Income", "Expense")
FINANCIAL_CATEGORIES: tuple[str, ...] = (
    "Billable Hours",
    "Flat Fee",
    "Court Fee",
    "Administrative",
    "Other",
)
RISK_SEVERITIES: tuple[str, ...] = ("High", "Medium", "Low")
CHAT_ROLES: tuple[str, ...] = ("user", "model")

PDF_DOCUMENT = "PDF Document"
TEXT_DOCUMENT = "Text Document"


# ── Case sub-entities ────────────────────────────────────────────────────────


@dataclass
class CaseDocument:
    """A document attached to a case. Appended, never edited in place."""

    id: str
    title: str
    type: str
    content: str
    date_added: str

    @classmethod
    def from_dict(cls, data: dict) -> CaseDocument:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            type=str(data.get("type", TEXT_DOCUMENT)),
            content=str(data.get("content", "")),
            date_added=str(data.get("date_added", "")),
        )


@dataclass
class Person:
    """A party or team member involved in a case."""

    id: str
    name: str
    role: str = ""
    organization: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Person:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            role=str(data.get("role", "")),
            organization=str(data.get("organization", "")),
            email=str(data.get("email", "")),
        )


@dataclass
class CaseNote:
    """An internal note. Append-only."""

    id: str
    content: str
    date: str
    author: str

    @classmethod
    def from_dict(cls, data: dict) -> CaseNote:
        return cls(
            id=str(data["id"]),
            content=str(data.get("content", "")),
            date=str(data.get("date", "")),
            author=str(data.get("author", "")),
        )


@dataclass
class FinancialRecord:
    """A single ledger line. Income adds to the case net, Expense subtracts."""

    id: str
    date: str
    description: str
    amount: float
    type: str
    category: str

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == "Income" else -self.amount

    @classmethod
    def from_dict(cls, data: dict) -> FinancialRecord:
        amount = data["amount"]
        # int amounts stay int so stored blobs re-serialize unchanged
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise TypeError(f"Financial amount must be numeric, got {amount!r}")
        if not math.isfinite(amount):
            raise ValueError(f"Financial amount must be finite, got {amount!r}")
        return cls(
            id=str(data["id"]),
            date=str(data.get("date", "")),
            description=str(data.get("description", "")),
            amount=amount,
            type=str(data["type"]),
            category=str(data.get("category", "Other")),
        )


# ── Case ─────────────────────────────────────────────────────────────────────


@dataclass
class Case:
    """A legal matter aggregating documents, people, notes and financials."""

    id: str
    title: str
    client: str
    status: str
    description: str
    access_code: str
    documents: list[CaseDocument] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    notes: list[CaseNote] = field(default_factory=list)
    financials: list[FinancialRecord] = field(default_factory=list)
    last_updated: str = ""
    progress: int = 0

    @property
    def total_income(self) -> float:
        return sum(f.amount for f in self.financials if f.type == "Income")

    @property
    def total_expenses(self) -> float:
        return sum(f.amount for f in self.financials if f.type == "Expense")

    @property
    def net(self) -> float:
        return self.total_income - self.total_expenses

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Case:
        """Build a Case from its dict form. Raises KeyError/TypeError/ValueError on bad shape."""
        status = str(data["status"])
        progress = data.get("progress", 0)
        if isinstance(progress, bool) or not isinstance(progress, int):
            raise TypeError(f"Case progress must be an integer, got {progress!r}")
        if status not in CASE_STATUSES:
            raise ValueError(f"Unknown case status: {status}")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            client=str(data.get("client", "")),
            status=status,
            description=str(data.get("description", "")),
            access_code=str(data.get("access_code", "")),
            documents=[CaseDocument.from_dict(d) for d in data.get("documents") or []],
            people=[Person.from_dict(p) for p in data.get("people") or []],
            notes=[CaseNote.from_dict(n) for n in data.get("notes") or []],
            financials=[FinancialRecord.from_dict(f) for f in data.get("financials") or []],
            last_updated=str(data.get("last_updated", "")),
            progress=progress,
        )


# ── AI results ───────────────────────────────────────────────────────────────


@dataclass
class Risk:
    severity: str
    description: str
    recommendation: str


@dataclass
class Clause:
    title: str
    summary: str
    significance: str


@dataclass
class LegalReport:
    """Risk report for a single document. Never persisted per case."""

    summary: str = ""
    document_type: str = ""
    overall_score: int = 0
    risks: list[Risk] = field(default_factory=list)
    key_clauses: list[Clause] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class UnclearTerm:
    term: str
    context: str = ""
    ambiguity: str = ""
    suggestion: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ResearchSource:
    title: str
    uri: str


@dataclass
class ResearchResult:
    answer: str
    sources: list[ResearchSource] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChatReply:
    answer: str
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChatMessage:
    """One turn of a case chat session. Kept in memory only."""

    role: str
    text: str
    timestamp: datetime = field(default_factory=datetime.now)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "suggestions": list(self.suggestions),
        }
