"""FastAPI backend for the Case Console tool.

Exposes the case store (dashboard, case CRUD, documents, financials, notes,
people, access gate) and the AI operations (risk report, ambiguity scan,
grounded research, case chat) as a JSON command/query surface.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.access import AccessGate
from app.analysis import (
    analyze_case,
    analyze_document,
    chat_with_case,
    identify_unclear_terms,
    perform_research,
    scan_case,
)
from app.cases import CaseStore
from app.errors import AnalysisFailed, AuthMismatch, CaseNotFound, InvalidInput
from app.models import CHAT_ROLES, Case, ChatMessage
from app.storage import load_cases, save_cases

app = FastAPI(title="Case Console API")

_store: CaseStore | None = None


def get_store() -> CaseStore:
    """Load the case list on first use; every change is written back."""
    global _store
    if _store is None:
        _store = CaseStore(load_cases(), on_change=save_cases)
    return _store


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(InvalidInput)
def _invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(AuthMismatch)
def _auth_mismatch(request: Request, exc: AuthMismatch) -> JSONResponse:
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(CaseNotFound)
def _case_not_found(request: Request, exc: CaseNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(AnalysisFailed)
def _analysis_failed(request: Request, exc: AnalysisFailed) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": exc.message})


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TextRequest(BaseModel):
    text: str = ""


class ResearchRequest(BaseModel):
    query: str = ""


class ChatTurn(BaseModel):
    role: str
    text: str


class ChatRequest(BaseModel):
    message: str = ""
    history: list[ChatTurn] = []


class FinancialRequest(BaseModel):
    description: str = ""
    amount: float | str | None = None
    type: str = "Income"
    category: str = "Billable Hours"


class NoteRequest(BaseModel):
    content: str = ""
    author: str = ""


class PersonRequest(BaseModel):
    name: str = ""
    role: str = ""
    organization: str = ""
    email: str = ""


class UnlockRequest(BaseModel):
    code: str = ""


# ---------------------------------------------------------------------------
# Dashboard & cases
# ---------------------------------------------------------------------------


@app.get("/api/dashboard")
def dashboard() -> dict[str, Any]:
    """Status buckets plus firm-wide financial totals."""
    store = get_store()
    summary = store.dashboard_summary()
    summary["groups"] = {
        status: [c.id for c in cases] for status, cases in store.group_by_status().items()
    }
    return summary


@app.get("/api/cases")
def list_cases() -> list[dict[str, Any]]:
    return [c.to_dict() for c in get_store().cases]


@app.post("/api/cases")
def create_case() -> dict[str, Any]:
    """Create a new matter with default fields."""
    return get_store().create_case().to_dict()


@app.get("/api/cases/{case_id}")
def get_case(case_id: str) -> dict[str, Any]:
    case = get_store().get_case(case_id)
    data = case.to_dict()
    data["net"] = case.net
    return data


@app.put("/api/cases/{case_id}")
def update_case(case_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Replace the whole case record."""
    if payload.get("id", case_id) != case_id:
        raise HTTPException(400, "Case id in body does not match the URL.")
    payload["id"] = case_id
    store = get_store()
    store.get_case(case_id)
    try:
        updated = Case.from_dict(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(400, f"Invalid case record: {exc}") from exc
    store.update_case(updated)
    return updated.to_dict()


@app.post("/api/cases/{case_id}/unlock")
def unlock_case(case_id: str, req: UnlockRequest) -> dict[str, Any]:
    """Check an access code against the case (or the bypass code)."""
    case = get_store().get_case(case_id)
    gate = AccessGate()
    gate.unlock(case, req.code)
    return {"id": case_id, "unlocked": not gate.locked}


@app.post("/api/cases/{case_id}/documents")
async def upload_document(case_id: str, file: UploadFile = File(...)) -> dict[str, Any]:
    """Attach an uploaded file to the case as a document."""
    data = await file.read()
    doc = get_store().append_document(
        case_id,
        filename=file.filename or "",
        mime_type=file.content_type or "",
        data=data,
    )
    return {"id": doc.id, "title": doc.title, "type": doc.type, "date_added": doc.date_added}


@app.post("/api/cases/{case_id}/financials")
def add_financial(case_id: str, req: FinancialRequest) -> dict[str, Any]:
    store = get_store()
    record = store.append_financial_record(
        case_id, req.description, req.amount, req.type, req.category
    )
    return {"record": asdict(record), "net": store.get_case(case_id).net}


@app.post("/api/cases/{case_id}/notes")
def add_note(case_id: str, req: NoteRequest) -> dict[str, Any]:
    return asdict(get_store().append_note(case_id, req.content, req.author))


@app.post("/api/cases/{case_id}/people")
def add_person(case_id: str, req: PersonRequest) -> dict[str, Any]:
    person = get_store().append_person(
        case_id, req.name, req.role, req.organization, req.email
    )
    return asdict(person)


# ---------------------------------------------------------------------------
# AI operations
# ---------------------------------------------------------------------------


@app.post("/api/cases/{case_id}/analyze")
def analyze_case_document(case_id: str) -> dict[str, Any]:
    """Risk report for the case's first document."""
    report = analyze_case(get_store().get_case(case_id))
    if report is None:
        raise HTTPException(400, "This case has no documents to analyze.")
    return report.to_dict()


@app.post("/api/cases/{case_id}/unclear-terms")
def scan_case_document(case_id: str) -> list[dict[str, Any]]:
    return [t.to_dict() for t in scan_case(get_store().get_case(case_id))]


@app.post("/api/cases/{case_id}/chat")
def chat(case_id: str, req: ChatRequest) -> dict[str, Any]:
    """Ask the case assistant a question with the case documents as context."""
    case = get_store().get_case(case_id)
    history = [
        ChatMessage(role=turn.role, text=turn.text)
        for turn in req.history
        if turn.role in CHAT_ROLES
    ]
    return chat_with_case(req.message, case, history).to_dict()


@app.post("/api/analyze")
def analyze(req: TextRequest) -> dict[str, Any]:
    """Tool mode: risk report for pasted text."""
    return analyze_document(req.text).to_dict()


@app.post("/api/unclear-terms")
def unclear_terms(req: TextRequest) -> list[dict[str, Any]]:
    return [t.to_dict() for t in identify_unclear_terms(req.text)]


@app.post("/api/research")
def research(req: ResearchRequest) -> dict[str, Any]:
    """Tool mode: grounded legal research with deduplicated sources."""
    return perform_research(req.query).to_dict()
