"""Request shaping for the four AI operations of the case console.

Each shape_* function turns user text into a ModelRequest: fixed
instructions, the user message, prior turns where relevant, and the JSON
shape the reply must follow. Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.errors import InvalidInput
from app.models import RISK_SEVERITIES, Case, ChatMessage

# ── Expected reply shapes (JSON Schema) ──────────────────────────────────────

LEGAL_REPORT_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "summary": {"type": "string", "description": "A concise executive summary of the document."},
        "documentType": {"type": "string", "description": "The type of legal document (e.g., NDA, Employment Contract)."},
        "overallScore": {
            "type": "integer",
            "minimum": 0,
            "maximum": 100,
            "description": "A score from 0-100 rating the safety and quality of the document.",
        },
        "risks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "severity": {"type": "string", "enum": list(RISK_SEVERITIES)},
                    "description": {"type": "string"},
                    "recommendation": {"type": "string"},
                },
                "required": ["severity", "description", "recommendation"],
            },
        },
        "keyClauses": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "summary": {"type": "string"},
                    "significance": {"type": "string"},
                },
                "required": ["title", "summary", "significance"],
            },
        },
        "recommendations": {
            "type": "array",
            "items": {"type": "string"},
            "description": "General actionable advice for the lawyer.",
        },
    },
    "required": ["summary", "documentType", "risks", "keyClauses", "overallScore", "recommendations"],
}

UNCLEAR_TERMS_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "terms": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "term": {"type": "string", "description": "The specific word or phrase that is ambiguous."},
                    "context": {"type": "string", "description": "The sentence or clause where it appears."},
                    "ambiguity": {"type": "string", "description": "Why this term is unclear or legally risky."},
                    "suggestion": {"type": "string", "description": "A more precise legal alternative."},
                },
                "required": ["term", "context", "ambiguity", "suggestion"],
            },
        },
    },
    "required": ["terms"],
}

CHAT_REPLY_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "answer": {"type": "string", "description": "The direct answer to the user's question."},
        "suggestions": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 3,
            "maxItems": 3,
            "description": "3 short, relevant follow-up questions the user might want to ask next based on the context.",
        },
    },
    "required": ["answer", "suggestions"],
}

# ── System prompts ───────────────────────────────────────────────────────────

ANALYSIS_SYSTEM_PROMPT = (
    "You are Veritas, an expert legal AI assistant. Your tone is professional, "
    "authoritative, and precise. You focus on protecting the client's interest."
)

AMBIGUITY_SYSTEM_PROMPT = "You are a diligent legal auditor. Your goal is to find ambiguity."

RESEARCH_SYSTEM_PROMPT = (
    "You are a legal researcher. Provide accurate, cited information based on "
    "real-time data. Prioritize official government sources and reputable legal databases."
)

CHAT_SYSTEM_PROMPT = """You are an AI Legal Associate assisting with a specific case.

CASE CONTEXT:
{case_context}

YOUR ROLE:
Answer the user's question based strictly on the case documents provided above and general legal principles.
Be concise, professional, and cite specific clauses if applicable.

IMPORTANT:
Provide the answer in JSON format containing an 'answer' string and a 'suggestions' array of strings.
The 'suggestions' should be 3 intelligent follow-up questions the user might want to ask next."""

_NO_DOCUMENTS = "(No documents have been added to this case.)"


@dataclass
class ModelRequest:
    """Everything the model capability needs for one call."""

    operation: str
    system_prompt: str
    user_message: str
    history: list[dict] = field(default_factory=list)
    response_schema: dict | None = None
    grounded_search: bool = False
    max_tokens: int = 4096


def _is_blank(text: str | None) -> bool:
    return not text or not text.strip()


def shape_document_analysis(text: str) -> ModelRequest:
    """Build the risk-report request. Raises InvalidInput on empty text."""
    if _is_blank(text):
        raise InvalidInput("No text provided for analysis.")
    return ModelRequest(
        operation="document-analysis",
        system_prompt=ANALYSIS_SYSTEM_PROMPT,
        user_message=(
            "Analyze the following legal document text as a senior legal partner at a top law firm.\n"
            "Provide a detailed report identifying risks, key clauses, and an overall assessment.\n\n"
            f"Document Text:\n{text}"
        ),
        response_schema=LEGAL_REPORT_SCHEMA,
        max_tokens=8192,
    )


def shape_ambiguity_scan(text: str) -> ModelRequest | None:
    """Build the ambiguity-scan request, or None when there is nothing to scan."""
    if _is_blank(text):
        return None
    return ModelRequest(
        operation="ambiguity-scan",
        system_prompt=AMBIGUITY_SYSTEM_PROMPT,
        user_message=(
            "Review the following legal text and identify vague, ambiguous, or undefined "
            "terms that could lead to disputes.\n\n"
            f"Document Text:\n{text}"
        ),
        response_schema=UNCLEAR_TERMS_SCHEMA,
    )


def shape_research_query(query: str) -> ModelRequest:
    """Build the grounded research request. Raises InvalidInput on empty query.

    The reply is free text; citations arrive out-of-band from the search tool.
    """
    if _is_blank(query):
        raise InvalidInput("No query provided.")
    return ModelRequest(
        operation="research",
        system_prompt=RESEARCH_SYSTEM_PROMPT,
        user_message=(
            "Research the following legal query. Cite official laws, court rulings, "
            "or reliable legal principles where applicable.\n\n"
            f"Query: {query}"
        ),
        grounded_search=True,
    )


def build_case_context(case: Case) -> str:
    """Concatenate every document title and content of *case*. No size bound."""
    return "\n\n".join(
        f"Document: {doc.title}\nContent:\n{doc.content}" for doc in case.documents
    )


def build_chat_history(history: list[ChatMessage]) -> list[dict]:
    """Convert session messages into alternating user/assistant turns.

    Leading model turns (the greeting) are dropped and consecutive turns from
    the same role are merged, since the conversation must open with the user.
    """
    turns: list[dict] = []
    for msg in history:
        role = "assistant" if msg.role == "model" else "user"
        if not turns and role == "assistant":
            continue
        if not msg.text.strip():
            continue
        if turns and turns[-1]["role"] == role:
            turns[-1]["content"] += "\n\n" + msg.text
        else:
            turns.append({"role": role, "content": msg.text})
    # the new question follows, so history must end on an assistant turn
    if turns and turns[-1]["role"] == "user":
        turns.pop()
    return turns


def shape_contextual_chat(
    message: str,
    case_context: str,
    history: list[ChatMessage],
) -> ModelRequest:
    """Build the case-assistant request. Raises InvalidInput on empty message."""
    if _is_blank(message):
        raise InvalidInput("Message cannot be empty.")
    return ModelRequest(
        operation="chat",
        system_prompt=CHAT_SYSTEM_PROMPT.format(case_context=case_context or _NO_DOCUMENTS),
        user_message=f"USER QUESTION:\n{message}",
        history=build_chat_history(history),
        response_schema=CHAT_REPLY_SCHEMA,
        max_tokens=2048,
    )
