"""AI operations for the case console: shape, call Claude once, normalize.

Document analysis and research are headline reports and raise
AnalysisFailed when the call or parse fails. The ambiguity scan and the
case chat keep the assistant responsive by returning empty or apologetic
defaults instead.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from app.errors import AnalysisFailed
from app.models import Case, ChatMessage, ChatReply, LegalReport, ResearchResult, UnclearTerm
from app.normalize import (
    normalize_chat,
    normalize_report,
    normalize_research,
    normalize_unclear_terms,
    parse_json_payload,
)
from app.prompts import (
    ModelRequest,
    build_case_context,
    shape_ambiguity_scan,
    shape_contextual_chat,
    shape_document_analysis,
    shape_research_query,
)

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared.claude_client import ClaudeError, ModelReply, generate_reply

logger = logging.getLogger(__name__)

TOOL_NAME = "case-console"

ANALYSIS_FAILED_MSG = "Failed to analyze the document. Please try again."
RESEARCH_FAILED_MSG = "Failed to perform legal research."
CHAT_FAILED_MSG = "I encountered an error analyzing that request."


def _call(request: ModelRequest) -> ModelReply:
    return generate_reply(
        request.system_prompt,
        request.user_message,
        history=request.history,
        response_schema=request.response_schema,
        grounded_search=request.grounded_search,
        max_tokens=request.max_tokens,
        tool_name=TOOL_NAME,
        operation=request.operation,
    )


def analyze_document(text: str) -> LegalReport:
    """Produce a risk report for *text*.

    Raises InvalidInput for empty text and AnalysisFailed when Claude is
    unreachable or replies with something that is not a JSON object.
    """
    request = shape_document_analysis(text)
    try:
        reply = _call(request)
        payload = parse_json_payload(reply.text)
    except (ClaudeError, ValueError) as exc:
        logger.error("Document analysis failed: %s", exc)
        raise AnalysisFailed(ANALYSIS_FAILED_MSG) from exc
    return normalize_report(payload)


def identify_unclear_terms(text: str) -> list[UnclearTerm]:
    """List ambiguous terms in *text*. Empty text returns [] without a call."""
    request = shape_ambiguity_scan(text)
    if request is None:
        return []
    try:
        reply = _call(request)
        payload = parse_json_payload(reply.text)
    except (ClaudeError, ValueError) as exc:
        logger.warning("Unclear terms analysis degraded to empty result: %s", exc)
        return []
    return normalize_unclear_terms(payload)


def perform_research(query: str) -> ResearchResult:
    """Answer *query* with web-grounded citations.

    Raises InvalidInput for an empty query and AnalysisFailed on call failure.
    """
    request = shape_research_query(query)
    try:
        reply = _call(request)
    except ClaudeError as exc:
        logger.error("Legal research failed: %s", exc)
        raise AnalysisFailed(RESEARCH_FAILED_MSG) from exc
    return normalize_research(reply.text, reply.sources)


def chat_with_case(message: str, case: Case, history: list[ChatMessage]) -> ChatReply:
    """Answer a question about *case* using all of its documents as context.

    Raises InvalidInput for an empty message; any call or parse failure
    becomes an apologetic reply with no suggestions.
    """
    request = shape_contextual_chat(message, build_case_context(case), history)
    try:
        reply = _call(request)
        payload = parse_json_payload(reply.text)
    except (ClaudeError, ValueError) as exc:
        logger.warning("Case chat degraded to fallback reply: %s", exc)
        return ChatReply(answer=CHAT_FAILED_MSG, suggestions=[])
    return normalize_chat(payload)


# ── Case-level helpers ───────────────────────────────────────────────────────


def analyze_case(case: Case) -> LegalReport | None:
    """Run the risk report on the case's first document, if it has one."""
    if not case.documents:
        return None
    return analyze_document(case.documents[0].content)


def scan_case(case: Case) -> list[UnclearTerm]:
    """Run the ambiguity scan on the case's first document, if it has one."""
    if not case.documents:
        return []
    return identify_unclear_terms(case.documents[0].content)


def start_chat(case: Case) -> list[ChatMessage]:
    """Open a chat session for *case* with the assistant's greeting."""
    greeting = (
        f"Welcome, Counsel. I am the dedicated Legal Associate for the **{case.title}** matter. "
        f"I have indexed all {len(case.documents)} documents. How may I assist you today?"
    )
    return [ChatMessage(role="model", text=greeting)]
