"""Parse and normalize untrusted model output into typed results.

Every normalize_* function is total: given any parsed payload it returns a
fully populated result, substituting empty strings and lists for anything
missing or of the wrong type.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any

from app.models import (
    RISK_SEVERITIES,
    ChatReply,
    Clause,
    LegalReport,
    ResearchResult,
    ResearchSource,
    Risk,
    UnclearTerm,
)

NO_RESEARCH_RESULTS = "No results found."
NO_CHAT_ANSWER = "I could not generate a response."

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def parse_json_payload(raw: str | None) -> dict:
    """Extract a JSON object from a model reply.

    Handles markdown fences and extra text around the object. An empty reply
    parses as {}. Raises ValueError when no JSON object can be found.
    """
    text = (raw or "").strip()
    if not text:
        return {}

    fence_match = _FENCE_RE.search(text)
    if fence_match:
        text = fence_match.group(1).strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        # Fall back to the outermost {...} span
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("Model reply did not contain a JSON object.") from None
        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError as exc:
            raise ValueError(f"Model reply was not valid JSON: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("Model reply JSON was not an object.")
    return parsed


def _str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _mappings(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _score(value: Any) -> int:
    """Coerce to an int in [0, 100]. Non-numeric values score 0."""
    if isinstance(value, bool):
        return 0
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, score))


def _severity(value: Any) -> str:
    text = _str(value).strip().capitalize()
    return text if text in RISK_SEVERITIES else "Medium"


def normalize_report(payload: dict) -> LegalReport:
    """Build a LegalReport from a parsed payload (camelCase keys)."""
    return LegalReport(
        summary=_str(payload.get("summary")),
        document_type=_str(payload.get("documentType")),
        overall_score=_score(payload.get("overallScore")),
        risks=[
            Risk(
                severity=_severity(item.get("severity")),
                description=_str(item.get("description")),
                recommendation=_str(item.get("recommendation")),
            )
            for item in _mappings(payload.get("risks"))
        ],
        key_clauses=[
            Clause(
                title=_str(item.get("title")),
                summary=_str(item.get("summary")),
                significance=_str(item.get("significance")),
            )
            for item in _mappings(payload.get("keyClauses"))
        ],
        recommendations=_strings(payload.get("recommendations")),
    )


def normalize_unclear_terms(payload: dict) -> list[UnclearTerm]:
    """Return the ambiguity findings, skipping entries without a term."""
    terms: list[UnclearTerm] = []
    for item in _mappings(payload.get("terms")):
        term = _str(item.get("term")).strip()
        if not term:
            continue
        terms.append(UnclearTerm(
            term=term,
            context=_str(item.get("context")),
            ambiguity=_str(item.get("ambiguity")),
            suggestion=_str(item.get("suggestion")),
        ))
    return terms


def normalize_sources(candidates: Iterable[Any]) -> list[ResearchSource]:
    """Drop incomplete citations and dedupe by URI, first occurrence wins."""
    seen: set[str] = set()
    sources: list[ResearchSource] = []
    for candidate in candidates or []:
        if isinstance(candidate, ResearchSource):
            title, uri = candidate.title, candidate.uri
        elif isinstance(candidate, dict):
            title = _str(candidate.get("title"))
            uri = _str(candidate.get("uri") or candidate.get("url"))
        else:
            continue
        if not title or not uri or uri in seen:
            continue
        seen.add(uri)
        sources.append(ResearchSource(title=title, uri=uri))
    return sources


def normalize_research(text: str | None, candidates: Iterable[Any]) -> ResearchResult:
    answer = (text or "").strip()
    return ResearchResult(
        answer=answer or NO_RESEARCH_RESULTS,
        sources=normalize_sources(candidates),
    )


def normalize_chat(payload: dict) -> ChatReply:
    answer = _str(payload.get("answer")).strip()
    return ChatReply(
        answer=answer or NO_CHAT_ANSWER,
        suggestions=_strings(payload.get("suggestions")),
    )
