"""Tests for case-console/app/prompts.py — request shaping for the AI operations."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "case-console"))

from app.errors import InvalidInput
from app.models import Case, CaseDocument, ChatMessage
from app.prompts import (
    CHAT_REPLY_SCHEMA,
    LEGAL_REPORT_SCHEMA,
    UNCLEAR_TERMS_SCHEMA,
    build_case_context,
    build_chat_history,
    shape_ambiguity_scan,
    shape_contextual_chat,
    shape_document_analysis,
    shape_research_query,
)


def _case(*docs: tuple[str, str]) -> Case:
    return Case(
        id="CS-2024-100",
        title="Test Matter",
        client="Client",
        status="Active",
        description="",
        access_code="0000",
        documents=[
            CaseDocument(id=f"d{i}", title=t, type="Text Document", content=c, date_added="2024-01-01")
            for i, (t, c) in enumerate(docs)
        ],
    )


# ── Document analysis ────────────────────────────────────────────────────


class TestShapeDocumentAnalysis:
    def test_embeds_text_and_schema(self):
        req = shape_document_analysis("The Parties agree to arbitrate.")
        assert "The Parties agree to arbitrate." in req.user_message
        assert req.response_schema is LEGAL_REPORT_SCHEMA
        assert req.grounded_search is False
        assert req.operation == "document-analysis"

    def test_empty_text_rejected(self):
        with pytest.raises(InvalidInput, match="No text provided"):
            shape_document_analysis("")

    def test_whitespace_only_rejected(self):
        with pytest.raises(InvalidInput):
            shape_document_analysis("   \n\t")

    def test_report_schema_requires_all_fields(self):
        assert set(LEGAL_REPORT_SCHEMA["required"]) == {
            "summary", "documentType", "risks", "keyClauses", "overallScore", "recommendations",
        }


# ── Ambiguity scan ───────────────────────────────────────────────────────


class TestShapeAmbiguityScan:
    def test_blank_text_needs_no_request(self):
        assert shape_ambiguity_scan("") is None
        assert shape_ambiguity_scan("  ") is None

    def test_request_uses_terms_schema(self):
        req = shape_ambiguity_scan("reasonable efforts")
        assert req is not None
        assert req.response_schema is UNCLEAR_TERMS_SCHEMA
        assert "reasonable efforts" in req.user_message


# ── Research ─────────────────────────────────────────────────────────────


class TestShapeResearchQuery:
    def test_grounded_and_free_text(self):
        req = shape_research_query("Statute of limitations for breach of contract in NY")
        assert req.grounded_search is True
        assert req.response_schema is None
        assert "Statute of limitations" in req.user_message

    def test_empty_query_rejected(self):
        with pytest.raises(InvalidInput, match="No query provided"):
            shape_research_query("")


# ── Case context & chat ──────────────────────────────────────────────────


class TestBuildCaseContext:
    def test_includes_every_document_in_order(self):
        ctx = build_case_context(_case(("A.pdf", "alpha"), ("B.txt", "beta")))
        assert ctx == "Document: A.pdf\nContent:\nalpha\n\nDocument: B.txt\nContent:\nbeta"

    def test_no_documents_is_empty(self):
        assert build_case_context(_case()) == ""


class TestBuildChatHistory:
    def test_drops_leading_greeting(self):
        history = [ChatMessage(role="model", text="Welcome, Counsel.")]
        assert build_chat_history(history) == []

    def test_maps_roles(self):
        history = [
            ChatMessage(role="model", text="Welcome"),
            ChatMessage(role="user", text="What is the term?"),
            ChatMessage(role="model", text="Five years."),
        ]
        assert build_chat_history(history) == [
            {"role": "user", "content": "What is the term?"},
            {"role": "assistant", "content": "Five years."},
        ]

    def test_merges_consecutive_same_role(self):
        history = [
            ChatMessage(role="user", text="First"),
            ChatMessage(role="user", text="Second"),
            ChatMessage(role="model", text="Answer"),
        ]
        turns = build_chat_history(history)
        assert turns[0] == {"role": "user", "content": "First\n\nSecond"}
        assert len(turns) == 2

    def test_trailing_user_turn_dropped(self):
        history = [
            ChatMessage(role="user", text="Q1"),
            ChatMessage(role="model", text="A1"),
            ChatMessage(role="user", text="unanswered"),
        ]
        turns = build_chat_history(history)
        assert turns[-1]["role"] == "assistant"


class TestShapeContextualChat:
    def test_context_in_system_prompt(self):
        req = shape_contextual_chat("What law governs?", "Document: NDA\nContent:\nNew York", [])
        assert "Document: NDA" in req.system_prompt
        assert "What law governs?" in req.user_message
        assert req.response_schema is CHAT_REPLY_SCHEMA
        assert req.history == []

    def test_empty_context_still_shapes(self):
        req = shape_contextual_chat("Anything?", "", [])
        assert "No documents" in req.system_prompt

    def test_empty_message_rejected(self):
        with pytest.raises(InvalidInput, match="Message cannot be empty"):
            shape_contextual_chat("  ", "ctx", [])
