"""Tests for case-console/app/cases.py — CaseStore commands, queries and aggregates."""

from __future__ import annotations

import re
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "case-console"))

from app.cases import (
    DEFAULT_ACCESS_CODE,
    PDF_PLACEHOLDER,
    CaseStore,
    document_type_for,
    new_case_id,
    read_document_content,
)
from app.errors import CaseNotFound, InvalidInput
from app.seed import seed_cases


@pytest.fixture()
def saved():
    return []


@pytest.fixture()
def store(saved):
    return CaseStore(seed_cases(), on_change=lambda cases: saved.append(cases))


# ── Ids & documents ──────────────────────────────────────────────────────


class TestHelpers:
    def test_case_id_format(self):
        case_id = new_case_id(2025)
        prefix, year, number = case_id.split("-")
        assert prefix == "CS"
        assert year == "2025"
        assert 100 <= int(number) <= 999

    def test_document_type_from_mime(self):
        assert document_type_for("application/pdf") == "PDF Document"
        assert document_type_for("text/plain") == "Text Document"
        assert document_type_for("") == "Text Document"

    def test_pdf_content_is_placeholder(self):
        assert read_document_content("application/pdf", b"%PDF-1.7 ...") == PDF_PLACEHOLDER

    def test_text_content_decoded(self):
        assert read_document_content("text/plain", "Clause 1.".encode()) == "Clause 1."

    def test_empty_upload_is_placeholder(self):
        assert read_document_content("text/plain", b"") == PDF_PLACEHOLDER


# ── Queries ──────────────────────────────────────────────────────────────


class TestQueries:
    def test_seed_groups_one_each(self, store):
        groups = store.group_by_status()
        assert [len(groups[s]) for s in ("Active", "Pending", "Archived")] == [1, 1, 1]

    def test_firm_totals(self, store):
        assert store.total_income() == 18500
        assert store.total_expenses() == 250
        assert store.net_revenue() == 18250

    def test_case_net(self, store):
        assert store.get_case("CS-2024-001").net == 6250

    def test_summary(self, store):
        summary = store.dashboard_summary()
        assert summary["counts"] == {"Active": 1, "Pending": 1, "Archived": 1}
        assert summary["total_cases"] == 3
        assert summary["net_revenue"] == 18250

    def test_get_case_unknown(self, store):
        with pytest.raises(CaseNotFound):
            store.get_case("CS-0000-000")


# ── Create / select / update ─────────────────────────────────────────────


class TestCreateCase:
    def test_new_case_defaults(self, store, saved):
        case = store.create_case()
        assert store.cases[0].id == case.id
        assert store.selected == case
        assert case.status == "Pending"
        assert case.progress == 0
        assert case.access_code == DEFAULT_ACCESS_CODE
        assert case.documents == case.people == case.notes == case.financials == []
        assert len(saved) == 1

    def test_new_case_appears_in_pending(self, store):
        case = store.create_case()
        assert case in store.group_by_status()["Pending"]

    def test_new_case_id_uses_current_year(self, store):
        case = store.create_case()
        assert re.fullmatch(r"CS-\d{4}-\d{3}", case.id)
        assert case.id.split("-")[1] == str(date.today().year)

    def test_two_creates_are_distinct_objects(self, store):
        first = store.create_case()
        second = store.create_case()
        assert first is not second
        assert store.cases[0] is second
        assert len(store.cases) == 5


class TestSelectCase:
    def test_select_known(self, store):
        assert store.select_case("CS-2024-042").title == "Estate of A. Vanderbilt"
        assert store.selected.id == "CS-2024-042"

    def test_select_unknown_clears(self, store):
        store.select_case("CS-2024-042")
        assert store.select_case("nope") is None
        assert store.selected is None


class TestUpdateCase:
    def test_replaces_record(self, store, saved):
        case = store.get_case("CS-2024-042")
        assert store.update_case(replace(case, status="Active", progress=40)) is True
        updated = store.get_case("CS-2024-042")
        assert updated.status == "Active"
        assert updated.progress == 40
        assert len(saved) == 1

    def test_unknown_id_is_noop(self, store, saved):
        case = replace(store.get_case("CS-2024-042"), id="CS-9999-999")
        assert store.update_case(case) is False
        assert saved == []
        assert len(store.cases) == 3

    def test_invalid_status_rejected(self, store):
        case = replace(store.get_case("CS-2024-042"), status="Closed")
        with pytest.raises(InvalidInput):
            store.update_case(case)

    def test_duplicate_document_ids_rejected(self, store, saved):
        case = store.get_case("CS-2024-001")
        doc = case.documents[0]
        with pytest.raises(InvalidInput, match="Duplicate document id"):
            store.update_case(replace(case, documents=[doc, doc]))
        assert [d.id for d in store.get_case("CS-2024-001").documents] == ["d1", "d2"]
        assert saved == []

    def test_duplicate_financial_ids_rejected(self, store):
        case = store.get_case("CS-2024-001")
        record = case.financials[0]
        with pytest.raises(InvalidInput):
            store.update_case(replace(case, financials=[*case.financials, record]))

    @pytest.mark.parametrize("progress", [-1, 101, 900])
    def test_progress_out_of_range_rejected(self, store, progress):
        case = store.get_case("CS-2024-042")
        with pytest.raises(InvalidInput):
            store.update_case(replace(case, progress=progress))
        assert store.get_case("CS-2024-042").progress == 15

    def test_progress_bounds_accepted(self, store):
        case = store.get_case("CS-2024-042")
        assert store.update_case(replace(case, progress=0)) is True
        assert store.update_case(replace(case, progress=100)) is True

    def test_status_change_moves_group(self, store):
        case = store.get_case("CS-2023-899")
        store.update_case(replace(case, status="Active"))
        groups = store.group_by_status()
        assert len(groups["Active"]) == 2
        assert groups["Archived"] == []


# ── Append-only sub-entities ─────────────────────────────────────────────


class TestAppendDocument:
    def test_text_upload(self, store):
        doc = store.append_document("CS-2024-042", "will.txt", "text/plain", b"Last will and testament")
        case = store.get_case("CS-2024-042")
        assert case.documents == [doc]
        assert doc.type == "Text Document"
        assert doc.content == "Last will and testament"

    def test_pdf_upload(self, store):
        doc = store.append_document("CS-2024-042", "deed.pdf", "application/pdf", b"%PDF")
        assert doc.type == "PDF Document"
        assert doc.content == PDF_PLACEHOLDER

    def test_ids_unique_within_case(self, store):
        ids = {store.append_document("CS-2024-042", f"{i}.txt", "text/plain", b"x").id for i in range(20)}
        assert len(ids) == 20


class TestAppendFinancialRecord:
    def test_income_updates_net(self, store):
        before = store.get_case("CS-2024-042").net
        store.append_financial_record("CS-2024-042", "Retainer", "2000", "Income", "Flat Fee")
        assert store.get_case("CS-2024-042").net == before + 2000

    def test_expense_updates_firm_net(self, store):
        before = store.net_revenue()
        store.append_financial_record("CS-2024-001", "Courier", 75.5, "Expense", "Administrative")
        assert store.net_revenue() == pytest.approx(before - 75.5)

    def test_missing_description_rejected(self, store, saved):
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "", 100)
        assert saved == []

    def test_missing_amount_rejected(self, store):
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "Fee", "")
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "Fee", None)

    def test_non_numeric_amount_rejected(self, store):
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "Fee", "lots")

    @pytest.mark.parametrize("amount", ["nan", "inf", "-inf", float("nan"), float("inf")])
    def test_non_finite_amount_rejected(self, store, saved, amount):
        before = store.net_revenue()
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "Fee", amount)
        assert store.net_revenue() == before
        assert saved == []

    def test_unknown_type_rejected(self, store):
        with pytest.raises(InvalidInput):
            store.append_financial_record("CS-2024-001", "Fee", 10, "Refund")

    def test_unknown_case(self, store):
        with pytest.raises(CaseNotFound):
            store.append_financial_record("missing", "Fee", 10)


class TestAppendNoteAndPerson:
    def test_note_appended(self, store):
        note = store.append_note("CS-2024-001", "Call opposing counsel.", "Eleanor Sterling")
        assert store.get_case("CS-2024-001").notes[-1] == note
        assert note.author == "Eleanor Sterling"

    def test_empty_note_rejected(self, store):
        with pytest.raises(InvalidInput):
            store.append_note("CS-2024-001", "   ", "me")

    def test_person_appended(self, store):
        person = store.append_person("CS-2024-042", "Ada Vanderbilt", "Executor", "Vanderbilt Trust")
        assert store.get_case("CS-2024-042").people == [person]

    def test_person_needs_name(self, store):
        with pytest.raises(InvalidInput):
            store.append_person("CS-2024-042", "")
