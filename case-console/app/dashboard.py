"""Case Console -- Streamlit dashboard.

Partner dashboard grouped by case status, a locked case detail view with
documents, people, notes, financials, AI risk report, ambiguity scan and a
case-aware chat assistant, plus a quick-analysis tool for pasted text.
State lives in st.session_state; the case list persists through app.storage.
"""

from __future__ import annotations

import html as html_mod
import sys
from dataclasses import replace
from pathlib import Path

import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from app.access import AccessGate
from app.analysis import (
    analyze_case,
    analyze_document,
    chat_with_case,
    perform_research,
    scan_case,
    start_chat,
)
from app.cases import CaseStore
from app.errors import AnalysisFailed, AuthMismatch, InvalidInput
from app.models import (
    CASE_STATUSES,
    FINANCIAL_CATEGORIES,
    FINANCIAL_TYPES,
    Case,
    ChatMessage,
    LegalReport,
    ResearchResult,
)
from app.seed import SAMPLE_CONTRACT
from app.storage import load_cases, reset_cases, save_cases
from shared.theme import render_nav_bar, render_theme_css, status_badge
from shared.usage_tracker import get_operation_breakdown

# -- Page config --------------------------------------------------------------

st.set_page_config(
    page_title="Veritas Console",
    layout="wide",
    initial_sidebar_state="expanded",
)
render_theme_css()

# -- Session state defaults ---------------------------------------------------

_DEFAULTS: dict = {
    "view": "dashboard",
    "gate": None,
    "unlock_error": "",
    "chats": {},
    "report": None,
    "report_error": "",
    "unclear_terms": None,
    "tool_text": "",
    "tool_report": None,
    "tool_research": None,
    "tool_error": "",
}
for _k, _v in _DEFAULTS.items():
    if _k not in st.session_state:
        st.session_state[_k] = _v

if "store" not in st.session_state:
    st.session_state.store = CaseStore(load_cases(), on_change=save_cases)
if st.session_state.gate is None:
    st.session_state.gate = AccessGate()

store: CaseStore = st.session_state.store
gate: AccessGate = st.session_state.gate


# -- Helpers ------------------------------------------------------------------


def _esc(text: str) -> str:
    return html_mod.escape(str(text))


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _open_case(case_id: str) -> None:
    """Select a case and enter its detail view locked."""
    case = store.select_case(case_id)
    if case is None:
        st.session_state.view = "dashboard"
        return
    gate.enter()
    st.session_state.view = "detail"
    st.session_state.unlock_error = ""
    st.session_state.report = None
    st.session_state.report_error = ""
    st.session_state.unclear_terms = None
    if case.id not in st.session_state.chats:
        st.session_state.chats[case.id] = start_chat(case)


def _new_case() -> None:
    case = store.create_case()
    _open_case(case.id)


def _send_chat(case: Case, text: str) -> None:
    messages: list[ChatMessage] = st.session_state.chats.setdefault(case.id, start_chat(case))
    history = list(messages)
    try:
        reply = chat_with_case(text, case, history)
    except InvalidInput:
        return
    messages.append(ChatMessage(role="user", text=text))
    messages.append(ChatMessage(role="model", text=reply.answer, suggestions=reply.suggestions))


def _render_report(report: LegalReport) -> None:
    col_score, col_summary = st.columns([1, 4])
    with col_score:
        st.markdown('<div class="section-label">Overall Score</div>', unsafe_allow_html=True)
        st.markdown(f'<div class="score-ring">{report.overall_score}</div>', unsafe_allow_html=True)
    with col_summary:
        st.markdown(
            f'<div class="section-label">{_esc(report.document_type or "Document")}</div>',
            unsafe_allow_html=True,
        )
        st.write(report.summary or "_No summary returned._")

    st.markdown('<div class="section-label">Risks</div>', unsafe_allow_html=True)
    if not report.risks:
        st.caption("No risks identified.")
    for risk in report.risks:
        st.markdown(
            f'<div class="risk-item {risk.severity.lower()}">{status_badge(risk.severity)} '
            f"{_esc(risk.description)}<br><em>{_esc(risk.recommendation)}</em></div>",
            unsafe_allow_html=True,
        )

    st.markdown('<div class="section-label">Key Clauses</div>', unsafe_allow_html=True)
    for clause in report.key_clauses:
        with st.expander(clause.title or "Clause"):
            st.write(clause.summary)
            st.caption(clause.significance)

    if report.recommendations:
        st.markdown('<div class="section-label">Recommendations</div>', unsafe_allow_html=True)
        for rec in report.recommendations:
            st.markdown(f"- {rec}")


def _render_research(result: ResearchResult) -> None:
    st.markdown(result.answer)
    if result.sources:
        st.markdown('<div class="section-label">Sources</div>', unsafe_allow_html=True)
        for src in result.sources:
            st.markdown(f"- [{src.title}]({src.uri})")


# -- Sidebar ------------------------------------------------------------------

with st.sidebar:
    st.markdown("### Veritas Console")
    if st.button("Partner Dashboard", use_container_width=True):
        st.session_state.view = "dashboard"
        store.select_case(None)
        st.rerun()
    if st.button("Quick Analysis", use_container_width=True):
        st.session_state.view = "tool"
        st.rerun()

    with st.expander("AI usage this month"):
        breakdown = get_operation_breakdown()
        if not breakdown:
            st.caption("No model calls yet.")
        for row in breakdown:
            st.caption(f"{row['operation']}: {row['calls']} calls, ${row['cost_usd']:.4f}")

    with st.expander("Demo data"):
        if st.button("Reset to sample cases"):
            reset_cases()
            st.session_state.store = CaseStore(load_cases(), on_change=save_cases)
            st.session_state.chats = {}
            st.session_state.view = "dashboard"
            st.rerun()


# -- Dashboard view -----------------------------------------------------------


def _render_dashboard() -> None:
    render_nav_bar("Partner Dashboard")
    summary = store.dashboard_summary()

    tiles = [
        ("Active Matters", str(summary["counts"]["Active"]), False),
        ("Total Income", _money(summary["total_income"]), False),
        ("Total Expenses", _money(summary["total_expenses"]), False),
        ("Net Revenue", _money(summary["net_revenue"]), summary["net_revenue"] < 0),
    ]
    for col, (label, value, negative) in zip(st.columns(4), tiles):
        col.markdown(
            f'<div class="metric-tile"><div class="metric-label">{label}</div>'
            f'<div class="metric-value{" negative" if negative else ""}">{value}</div></div>',
            unsafe_allow_html=True,
        )

    st.write("")
    if st.button("+ New Matter", type="primary"):
        _new_case()
        st.rerun()

    groups = store.group_by_status()
    for status in CASE_STATUSES:
        cases = groups[status]
        st.markdown(
            f'<div class="section-label">{status} Matters ({len(cases)})</div>',
            unsafe_allow_html=True,
        )
        if not cases:
            st.caption(f"No {status.lower()} matters.")
            continue
        for col, case in zip(st.columns(3) * ((len(cases) + 2) // 3), cases):
            with col:
                people = ", ".join(p.name for p in case.people) or "No parties yet"
                st.markdown(
                    f'<div class="case-card"><div class="case-id">{_esc(case.id)} {status_badge(case.status)}</div>'
                    f'<div class="case-title">{_esc(case.title)}</div>'
                    f'<div class="case-desc">{_esc(case.description)}</div>'
                    f'<div class="case-meta">{_esc(people)} &middot; Updated {_esc(case.last_updated)}</div></div>',
                    unsafe_allow_html=True,
                )
                if st.button("Open", key=f"open_{case.id}"):
                    _open_case(case.id)
                    st.rerun()


# -- Case detail view ---------------------------------------------------------


def _render_lock_screen(case: Case) -> None:
    st.markdown(
        f'<div class="lock-card"><div class="lock-title">Veritas Secure Enclave</div>'
        f'<p class="lock-ref">Requesting access to <strong>{_esc(case.title)}</strong><br>'
        f"Ref ID: {_esc(case.id)}</p></div>",
        unsafe_allow_html=True,
    )
    _, center, _ = st.columns([1, 2, 1])
    with center:
        with st.form("unlock_form"):
            code = st.text_input("Security Access Code", type="password")
            submitted = st.form_submit_button("Authenticate", use_container_width=True)
        if submitted:
            try:
                gate.unlock(case, code)
                st.session_state.unlock_error = ""
                st.rerun()
            except AuthMismatch as exc:
                st.session_state.unlock_error = exc.message
        if st.session_state.unlock_error:
            st.error(st.session_state.unlock_error)
        if st.button("Cancel Request"):
            st.session_state.view = "dashboard"
            st.rerun()


def _render_overview(case: Case) -> None:
    with st.form("overview_form"):
        title = st.text_input("Title", value=case.title)
        client = st.text_input("Client", value=case.client)
        status = st.selectbox("Status", CASE_STATUSES, index=CASE_STATUSES.index(case.status))
        progress = st.slider("Progress", 0, 100, value=case.progress)
        description = st.text_area("Description", value=case.description)
        if st.form_submit_button("Save changes"):
            store.update_case(replace(
                case,
                title=title,
                client=client,
                status=status,
                progress=progress,
                description=description,
            ))
            st.rerun()
    cols = st.columns(3)
    cols[0].metric("Documents", len(case.documents))
    cols[1].metric("People", len(case.people))
    cols[2].metric("Net", _money(case.net))


def _render_documents(case: Case) -> None:
    with st.form("upload_form", clear_on_submit=True):
        upload = st.file_uploader("Add a document to this case", type=["txt", "md", "pdf"])
        if st.form_submit_button("Upload") and upload is not None:
            store.append_document(case.id, upload.name, upload.type or "", upload.getvalue())
            st.rerun()
    if not case.documents:
        st.caption("No documents yet.")
    for doc in case.documents:
        with st.expander(f"{doc.title} ({doc.type}, {doc.date_added})"):
            st.text(doc.content[:5000])

    col_a, col_b = st.columns(2)
    if col_a.button("Run Risk Analysis", disabled=not case.documents):
        with st.spinner("Analyzing first document..."):
            try:
                st.session_state.report = analyze_case(case)
                st.session_state.report_error = ""
            except AnalysisFailed as exc:
                st.session_state.report_error = exc.message
    if col_b.button("Scan for Unclear Terms", disabled=not case.documents):
        with st.spinner("Scanning for ambiguity..."):
            st.session_state.unclear_terms = scan_case(case)


def _render_people(case: Case) -> None:
    for person in case.people:
        st.markdown(
            f"**{_esc(person.name)}** &middot; {_esc(person.role)}<br>"
            f"{_esc(person.organization)} &middot; {_esc(person.email)}",
            unsafe_allow_html=True,
        )
    with st.form("person_form", clear_on_submit=True):
        cols = st.columns(4)
        name = cols[0].text_input("Name")
        role = cols[1].text_input("Role")
        org = cols[2].text_input("Organization")
        email = cols[3].text_input("Email")
        if st.form_submit_button("Add person"):
            try:
                store.append_person(case.id, name, role, org, email)
                st.rerun()
            except InvalidInput as exc:
                st.error(exc.message)


def _render_notes(case: Case) -> None:
    for note in case.notes:
        st.markdown(
            f'<div class="note-card">{_esc(note.content)}'
            f'<div class="case-meta">{_esc(note.author)} &middot; {_esc(note.date)}</div></div>',
            unsafe_allow_html=True,
        )
    with st.form("note_form", clear_on_submit=True):
        content = st.text_area("New note")
        author = st.text_input("Author", value="Eleanor Sterling")
        if st.form_submit_button("Add Note"):
            try:
                store.append_note(case.id, content, author)
                st.rerun()
            except InvalidInput as exc:
                st.error(exc.message)


def _render_financials(case: Case) -> None:
    rows = [
        {
            "Date": f.date,
            "Description": f.description,
            "Category": f.category,
            "Amount": f"{'+' if f.type == 'Income' else '-'}${f.amount:,.2f}",
        }
        for f in case.financials
    ]
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    st.markdown(f"**Net: {_money(case.net)}**")
    with st.form("financial_form", clear_on_submit=True):
        cols = st.columns(4)
        description = cols[0].text_input("Description")
        amount = cols[1].text_input("Amount")
        fin_type = cols[2].selectbox("Type", FINANCIAL_TYPES)
        category = cols[3].selectbox("Category", FINANCIAL_CATEGORIES)
        if st.form_submit_button("Add record"):
            try:
                store.append_financial_record(case.id, description, amount, fin_type, category)
                st.rerun()
            except InvalidInput as exc:
                st.error(exc.message)


def _render_chat(case: Case) -> None:
    st.markdown('<div class="section-label">Legal Associate</div>', unsafe_allow_html=True)
    messages: list[ChatMessage] = st.session_state.chats.setdefault(case.id, start_chat(case))
    for msg in messages:
        css = "chat-user" if msg.role == "user" else "chat-model"
        st.markdown(
            f'<div class="{css}">{_esc(msg.text)}'
            f'<div class="chat-time">{msg.timestamp.strftime("%H:%M")}</div></div>',
            unsafe_allow_html=True,
        )
    last = messages[-1] if messages else None
    if last is not None and last.role == "model":
        for i, suggestion in enumerate(last.suggestions):
            if st.button(suggestion, key=f"suggest_{case.id}_{len(messages)}_{i}"):
                with st.spinner("Thinking..."):
                    _send_chat(case, suggestion)
                st.rerun()
    with st.form("chat_form", clear_on_submit=True):
        text = st.text_input("Ask about this case")
        if st.form_submit_button("Send") and text.strip():
            with st.spinner("Thinking..."):
                _send_chat(case, text)
            st.rerun()


def _render_detail() -> None:
    case = store.selected
    if case is None:
        st.session_state.view = "dashboard"
        _render_dashboard()
        return
    if gate.locked:
        _render_lock_screen(case)
        return

    render_nav_bar(case.title)
    if st.button("← Dashboard"):
        st.session_state.view = "dashboard"
        st.rerun()
    st.markdown(
        f"{status_badge(case.status)} <span class='case-meta'>{_esc(case.id)} &middot; "
        f"{_esc(case.client)} &middot; {case.progress}% complete</span>",
        unsafe_allow_html=True,
    )

    main, side = st.columns([3, 2])
    with main:
        tabs = st.tabs([
            "Overview", "Documents", "People", "Notes", "Financials", "Risk Report", "Unclear Terms",
        ])
        with tabs[0]:
            _render_overview(case)
        with tabs[1]:
            _render_documents(case)
        with tabs[2]:
            _render_people(case)
        with tabs[3]:
            _render_notes(case)
        with tabs[4]:
            _render_financials(case)
        with tabs[5]:
            if st.session_state.report_error:
                st.error(st.session_state.report_error)
            elif st.session_state.report is None:
                st.caption("Run the risk analysis from the Documents tab.")
            else:
                _render_report(st.session_state.report)
        with tabs[6]:
            terms = st.session_state.unclear_terms
            if terms is None:
                st.caption("Run the ambiguity scan from the Documents tab.")
            elif not terms:
                st.caption("No unclear terms found.")
            else:
                for term in terms:
                    st.markdown(
                        f'<div class="term-item"><strong>{_esc(term.term)}</strong><br>'
                        f"<em>{_esc(term.context)}</em><br>{_esc(term.ambiguity)}<br>"
                        f"Suggested: {_esc(term.suggestion)}</div>",
                        unsafe_allow_html=True,
                    )
    with side:
        _render_chat(case)


# -- Quick analysis tool ------------------------------------------------------


def _render_tool() -> None:
    render_nav_bar("Quick Analysis")
    mode = st.radio("Mode", ["Document Analysis", "Legal Research"], horizontal=True)
    if st.button("Load sample contract"):
        st.session_state.tool_text = SAMPLE_CONTRACT
        st.rerun()
    label = "Paste document text" if mode == "Document Analysis" else "Research question"
    text = st.text_area(label, key="tool_text", height=260)

    if st.button("Analyze", type="primary"):
        st.session_state.tool_error = ""
        st.session_state.tool_report = None
        st.session_state.tool_research = None
        with st.spinner("Working..."):
            try:
                if mode == "Document Analysis":
                    st.session_state.tool_report = analyze_document(text)
                else:
                    st.session_state.tool_research = perform_research(text)
            except (InvalidInput, AnalysisFailed) as exc:
                st.session_state.tool_error = exc.message

    if st.session_state.tool_error:
        st.error(st.session_state.tool_error)
    if st.session_state.tool_report is not None:
        _render_report(st.session_state.tool_report)
    if st.session_state.tool_research is not None:
        _render_research(st.session_state.tool_research)


# -- Router -------------------------------------------------------------------

if st.session_state.view == "detail":
    _render_detail()
elif st.session_state.view == "tool":
    _render_tool()
else:
    _render_dashboard()
