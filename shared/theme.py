"""Centralized CSS and navigation bar for the Veritas console.

Import `render_theme_css` and `render_nav_bar` instead of inlining styles in
each page.
"""

from __future__ import annotations

import html as html_mod

import streamlit as st

# ---------------------------------------------------------------------------
# Shared CSS
# ---------------------------------------------------------------------------

_BASE_CSS = """\
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&family=Merriweather:wght@700&display=swap');

/* Hide Streamlit chrome */
#MainMenu, footer,
div[data-testid="stToolbar"] { display: none !important; }

.stApp {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
}

/* Navigation bar */
.nav-bar {
    display: flex;
    align-items: center;
    padding: 10px 4px;
    margin: -1rem 0 1.2rem 0;
    border-bottom: 2px solid #8b1a2b;
}
.nav-title {
    flex: 1;
    font-family: 'Merriweather', serif;
    font-size: 1.2rem;
    font-weight: 700;
    color: #1f2937;
}
.nav-firm {
    font-family: 'Inter', sans-serif;
    font-weight: 400;
    color: #86868b;
    font-size: 0.85rem;
    margin-left: 8px;
}

/* Section labels */
.section-label {
    font-size: 0.78rem;
    font-weight: 600;
    color: #6b7280;
    text-transform: uppercase;
    letter-spacing: 0.06em;
    margin: 12px 0 4px;
}

/* Metric tiles */
.metric-tile {
    background: #fff;
    border: 1px solid #e5e7eb;
    border-radius: 4px;
    padding: 14px 18px;
}
.metric-label { font-size: 0.75rem; color: #6b7280; text-transform: uppercase; letter-spacing: 0.05em; }
.metric-value { font-size: 1.5rem; font-weight: 700; color: #111827; }
.metric-value.negative { color: #b91c1c; }

/* Case card */
.case-card {
    background: #fff;
    border: 1px solid #e5e7eb;
    border-top: 3px solid #f3f4f6;
    border-radius: 4px;
    padding: 14px 18px;
    margin-bottom: 10px;
}
.case-card:hover { border-top-color: #8b1a2b; }
.case-id { font-size: 0.72rem; font-weight: 700; color: #9ca3af; letter-spacing: 0.08em; }
.case-title { font-family: 'Merriweather', serif; font-size: 1.02rem; color: #111827; margin: 2px 0 6px; }
.case-desc { font-size: 0.85rem; color: #4b5563; }
.case-meta { font-size: 0.75rem; color: #6b7280; margin-top: 6px; }

/* Status and severity badges */
.badge {
    display: inline-block;
    padding: 1px 8px;
    border-radius: 3px;
    font-size: 0.7rem;
    font-weight: 700;
    text-transform: uppercase;
    letter-spacing: 0.05em;
}
.badge-active, .badge-low { background: #ecfdf5; color: #047857; }
.badge-pending, .badge-medium { background: #fffbeb; color: #b45309; }
.badge-archived { background: #f3f4f6; color: #4b5563; }
.badge-high { background: #fef2f2; color: #b91c1c; }

/* Lock screen */
.lock-card {
    max-width: 420px;
    margin: 6vh auto 1rem;
    padding: 2rem;
    background: #fff;
    border: 1px solid #374151;
    border-top: 6px solid #8b1a2b;
    text-align: center;
}
.lock-title { font-family: 'Merriweather', serif; font-size: 1.3rem; color: #111827; }
.lock-ref { font-size: 0.8rem; color: #6b7280; }

/* Report blocks */
.risk-item, .term-item {
    border-left: 3px solid #e5e7eb;
    padding: 6px 12px;
    margin-bottom: 10px;
}
.risk-item.high { border-left-color: #b91c1c; }
.risk-item.medium { border-left-color: #d97706; }
.risk-item.low { border-left-color: #059669; }
.score-ring {
    font-size: 2.2rem;
    font-weight: 800;
    color: #8b1a2b;
}

/* Chat */
.chat-user, .chat-model {
    padding: 8px 12px;
    border-radius: 6px;
    margin-bottom: 6px;
    font-size: 0.9rem;
}
.chat-user { background: #8b1a2b; color: #fff; margin-left: 15%; }
.chat-model { background: #f3f4f6; color: #111827; margin-right: 15%; }
.chat-time { font-size: 0.68rem; opacity: 0.7; }

/* Note card */
.note-card {
    background: #fefce8;
    border: 1px solid #fde68a;
    padding: 12px 16px;
    margin-bottom: 10px;
    font-family: 'Merriweather', serif;
    font-size: 0.9rem;
}
"""


def render_theme_css(extra_css: str = "") -> None:
    """Inject the shared stylesheet. Pass *extra_css* for page-specific rules."""
    css = _BASE_CSS
    if extra_css:
        css += "\n" + extra_css
    st.markdown(f"<style>\n{css}\n</style>", unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Navigation bar
# ---------------------------------------------------------------------------

def render_nav_bar(page_title: str, firm_name: str = "Veritas Legal") -> None:
    """Render the console navigation bar with the page title."""
    st.markdown(
        f'<div class="nav-bar">'
        f'    <div class="nav-title">{html_mod.escape(page_title)}'
        f'<span class="nav-firm">&mdash; {html_mod.escape(firm_name)}</span></div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def status_badge(status: str) -> str:
    """HTML badge for a case status or risk severity."""
    return f'<span class="badge badge-{html_mod.escape(status.lower())}">{html_mod.escape(status)}</span>'
