"""Model-call usage tracking for the case console.

Logs every Claude call with its operation, token counts and estimated cost.
Provides the monthly aggregation shown on the console dashboard.

Data stored in data/config/api-usage.json (list of entries).
Entries older than 90 days are trimmed on write.
"""

from __future__ import annotations

import json
from collections import defaultdict
from datetime import datetime, timedelta
from pathlib import Path

_CONFIG_DIR = Path(__file__).resolve().parent.parent / "data" / "config"
_USAGE_FILE = _CONFIG_DIR / "api-usage.json"

_DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

# Pricing per million tokens (USD)
PRICING = {
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
}

# Web search tool: $10 per 1,000 searches
WEB_SEARCH_PRICE_PER_CALL = 0.01


def _load_entries() -> list[dict]:
    if not _USAGE_FILE.exists():
        return []
    try:
        entries = json.loads(_USAGE_FILE.read_text())
    except (json.JSONDecodeError, OSError):
        return []
    return entries if isinstance(entries, list) else []


def _save_entries(entries: list[dict]) -> None:
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    cutoff = (datetime.now() - timedelta(days=90)).isoformat()
    entries = [e for e in entries if e.get("timestamp", "") >= cutoff]
    _USAGE_FILE.write_text(json.dumps(entries, indent=2, ensure_ascii=False))


def estimate_cost(
    model: str,
    input_tokens: int,
    output_tokens: int,
    web_searches: int = 0,
) -> float:
    """Estimate USD cost for a Claude call. Unknown models price as Sonnet."""
    prices = PRICING.get(model, PRICING[_DEFAULT_MODEL])
    token_cost = (input_tokens * prices["input"] + output_tokens * prices["output"]) / 1_000_000
    return token_cost + web_searches * WEB_SEARCH_PRICE_PER_CALL


def log_api_call(
    service: str,
    tool: str,
    operation: str,
    *,
    model: str = "",
    input_tokens: int = 0,
    output_tokens: int = 0,
    estimated_cost_usd: float = 0.0,
    details: str = "",
) -> None:
    """Append a single API call to the usage log."""
    entries = _load_entries()
    entries.append({
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "service": service,
        "tool": tool,
        "operation": operation,
        "model": model,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "estimated_cost_usd": round(estimated_cost_usd, 6),
        "details": details,
    })
    _save_entries(entries)


def get_month_entries(year: int | None = None, month: int | None = None) -> list[dict]:
    """Return all entries for a given month (defaults to current month)."""
    now = datetime.now()
    y = year or now.year
    m = month or now.month
    prefix = f"{y}-{m:02d}"
    return [e for e in _load_entries() if e.get("timestamp", "").startswith(prefix)]


def get_operation_breakdown() -> list[dict]:
    """Return current month's usage grouped by operation, costliest first."""
    ops: dict[str, dict] = defaultdict(lambda: {"calls": 0, "tokens": 0, "cost_usd": 0.0})
    for e in get_month_entries():
        op = e.get("operation", "unknown")
        ops[op]["calls"] += 1
        ops[op]["tokens"] += e.get("input_tokens", 0) + e.get("output_tokens", 0)
        ops[op]["cost_usd"] += e.get("estimated_cost_usd", 0.0)
    return [{"operation": k, **v} for k, v in sorted(ops.items(), key=lambda x: -x[1]["cost_usd"])]
