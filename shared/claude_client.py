"""Thin wrapper around the Anthropic SDK for the case console.

One call per request: an optional JSON shape is declared in the system
prompt, and grounded requests enable the server-side web search tool so the
reply carries (title, url) citation candidates alongside the text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
_MODEL = "claude-sonnet-4-5-20250929"
_WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


class ClaudeError(RuntimeError):
    """The model capability could not produce a reply."""


@dataclass
class ModelReply:
    """Text returned by Claude plus any citation candidates."""

    text: str
    sources: list[dict[str, str]] = field(default_factory=list)


def _load_env() -> dict:
    from dotenv import dotenv_values

    return dotenv_values(_ENV_PATH)


def get_model_name() -> str:
    """Model used for every console call. Overridable with VERITAS_MODEL."""
    return _load_env().get("VERITAS_MODEL") or _MODEL


def _schema_instruction(response_schema: dict) -> str:
    return (
        "\n\nRespond with a single JSON object and nothing else, with no commentary "
        "and no markdown fences. The object must conform to this JSON Schema:\n"
        + json.dumps(response_schema, indent=2)
    )


def _collect_sources(content: list[Any]) -> list[dict[str, str]]:
    """Pull (title, url) pairs from search result blocks and text citations."""
    sources: list[dict[str, str]] = []
    for block in content:
        block_type = getattr(block, "type", "")
        if block_type == "web_search_tool_result":
            results = getattr(block, "content", None)
            if isinstance(results, list):
                for result in results:
                    sources.append({
                        "title": getattr(result, "title", "") or "",
                        "uri": getattr(result, "url", "") or "",
                    })
        elif block_type == "text":
            for citation in getattr(block, "citations", None) or []:
                url = getattr(citation, "url", None)
                if url:
                    sources.append({
                        "title": getattr(citation, "title", "") or "",
                        "uri": url,
                    })
    return sources


def _log_usage(message: Any, model: str, tool_name: str, operation: str) -> None:
    try:
        from shared.usage_tracker import estimate_cost, log_api_call

        inp = message.usage.input_tokens
        out = message.usage.output_tokens
        server_use = getattr(message.usage, "server_tool_use", None)
        searches = getattr(server_use, "web_search_requests", 0) or 0
        log_api_call(
            service="anthropic",
            tool=tool_name or "unknown",
            operation=operation or "generate",
            model=model,
            input_tokens=inp,
            output_tokens=out,
            estimated_cost_usd=estimate_cost(model, inp, out, searches),
            details=f"web_searches={searches}" if searches else "",
        )
    except Exception:
        pass  # never let usage logging break a model call


def generate_reply(
    system_prompt: str,
    user_message: str,
    *,
    history: list[dict] | None = None,
    response_schema: dict | None = None,
    grounded_search: bool = False,
    max_tokens: int = 4096,
    tool_name: str = "case-console",
    operation: str = "",
) -> ModelReply:
    """Send one request to Claude and return its reply.

    *history* is a list of prior {"role": "user"|"assistant", "content": str}
    turns placed before *user_message*. Raises ClaudeError when the API key
    is missing or the SDK call fails.
    """
    import anthropic

    api_key = _load_env().get("ANTHROPIC_API_KEY", "")
    if not api_key:
        raise ClaudeError(
            "ANTHROPIC_API_KEY not found in .env. "
            "Add it to the repository .env file to enable AI analysis."
        )

    system = system_prompt
    if response_schema is not None:
        system += _schema_instruction(response_schema)

    messages = list(history or []) + [{"role": "user", "content": user_message}]
    kwargs: dict[str, Any] = {
        "model": get_model_name(),
        "max_tokens": max_tokens,
        "system": system,
        "messages": messages,
    }
    if grounded_search:
        kwargs["tools"] = [_WEB_SEARCH_TOOL]

    client = anthropic.Anthropic(api_key=api_key)
    try:
        message = client.messages.create(**kwargs)
    except anthropic.APIError as exc:
        raise ClaudeError(f"Claude request failed: {exc}") from exc

    _log_usage(message, kwargs["model"], tool_name, operation)

    text = "".join(
        block.text for block in message.content if getattr(block, "type", "") == "text"
    )
    sources = _collect_sources(message.content) if grounded_search else []
    return ModelReply(text=text, sources=sources)
