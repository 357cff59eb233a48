"""Error taxonomy for the case console.

Auxiliary AI features (ambiguity scan, chat) never raise; they degrade to
empty defaults inside app.analysis.
"""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for errors surfaced to the presentation layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(ConsoleError, ValueError):
    """Required text or field was empty or malformed; nothing was attempted."""


class AnalysisFailed(ConsoleError):
    """A headline operation (document report, research) could not complete."""


class AuthMismatch(ConsoleError):
    """Submitted access code matched neither the case code nor the bypass code."""


class CaseNotFound(ConsoleError, KeyError):
    """No case with the requested id exists."""

    def __str__(self) -> str:
        return self.message
