"""Custom exceptions for commitcraft."""

from __future__ import annotations

from typing import Optional


class CommitCraftError(Exception):
    """Base exception for commitcraft."""


class GenerationError(CommitCraftError):
    """Base for failures of a single commit-message generation."""


class InvalidInputError(GenerationError):
    """Raised before any network call when the request is unusable."""


class ProviderUnavailableError(GenerationError):
    """Raised on non-2xx responses, transport failures and timeouts.

    ``reason`` is the HTTP status as text (``"429"``) or a short transport
    reason (``"timeout"``); it never contains the credential.
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ) -> None:
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        self.detail = detail
        message = f"{provider} unavailable: {reason}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ParseExhaustedError(GenerationError):
    """Raised when neither the structured nor the text parse produced a message."""

    def __init__(self, provider: str, snippet: str) -> None:
        self.provider = provider
        self.snippet = snippet
        super().__init__(
            f"{provider} response could not be parsed into a commit message: "
            f"{snippet!r}"
        )


class FormatViolationError(GenerationError):
    """Raised when a parsed candidate cannot be normalised into a conventional commit."""


class ConfigError(CommitCraftError):
    """Raised for configuration-related errors."""


class GitError(CommitCraftError):
    """Raised for Git-related errors."""


class CommandError(CommitCraftError):
    """Raised when the commit command cannot be executed."""
