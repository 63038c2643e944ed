"""Conventional-commit validation and normalisation."""

from __future__ import annotations

import re
import textwrap

from .exceptions import FormatViolationError
from .schema import (
    BODY_WRAP_WIDTH,
    BREAKING_MARKER,
    COMMIT_TYPES,
    MAX_TITLE_LENGTH,
    CommitMessage,
)

_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z]+)"
    r"(?:\((?P<scope>[^()]+)\))?"
    r"(?P<bang>!)?"
    r":\s*(?P<description>\S.*)$"
)
_MARKERS = (BREAKING_MARKER, "BREAKING-CHANGE:")


def _has_marker(body: str) -> bool:
    return any(line.lstrip().startswith(_MARKERS) for line in body.splitlines())


def validate_title(title: str) -> list[str]:
    """Return human-readable problems with ``title``; empty when valid."""
    problems: list[str] = []
    match = _HEADER_RE.match(title.strip())
    if not match:
        problems.append("Commit title must follow format: type(scope): description")
        return problems
    if match.group("type") not in COMMIT_TYPES:
        problems.append(
            "Invalid commit type '{}'. Valid types: {}".format(
                match.group("type"), ", ".join(COMMIT_TYPES)
            )
        )
    if len(title) > MAX_TITLE_LENGTH:
        problems.append(
            f"Commit title is too long (max {MAX_TITLE_LENGTH} characters)"
        )
    if match.group("description")[0].isupper():
        problems.append("Commit description should start with a lowercase letter")
    return problems


class CommitValidator:
    """Turn a raw candidate into a conformant CommitMessage.

    Repairs are limited to what cannot change the meaning of the message:
    whitespace, case of the type token, a trailing period, over-long
    titles (cut at a word boundary) and a missing breaking-change footer.
    Anything else is a FormatViolationError.
    """

    def __init__(
        self,
        max_title_length: int = MAX_TITLE_LENGTH,
        body_width: int = BODY_WRAP_WIDTH,
        strict_length: bool = False,
    ) -> None:
        self.max_title_length = max_title_length
        self.body_width = body_width
        self.strict_length = strict_length

    def normalize(self, candidate: CommitMessage) -> CommitMessage:
        title = re.sub(r"\s+", " ", candidate.title.strip())
        match = _HEADER_RE.match(title)
        if not match:
            raise FormatViolationError(
                f"Title lacks a conventional commit type prefix: {title[:80]!r}"
            )
        commit_type = match.group("type").lower()
        if commit_type not in COMMIT_TYPES:
            raise FormatViolationError(
                "Unknown commit type '{}'. Valid types: {}".format(
                    match.group("type"), ", ".join(COMMIT_TYPES)
                )
            )
        scope = match.group("scope")
        bang = match.group("bang") or ""
        prefix = commit_type + (f"({scope.strip()})" if scope else "") + bang + ": "
        description = match.group("description").strip().rstrip(".").rstrip()
        if not description:
            raise FormatViolationError("Commit description after colon is empty")
        title = self._fit_title(prefix, description)

        body = self._wrap_body(candidate.body.strip())
        breaking = candidate.breaking or bool(bang) or _has_marker(body)
        if breaking and not _has_marker(body):
            marker = f"{BREAKING_MARKER} {description}"
            body = f"{body}\n\n{marker}" if body else marker
            body = self._wrap_body(body)
        return CommitMessage(title=title, body=body, breaking=breaking)

    def _fit_title(self, prefix: str, description: str) -> str:
        title = prefix + description
        limit = self.max_title_length
        if len(title) <= limit:
            return title
        if self.strict_length:
            raise FormatViolationError(
                f"Commit title is {len(title)} characters (max {limit})"
            )
        if len(prefix) >= limit:
            raise FormatViolationError(
                f"Commit prefix {prefix.strip()!r} leaves no room for a description"
            )
        # Last space at or before the limit that still leaves a description
        cutoff = title.rfind(" ", len(prefix), limit + 1)
        if cutoff <= len(prefix):
            cutoff = limit
        shortened = title[:cutoff].rstrip().rstrip(".,;:-").rstrip()
        if len(shortened) <= len(prefix.rstrip()):
            shortened = title[:limit].rstrip()
        return shortened

    def _wrap_body(self, body: str) -> str:
        """Wrap body lines longer than the width; shorter lines are kept."""
        if not body:
            return body
        wrapped: list[str] = []
        for line in body.splitlines():
            line = line.rstrip()
            if len(line) <= self.body_width or line.lstrip().startswith("```"):
                wrapped.append(line)
                continue
            stripped = line.lstrip()
            indent = line[: len(line) - len(stripped)]
            bullet = re.match(r"^([-*•]|\d+[.)])\s+", stripped)
            subsequent = indent + (" " * len(bullet.group(0)) if bullet else "")
            wrapped.extend(
                textwrap.wrap(
                    line,
                    width=self.body_width,
                    subsequent_indent=subsequent,
                    break_long_words=False,
                    break_on_hyphens=False,
                )
            )
        return "\n".join(wrapped).strip()
