"""Text fallback parsing shared by all drivers.

Tier 2 assumes the provider's structured-output guarantee was only a hint:
first look for an embedded JSON object, then fall back to reading the
text as a plain commit message.
"""

from __future__ import annotations

import re
from typing import Optional

from ..schema import (
    COMMIT_TYPES,
    CommitMessage,
    ParsedCandidate,
    ParseTier,
    parse_payload,
)

SNIPPET_LENGTH = 200

_HEADER_RE = re.compile(
    r"^(" + "|".join(COMMIT_TYPES) + r")(\([^()]*\))?!?:\s*\S", re.IGNORECASE
)
_DECORATION = "-*• "


def iter_json_objects(text: str):
    """Yield every balanced ``{...}`` substring in order of appearance.

    Braces inside JSON strings are ignored. A brace that never closes is
    skipped and scanning resumes at the next one.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = -1
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
        if end != -1:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def _strip_fences(text: str) -> list[str]:
    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("```", "---", "===")):
            continue
        lines.append(line.rstrip())
    return lines


def heuristic_message(text: str) -> Optional[CommitMessage]:
    """Read free text as a commit message.

    The first line that looks like a ``type: description`` header becomes
    the title (or the first line when none does); the remaining non-empty
    lines become the body.
    """
    cleaned = text.strip()
    if (cleaned.startswith('"') and cleaned.endswith('"')) or (
        cleaned.startswith("'") and cleaned.endswith("'")
    ):
        cleaned = cleaned[1:-1].strip()
    lines = _strip_fences(cleaned)
    if not lines:
        return None
    header_index = 0
    for i, line in enumerate(lines):
        candidate = line.lstrip(_DECORATION).strip("`").strip()
        if _HEADER_RE.match(candidate):
            header_index = i
            break
    title = lines[header_index].lstrip(_DECORATION).strip("`").strip()
    if not title:
        return None
    body = "\n".join(line.strip() for line in lines[header_index + 1 :])
    return CommitMessage(title=title, body=body)


def fallback_parse(text: str) -> Optional[ParsedCandidate]:
    """Run the text tier: embedded JSON first, line heuristics last."""
    if not text or not text.strip():
        return None
    for chunk in iter_json_objects(text):
        message = parse_payload(chunk)
        if message is not None:
            return ParsedCandidate(message, ParseTier.EMBEDDED_JSON, text)
    # Text that is itself JSON but not our schema is not a commit message.
    if text.lstrip().startswith("{"):
        return None
    message = heuristic_message(text)
    if message is None:
        return None
    return ParsedCandidate(message, ParseTier.HEURISTIC, text)


def snippet(text: str, secret: str = "") -> str:
    """Short, credential-free excerpt of a raw response for diagnostics."""
    excerpt = redact(text.strip(), secret)
    if len(excerpt) > SNIPPET_LENGTH:
        excerpt = excerpt[:SNIPPET_LENGTH] + "…"
    return excerpt


def redact(text: str, secret: str) -> str:
    if secret and secret in text:
        return text.replace(secret, "***")
    return text
