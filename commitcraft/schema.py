"""Commit message data contract shared by every provider driver."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

COMMIT_TYPES: tuple[str, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "test",
    "chore",
    "perf",
    "ci",
    "build",
)

MAX_TITLE_LENGTH = 50
BODY_WRAP_WIDTH = 72
BREAKING_MARKER = "BREAKING CHANGE:"

# Name of the tool / function every structured-output contract declares.
TOOL_NAME = "generate_commit"
TOOL_DESCRIPTION = (
    "Generate a conventional commit message with a title, an optional "
    "body and a breaking-change flag"
)


class CommitMessage(BaseModel):
    """A conventional commit message.

    Deserialisation is strict: unknown keys, a missing ``title`` or values
    of the wrong JSON type are rejected instead of defaulted.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    title: str
    body: str = ""
    breaking: bool = False

    def to_git_message(self) -> str:
        if not self.body:
            return self.title
        return f"{self.title}\n\n{self.body}"

    @property
    def commit_type(self) -> str:
        head = self.title.split(":", 1)[0]
        return head.split("(", 1)[0].rstrip("!")


def commit_json_schema() -> dict[str, Any]:
    """Return the JSON Schema of the payload providers are asked to produce."""
    schema = CommitMessage.model_json_schema()
    props = schema.get("properties", {})
    props.get("title", {})["description"] = (
        "Conventional commit header, <type>[(scope)]: <description>, "
        f"at most {MAX_TITLE_LENGTH} characters"
    )
    props.get("body", {})["description"] = (
        "What changed and why, in imperative mood; may be empty"
    )
    props.get("breaking", {})["description"] = (
        "True only if the change is API-incompatible"
    )
    return schema


def parse_payload(payload: Any) -> CommitMessage | None:
    """Strictly build a CommitMessage from a dict or a JSON string.

    Returns None when the payload is not exactly the commit schema.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, dict):
        return None
    try:
        return CommitMessage.model_validate(payload)
    except ValidationError:
        return None


class ParseTier(str, Enum):
    """Which parse path produced a candidate."""

    STRUCTURED = "structured"
    EMBEDDED_JSON = "embedded_json"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class ParsedCandidate:
    """Unvalidated output of one driver call."""

    message: CommitMessage
    tier: ParseTier
    raw_text: str = ""


@dataclass(frozen=True)
class GenerationRequest:
    """Everything a driver needs for one generation.

    ``api_key`` is excluded from ``repr`` so the request can be logged.
    """

    diff_text: str
    model_id: str
    api_key: str = field(repr=False)
    file_list: tuple[str, ...] = ()
    include_files: bool = False
    repo_context: str = ""
