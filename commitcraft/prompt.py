"""Provider-agnostic prompt construction."""

from __future__ import annotations

from .schema import COMMIT_TYPES, MAX_TITLE_LENGTH, GenerationRequest

# Diffs above this size are sent as a head + tail window.
DIFF_PROMPT_LIMIT = 12000
DIFF_HEAD_CHARS = 8000
DIFF_TAIL_CHARS = 2000

TITLE_EXAMPLE = "fix: resolve memory leak"

SYSTEM_PROMPT = (
    "You are an expert programmer who writes git commit messages following "
    "the Conventional Commits specification "
    "(https://www.conventionalcommits.org/en/v1.0.0/). "
    "Respond only with the requested commit message object."
)


def _window_diff(diff: str) -> str:
    if len(diff) <= DIFF_PROMPT_LIMIT:
        return diff
    head = diff[:DIFF_HEAD_CHARS]
    tail = diff[-DIFF_TAIL_CHARS:]
    return head + "\n...\n" + tail


def build_prompt(request: GenerationRequest) -> str:
    """Construct the instruction text sent to every provider."""
    example_len = len(TITLE_EXAMPLE)
    prompt_parts = [
        "Generate a conventional commit message for the staged changes below.",
        "",
        "TITLE RULES:",
        "- MUST use format: <type>[optional scope]: <description>",
        "- type MUST be one of: " + ", ".join(COMMIT_TYPES),
        "- lowercase type, imperative mood, no trailing period",
        f"- CRITICAL: the whole title is at most {MAX_TITLE_LENGTH} characters,"
        " counting the type, scope, colon and spaces",
        f'- Example: "{TITLE_EXAMPLE}" = {example_len} characters, '
        f"{MAX_TITLE_LENGTH - example_len} under the limit",
        "",
        "BODY RULES:",
        "- explain what changed and why, in imperative mood",
        "- wrap lines at 72 characters",
        "- leave the body empty for trivial changes",
        "",
        "Set breaking to true only if the change is API-incompatible.",
    ]
    if request.repo_context:
        prompt_parts.extend(["", "CONTEXT:", request.repo_context])
    if request.include_files and request.file_list:
        prompt_parts.extend(["", "FILES MODIFIED:"])
        prompt_parts.extend(f"- {path}" for path in request.file_list)
    prompt_parts.extend(
        [
            "",
            "DIFF:",
            "```diff",
            _window_diff(request.diff_text),
            "```",
        ]
    )
    return "\n".join(prompt_parts)
