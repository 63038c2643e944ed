"""Rendering and executing the ``git commit`` command for a generated message."""

from __future__ import annotations

import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from .exceptions import CommandError
from .schema import CommitMessage


def format_git_command(message: CommitMessage, review: bool = False) -> str:
    """Render the editable one-line shell command for ``message``."""
    parts = ["git", "commit"]
    if review:
        parts.append("-e")
    parts.extend(["-m", shlex.quote(message.title)])
    if message.body:
        parts.extend(["-m", shlex.quote(message.body)])
    return " ".join(parts)


def format_heredoc_command(message: CommitMessage, review: bool = False) -> str:
    """Render the command in a copy-paste friendly heredoc form."""
    review_flag = " -e" if review else ""
    text = message.to_git_message()
    if "\n" not in text:
        return f"git commit{review_flag} -m {shlex.quote(text)}"
    delimiter = "EOF"
    # A body line equal to the delimiter would end the heredoc early
    while delimiter in text.splitlines():
        delimiter += "_MSG"
    return f"git commit{review_flag} -F- <<'{delimiter}'\n{text}\n{delimiter}"


def edit_command(initial: str, prompt: str = "$ ") -> str:
    """Let the operator edit ``initial`` on a pre-filled input line."""
    import readline

    readline.set_startup_hook(lambda: readline.insert_text(initial))
    try:
        return input(prompt).strip()
    finally:
        readline.set_startup_hook()


def run_shell_command(command: str, cwd: Optional[Path] = None) -> str:
    """Run an operator-approved shell command and return its output."""
    completed = subprocess.run(
        command,
        shell=True,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        raise CommandError(
            f"Command failed ({completed.returncode}): "
            f"{(completed.stderr or completed.stdout).strip()}"
        )
    return completed.stdout


def commit_message(
    message: CommitMessage, cwd: Optional[Path] = None, review: bool = False
) -> str:
    """Commit the staged changes with ``message`` without going through a shell."""
    with tempfile.TemporaryDirectory(prefix="commitcraft-") as tmp:
        msg_file = Path(tmp) / "COMMIT_MSG"
        msg_file.write_text(message.to_git_message() + "\n")
        args = ["git", "commit"]
        if review:
            args.append("-e")
        args.extend(["-F", str(msg_file)])
        try:
            # The editor needs the terminal when reviewing
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=not review,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CommandError("Git command not found. Please install Git.") from exc
    if completed.returncode != 0:
        raise CommandError(
            f"git commit failed ({completed.returncode}): "
            f"{(completed.stderr or completed.stdout or '').strip()}"
        )
    return completed.stdout or ""
