"""Git operations for commitcraft."""

import subprocess
from pathlib import Path
from typing import List, Optional

from .exceptions import GitError


def find_git_repo_root(start_path: Optional[Path] = None) -> Optional[Path]:
    """Return the top-level Git repository directory for ``start_path``.

    Attempts ``git rev-parse --show-toplevel`` first so worktrees and
    submodules are handled correctly. Falls back to walking parent
    directories looking for a ``.git`` directory or file. Returns ``None``
    when no Git repository can be found starting from ``start_path``.
    """

    path = Path(start_path or Path.cwd()).expanduser().resolve(strict=False)
    if path.is_file():
        path = path.parent

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=path,
            capture_output=True,
            text=True,
            check=True,
        )
        top = result.stdout.strip()
        if top:
            return Path(top)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pass

    for candidate in (path, *path.parents):
        git_meta = candidate / ".git"
        if git_meta.exists():
            return candidate

    return None


class GitRepo:
    """Reads staged changes and repository metadata."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        root = find_git_repo_root(Path(repo_path) if repo_path else None)
        if root is None:
            raise GitError(
                f"Not inside a git repository: {repo_path or Path.cwd()}"
            )
        self.repo_path = root

    def _run_git_command(self, args: List[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def get_staged_diff(self) -> str:
        """Get the diff of staged changes (may be empty)."""
        return self._run_git_command(["diff", "--staged"])

    def list_staged_files(self) -> List[str]:
        output = self._run_git_command(["diff", "--staged", "--name-only"])
        return [line for line in output.splitlines() if line.strip()]

    def current_branch(self) -> str:
        return self._run_git_command(["rev-parse", "--abbrev-ref", "HEAD"])

    def repo_name(self) -> str:
        return self.repo_path.name

    def repo_context(self) -> str:
        """One-line repository description for the prompt, or "" if unknown."""
        try:
            branch = self.current_branch()
        except GitError:
            # Fresh repositories have no HEAD yet
            return f"Repository: {self.repo_name()}"
        return f"Repository: {self.repo_name()} (branch: {branch})"
