import subprocess

import pytest

from commitcraft.exceptions import GitError
from commitcraft.git import GitRepo, find_git_repo_root


def _stage(repo, name, content):
    (repo / name).write_text(content)
    subprocess.run(["git", "add", name], cwd=repo, check=True)


def test_staged_diff_and_files(git_repo):
    _stage(git_repo, "hello.py", "print('hello')\n")

    repo = GitRepo(str(git_repo))

    assert "+print('hello')" in repo.get_staged_diff()
    assert repo.list_staged_files() == ["hello.py"]


def test_nothing_staged_gives_empty_diff(git_repo):
    (git_repo / "untracked.txt").write_text("x\n")
    assert GitRepo(str(git_repo)).get_staged_diff() == ""


def test_root_is_found_from_subdirectory(git_repo):
    sub = git_repo / "pkg" / "mod"
    sub.mkdir(parents=True)
    assert find_git_repo_root(sub) == git_repo.resolve()


def test_repo_context_before_and_after_first_commit(git_repo):
    repo = GitRepo(str(git_repo))
    assert repo.repo_context() == "Repository: repo"

    _stage(git_repo, "a.txt", "a\n")
    subprocess.run(["git", "commit", "-q", "-m", "chore: init"], cwd=git_repo, check=True)

    branch = repo.current_branch()
    assert branch
    assert repo.repo_context() == f"Repository: repo (branch: {branch})"


def test_outside_a_repository(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()
    with pytest.raises(GitError, match="Not inside a git repository"):
        GitRepo(str(plain))
