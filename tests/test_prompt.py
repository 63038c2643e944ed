from commitcraft.prompt import (
    DIFF_HEAD_CHARS,
    DIFF_TAIL_CHARS,
    TITLE_EXAMPLE,
    build_prompt,
)
from commitcraft.schema import COMMIT_TYPES, GenerationRequest

DIFF = "diff --git a/app.py b/app.py\n+print('hello')\n"


def _request(**kw):
    base = dict(diff_text=DIFF, model_id="m", api_key="k")
    base.update(kw)
    return GenerationRequest(**base)


def test_prompt_embeds_diff_and_types():
    prompt = build_prompt(_request())
    assert DIFF.strip() in prompt
    for commit_type in COMMIT_TYPES:
        assert commit_type in prompt
    assert "<type>[optional scope]: <description>" in prompt


def test_prompt_gives_numeric_title_guidance():
    prompt = build_prompt(_request())
    assert "at most 50 characters" in prompt
    assert f'"{TITLE_EXAMPLE}" = {len(TITLE_EXAMPLE)} characters' in prompt
    assert len(TITLE_EXAMPLE) == 24


def test_file_list_only_in_include_files_mode():
    files = ("src/a.py", "README.md")
    without = build_prompt(_request(file_list=files))
    assert "src/a.py" not in without
    with_files = build_prompt(_request(file_list=files, include_files=True))
    assert "FILES MODIFIED:" in with_files
    assert "- src/a.py\n- README.md" in with_files


def test_repo_context_is_included_when_present():
    prompt = build_prompt(_request(repo_context="Repository: demo (branch: main)"))
    assert "CONTEXT:\nRepository: demo (branch: main)" in prompt
    assert "CONTEXT:" not in build_prompt(_request())


def test_large_diff_is_windowed():
    diff = "H" * 10000 + "M" * 5000 + "T" * 3000
    prompt = build_prompt(_request(diff_text=diff))
    assert "H" * DIFF_HEAD_CHARS in prompt
    assert "T" * DIFF_TAIL_CHARS in prompt
    assert "M" * 100 not in prompt
    assert "\n...\n" in prompt


def test_prompt_never_contains_api_key():
    assert "sk-secret" not in build_prompt(_request(api_key="sk-secret"))
