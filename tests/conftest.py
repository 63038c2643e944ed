import subprocess
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

PROVIDER_KEY_ENVS = (
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_API_KEY",
    "COMMITCRAFT_PROVIDER",
    "COMMITCRAFT_MODEL",
    "COMMITCRAFT_REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in PROVIDER_KEY_ENVS:
        monkeypatch.delenv(name, raising=False)
    config_home = tmp_path / ".commitcraft"
    monkeypatch.setenv("COMMITCRAFT_CONFIG_HOME", str(config_home))
    return config_home


# Ensure no real provider calls escape during tests that don't explicitly
# install a recorder.
@pytest.fixture(autouse=True)
def _no_network(monkeypatch):
    def fake_post(url, *args, **kwargs):  # noqa: ARG001
        raise AssertionError(f"unexpected network call to {url}")

    monkeypatch.setattr(httpx, "post", fake_post)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):  # noqa: D401
        if self._payload is None:
            raise ValueError("response body is not JSON")
        return self._payload

    @property
    def text(self):  # noqa: D401
        if self._text is not None:
            return self._text
        return "" if self._payload is None else str(self._payload)


class HttpRecorder:
    """Stand-in for ``httpx.post`` that records calls and replays replies."""

    def __init__(self):
        self.calls = []
        self._replies = []

    def reply(self, status_code=200, payload=None, text=None):
        self._replies.append(FakeResponse(status_code, payload, text))
        return self

    def fail(self, exc):
        self._replies.append(exc)
        return self

    def __call__(self, url, headers=None, params=None, json=None, timeout=None, **_kw):
        self.calls.append(
            SimpleNamespace(
                url=url, headers=headers, params=params, json=json, timeout=timeout
            )
        )
        if not self._replies:
            raise AssertionError("no reply queued for " + url)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def http_recorder(monkeypatch) -> HttpRecorder:
    recorder = HttpRecorder()
    monkeypatch.setattr(httpx, "post", recorder)
    return recorder


class OpenAIStub:
    """Replaces the OpenAI client factory used by the OpenAI driver."""

    def __init__(self):
        self.client_kwargs = []
        self.calls = []
        self._replies = []

    def reply(self, response):
        self._replies.append(response)
        return self

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if not self._replies:
            raise AssertionError("no OpenAI reply queued")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def __call__(self, **kwargs):
        self.client_kwargs.append(kwargs)
        completions = SimpleNamespace(create=self._create)
        return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def openai_stub(monkeypatch) -> OpenAIStub:
    stub = OpenAIStub()
    monkeypatch.setattr("commitcraft.providers.openai_driver.OpenAI", stub)
    return stub


def chat_completion(arguments=None, content=None, name="generate_commit"):
    """Build a chat-completions response object shaped like the SDK's."""
    tool_calls = None
    if arguments is not None:
        tool_calls = [
            SimpleNamespace(
                id="call_1",
                type="function",
                function=SimpleNamespace(name=name, arguments=arguments),
            )
        ]
    message = SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(index=0, finish_reason="stop", message=message)]
    )


@pytest.fixture
def git_repo(tmp_path, monkeypatch) -> Path:
    for var, value in {
        "GIT_AUTHOR_NAME": "Test User",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test User",
        "GIT_COMMITTER_EMAIL": "test@example.com",
    }.items():
        monkeypatch.setenv(var, value)
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    subprocess.run(
        ["git", "config", "commit.gpgsign", "false"], cwd=repo, check=True
    )
    return repo


@pytest.fixture
def make_completion():
    return chat_completion
