from commitcraft.exceptions import (
    CommandError,
    CommitCraftError,
    ConfigError,
    FormatViolationError,
    GenerationError,
    GitError,
    InvalidInputError,
    ParseExhaustedError,
    ProviderUnavailableError,
)


def test_exceptions_hierarchy_and_str():
    # Given exception classes
    # When instantiating
    invalid = InvalidInputError("empty diff")
    unavailable = ProviderUnavailableError("gemini", "429", status_code=429)
    exhausted = ParseExhaustedError("anthropic", "no tool call")
    violation = FormatViolationError("no type prefix")

    # Then the four generation kinds share one base
    for err in (invalid, unavailable, exhausted, violation):
        assert isinstance(err, GenerationError)
        assert isinstance(err, CommitCraftError)
    # And collaborator errors stay outside the generation family
    for err in (ConfigError("cfg"), GitError("git"), CommandError("cmd")):
        assert isinstance(err, CommitCraftError)
        assert not isinstance(err, GenerationError)
    assert "empty diff" in str(invalid)
    assert "no type prefix" in str(violation)


def test_provider_unavailable_carries_reason_and_status():
    err = ProviderUnavailableError("openai", "429", status_code=429, detail="slow down")
    assert err.reason == "429"
    assert err.status_code == 429
    assert err.provider == "openai"
    assert str(err) == "openai unavailable: 429 (slow down)"


def test_provider_unavailable_timeout_has_no_status():
    err = ProviderUnavailableError("anthropic", "timeout")
    assert err.status_code is None
    assert str(err) == "anthropic unavailable: timeout"


def test_parse_exhausted_keeps_snippet():
    err = ParseExhaustedError("gemini", "I cannot help with that")
    assert err.snippet == "I cannot help with that"
    assert "I cannot help with that" in str(err)
