import pytest

from commitcraft.exceptions import ParseExhaustedError, ProviderUnavailableError
from commitcraft.providers import AnthropicDriver
from commitcraft.schema import GenerationRequest, ParseTier

MODEL = "claude-3-haiku-20240307"


def _request():
    return GenerationRequest(diff_text="+retry\n", model_id=MODEL, api_key="a-key")


def test_tool_use_block_is_structured(http_recorder):
    http_recorder.reply(
        200,
        {
            "content": [
                {"type": "text", "text": "Calling the tool."},
                {
                    "type": "tool_use",
                    "id": "toolu_1",
                    "name": "generate_commit",
                    "input": {
                        "title": "feat(cli): add retry flag",
                        "body": "Adds --retry.",
                        "breaking": False,
                    },
                },
            ]
        },
    )

    candidate = AnthropicDriver(MODEL, "a-key").generate_candidate(_request())

    assert candidate.tier is ParseTier.STRUCTURED
    assert candidate.message.title == "feat(cli): add retry flag"
    assert candidate.message.body == "Adds --retry."


def test_request_shape(http_recorder):
    http_recorder.reply(
        200,
        {"content": [{"type": "tool_use", "name": "generate_commit", "input": {"title": "fix: x"}}]},
    )

    AnthropicDriver(MODEL, "a-key").generate(_request())

    (call,) = http_recorder.calls
    assert call.url == "https://api.anthropic.com/v1/messages"
    assert call.headers["x-api-key"] == "a-key"
    assert call.headers["anthropic-version"] == "2023-06-01"
    assert call.json["max_tokens"] == 1024
    assert call.json["tool_choice"] == {"type": "tool", "name": "generate_commit"}
    assert call.json["tools"][0]["input_schema"]["required"] == ["title"]
    assert call.json["messages"][0]["role"] == "user"


def test_custom_endpoint(http_recorder):
    http_recorder.reply(200, {"content": [{"type": "text", "text": "fix: x"}]})

    AnthropicDriver(MODEL, "a-key", endpoint="http://localhost:8080/").generate(
        _request()
    )

    assert http_recorder.calls[0].url == "http://localhost:8080/v1/messages"


def test_text_block_fallback(http_recorder):
    http_recorder.reply(
        200,
        {"content": [{"type": "text", "text": "style: format imports\n\nRuns isort."}]},
    )

    candidate = AnthropicDriver(MODEL, "a-key").generate_candidate(_request())

    assert candidate.tier is ParseTier.HEURISTIC
    assert candidate.message.title == "style: format imports"
    assert candidate.message.body == "Runs isort."


def test_rate_limited(http_recorder):
    http_recorder.reply(429, {"type": "error", "error": {"type": "rate_limit_error"}})

    with pytest.raises(ProviderUnavailableError) as excinfo:
        AnthropicDriver(MODEL, "a-key").generate(_request())

    assert excinfo.value.status_code == 429


def test_invalid_tool_input_without_text_exhausts(http_recorder):
    http_recorder.reply(
        200,
        {"content": [{"type": "tool_use", "name": "generate_commit", "input": {"body": "x"}}]},
    )

    with pytest.raises(ParseExhaustedError) as excinfo:
        AnthropicDriver(MODEL, "a-key").generate(_request())

    assert excinfo.value.provider == "anthropic"
