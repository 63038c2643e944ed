from __future__ import annotations

from typing import Any

from ..prompt import SYSTEM_PROMPT
from ..schema import TOOL_DESCRIPTION, TOOL_NAME, commit_json_schema
from .base import BaseDriver, HttpReply

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicDriver(BaseDriver):
    """Driver handling Anthropic API calls (messages endpoint, tool use)."""

    name = "anthropic"
    default_endpoint = "https://api.anthropic.com"
    max_tokens = 1024

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model_id,
            "max_tokens": self.max_tokens,
            "temperature": 0.2,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
            "tools": [
                {
                    "name": TOOL_NAME,
                    "description": TOOL_DESCRIPTION,
                    "input_schema": commit_json_schema(),
                }
            ],
            "tool_choice": {"type": "tool", "name": TOOL_NAME},
        }

    def _send(self, prompt: str) -> HttpReply:
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        return self._post(
            self.endpoint + "/v1/messages",
            self.build_payload(prompt),
            headers=headers,
        )

    @staticmethod
    def _blocks(reply: HttpReply) -> list[dict[str, Any]]:
        if not isinstance(reply.data, dict):
            return []
        content = reply.data.get("content") or []
        if not isinstance(content, list):
            return []
        return [block for block in content if isinstance(block, dict)]

    def _structured_payload(self, response: HttpReply) -> Any:
        for block in self._blocks(response):
            if block.get("type") == "tool_use" and block.get("name") == TOOL_NAME:
                return block.get("input")
        return None

    def _response_text(self, response: HttpReply) -> str:
        if response.data is None:
            return response.text
        texts = [
            str(block.get("text", ""))
            for block in self._blocks(response)
            if block.get("type") == "text"
        ]
        return "\n".join(filter(None, texts))
