from __future__ import annotations

from typing import Any

from ..prompt import SYSTEM_PROMPT
from ..schema import commit_json_schema
from .base import BaseDriver, HttpReply

# JSON Schema keywords the generateContent response_schema does not accept.
_UNSUPPORTED_SCHEMA_KEYS = {"$schema", "title", "additionalProperties", "default"}


def response_schema() -> dict[str, Any]:
    """Commit schema pruned to the OpenAPI subset Gemini understands."""

    def prune(node: Any) -> Any:
        if isinstance(node, list):
            return [prune(item) for item in node]
        if not isinstance(node, dict):
            return node
        out: dict[str, Any] = {}
        for key, value in node.items():
            if key in _UNSUPPORTED_SCHEMA_KEYS:
                continue
            if key == "properties":
                # Keys here are field names ("title"), not schema keywords.
                out[key] = {name: prune(prop) for name, prop in value.items()}
            else:
                out[key] = prune(value)
        return out

    return prune(commit_json_schema())


class GeminiDriver(BaseDriver):
    """Driver for Google's generateContent API in JSON response mode."""

    name = "gemini"
    default_endpoint = "https://generativelanguage.googleapis.com"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "system_instruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generation_config": {
                "temperature": 0.2,
                "candidate_count": 1,
                "response_mime_type": "application/json",
                "response_schema": response_schema(),
            },
        }

    def _send(self, prompt: str) -> HttpReply:
        url = f"{self.endpoint}/v1beta/models/{self.model_id}:generateContent"
        return self._post(
            url,
            self.build_payload(prompt),
            params={"key": self._api_key},
        )

    @staticmethod
    def _texts(reply: HttpReply) -> list[str]:
        if not isinstance(reply.data, dict):
            return []
        candidates = reply.data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            return []
        if not isinstance(candidates[0], dict):
            return []
        content = candidates[0].get("content") or {}
        if not isinstance(content, dict):
            return []
        parts = content.get("parts") or []
        return [
            str(part["text"])
            for part in parts
            if isinstance(part, dict) and part.get("text")
        ]

    def _structured_payload(self, response: HttpReply) -> Any:
        # JSON mode returns the object as the whole text of the first part.
        texts = self._texts(response)
        if not texts:
            return None
        return texts[0].strip()

    def _response_text(self, response: HttpReply) -> str:
        if response.data is None:
            return response.text
        return "\n".join(self._texts(response))
