from __future__ import annotations

from typing import Any

import openai
from openai import OpenAI

from ..exceptions import ProviderUnavailableError
from ..prompt import SYSTEM_PROMPT
from ..schema import TOOL_DESCRIPTION, TOOL_NAME, commit_json_schema
from .base import BaseDriver
from .parsing import redact, snippet


class OpenAIDriver(BaseDriver):
    """Driver encapsulating OpenAI / OpenAI-compatible chat completions.

    The commit schema is declared as a single function tool and the model
    is forced to call it. The SDK's own retry loop is disabled so that one
    ``generate`` call is one HTTP request.
    """

    name = "openai"
    default_endpoint = "https://api.openai.com/v1"

    def _client(self) -> Any:
        # Module-level OpenAI name so tests can monkeypatch the factory
        return OpenAI(
            api_key=self._api_key,
            base_url=self.endpoint,
            timeout=self.timeout,
            max_retries=0,
        )

    def build_request(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model_id,
            "temperature": 0.2,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": TOOL_NAME,
                        "description": TOOL_DESCRIPTION,
                        "parameters": commit_json_schema(),
                    },
                }
            ],
            "tool_choice": {"type": "function", "function": {"name": TOOL_NAME}},
        }

    def _send(self, prompt: str) -> Any:
        client = self._client()
        try:
            return client.chat.completions.create(**self.build_request(prompt))
        except openai.APITimeoutError as e:
            raise ProviderUnavailableError(self.name, "timeout") from e
        except openai.APIStatusError as e:
            status = int(e.status_code)
            raise ProviderUnavailableError(
                self.name,
                str(status),
                status_code=status,
                detail=snippet(str(e.message), self._api_key),
            ) from e
        except openai.APIConnectionError as e:
            reason = redact(str(e), self._api_key)
            raise ProviderUnavailableError(
                self.name, f"network error: {reason}"
            ) from e

    @staticmethod
    def _message(response: Any) -> Any:
        try:
            choice0 = response.choices[0]
        except (AttributeError, IndexError, TypeError):
            return None
        return getattr(choice0, "message", None)

    def _structured_payload(self, response: Any) -> Any:
        message = self._message(response)
        for call in getattr(message, "tool_calls", None) or []:
            function = getattr(call, "function", None)
            if getattr(function, "name", None) == TOOL_NAME:
                return getattr(function, "arguments", None)
        return None

    def _response_text(self, response: Any) -> str:
        message = self._message(response)
        if message is None:
            return ""
        msg_content = getattr(message, "content", "")
        if isinstance(msg_content, str):
            return msg_content
        if isinstance(msg_content, list):
            # Newer SDKs may return content as a list of fragments
            fragments: list[str] = []
            for part in msg_content:
                if isinstance(part, dict):
                    txt = part.get("text") or part.get("content") or ""
                else:
                    txt = getattr(part, "text", "") or getattr(part, "content", "")
                if txt:
                    fragments.append(str(txt))
            return "".join(fragments)
        return ""
