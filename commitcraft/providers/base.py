from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..exceptions import ParseExhaustedError, ProviderUnavailableError
from ..prompt import build_prompt
from ..schema import (
    CommitMessage,
    GenerationRequest,
    ParsedCandidate,
    ParseTier,
    parse_payload,
)
from .parsing import fallback_parse, redact, snippet

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class HttpReply:
    """Body of a successful HTTP exchange: decoded JSON (if any) and raw text."""

    data: Any
    text: str


class BaseDriver(ABC):
    """Abstract base for provider-specific commit generation.

    Each driver encapsulates one provider's request shape, authentication
    scheme and response layout. A driver is a value object: it is built
    per call from ``model_id`` and ``api_key`` and holds no state that
    outlives a single ``generate`` call. Exactly one outbound request is
    made per call; retries are the caller's decision.
    """

    name: str = ""
    default_endpoint: str = ""

    def __init__(
        self,
        model_id: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: Optional[str] = None,
    ) -> None:
        self.model_id = model_id
        self._api_key = api_key
        self.timeout = timeout
        self.endpoint = (endpoint or self.default_endpoint).rstrip("/")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_id={self.model_id!r})"

    def generate(self, request: GenerationRequest) -> CommitMessage:
        """Return the parsed (not yet validated) commit message."""
        return self.generate_candidate(request).message

    def generate_candidate(self, request: GenerationRequest) -> ParsedCandidate:
        """Send one request and run the structured then text parse tiers."""
        prompt = build_prompt(request)
        logger.debug(
            "%s: sending prompt model=%s prompt_len=%d",
            self.name,
            self.model_id,
            len(prompt),
        )
        response = self._send(prompt)

        payload = self._structured_payload(response)
        if payload is not None:
            message = parse_payload(payload)
            if message is not None:
                logger.debug("%s: parsed structured payload", self.name)
                return ParsedCandidate(message, ParseTier.STRUCTURED)
            logger.debug(
                "%s: structured payload rejected by schema; trying text", self.name
            )

        raw_text = self._response_text(response)
        candidate = fallback_parse(raw_text)
        if candidate is None:
            diagnostic = raw_text or (str(payload) if payload is not None else "")
            raise ParseExhaustedError(self.name, snippet(diagnostic, self._api_key))
        logger.debug("%s: recovered message via %s", self.name, candidate.tier.value)
        return candidate

    # ------------------------------------------------------------------
    # Provider hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _send(self, prompt: str) -> Any:
        """Perform the single HTTP call; raise ProviderUnavailableError on failure."""
        raise NotImplementedError

    @abstractmethod
    def _structured_payload(self, response: Any) -> Any:
        """Return the tool-call / JSON-mode payload, or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def _response_text(self, response: Any) -> str:
        """Return the free text of the response for the fallback tier."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Shared httpx transport
    # ------------------------------------------------------------------
    def _post(
        self,
        url: str,
        payload: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> HttpReply:
        try:
            response = httpx.post(
                url,
                headers=headers,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(self.name, "timeout") from e
        except httpx.HTTPError as e:
            reason = redact(str(e), self._api_key) or type(e).__name__
            raise ProviderUnavailableError(
                self.name, f"network error: {reason}"
            ) from e
        status = int(getattr(response, "status_code", 200))
        text = getattr(response, "text", "") or ""
        if status < 200 or status >= 300:
            raise ProviderUnavailableError(
                self.name,
                str(status),
                status_code=status,
                detail=snippet(text, self._api_key),
            )
        try:
            data = response.json()
        except ValueError:
            data = None
        return HttpReply(data=data, text=text)
