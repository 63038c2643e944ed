"""Generation coordinator for commitcraft.

Selects the configured provider driver, makes exactly one call through
it, and normalises the result. Errors from the driver propagate to the
caller untouched; switching providers is the operator's decision, never
done silently here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, cast

from .exceptions import GenerationError, InvalidInputError
from .providers import DEFAULT_TIMEOUT, BaseDriver, Provider, get_driver
from .schema import CommitMessage, GenerationRequest, ParseTier
from .validator import CommitValidator

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class GenerationOutcome:
    """Result of one coordinator call, including which parse tier succeeded."""

    message: Optional[CommitMessage] = None
    tier: Optional[ParseTier] = None
    state: GenerationState = GenerationState.IDLE

    def transition(self, state: GenerationState) -> None:
        logger.debug("generation.state %s -> %s", self.state.value, state.value)
        self.state = state


class LLMClient:
    """Provider-aware client for generating commit messages.

    Holds only immutable settings. Every call builds a fresh driver and a
    fresh ``GenerationOutcome``, so nothing is shared between requests.
    """

    def __init__(
        self,
        provider: Provider | str,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: Optional[str] = None,
        validator: Optional[CommitValidator] = None,
    ) -> None:
        try:
            self.provider = Provider(provider)
        except ValueError:
            raise InvalidInputError(f"Unsupported provider: {provider}") from None
        self.timeout = timeout
        self.endpoint = endpoint
        self.validator = validator or CommitValidator()

    def _driver(self, request: GenerationRequest) -> BaseDriver:
        driver_cls = get_driver(self.provider)
        return driver_cls(
            request.model_id,
            request.api_key,
            timeout=self.timeout,
            endpoint=self.endpoint,
        )

    @staticmethod
    def _check_request(request: GenerationRequest) -> None:
        if not request.diff_text or not request.diff_text.strip():
            raise InvalidInputError(
                "No staged changes to describe: the diff is empty."
            )
        if not request.model_id:
            raise InvalidInputError("No model selected for generation.")
        if not request.api_key:
            raise InvalidInputError("No API key supplied for the provider.")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def generate_commit_message(self, request: GenerationRequest) -> CommitMessage:
        outcome = self.generate_commit_message_detailed(request)
        return cast(CommitMessage, outcome.message)

    def generate_commit_message_detailed(
        self, request: GenerationRequest
    ) -> GenerationOutcome:
        outcome = GenerationOutcome()
        self._check_request(request)
        logger.debug(
            "generation.start provider=%s model=%s diff_len=%d files=%d",
            self.provider.value,
            request.model_id,
            len(request.diff_text),
            len(request.file_list),
        )
        outcome.transition(GenerationState.IN_FLIGHT)
        try:
            candidate = self._driver(request).generate_candidate(request)
            message = self.validator.normalize(candidate.message)
        except GenerationError as e:
            outcome.transition(GenerationState.FAILED)
            logger.debug("generation.failed %s: %s", type(e).__name__, e)
            raise
        outcome.message = message
        outcome.tier = candidate.tier
        outcome.transition(GenerationState.COMPLETED)
        logger.debug(
            "generation.completed tier=%s title=%r", candidate.tier.value, message.title
        )
        return outcome
