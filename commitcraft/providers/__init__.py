"""Provider drivers and the closed provider registry."""

from __future__ import annotations

from enum import Enum

from .anthropic_driver import AnthropicDriver
from .base import DEFAULT_TIMEOUT, BaseDriver
from .gemini_driver import GeminiDriver
from .openai_driver import OpenAIDriver


class Provider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


DRIVERS: dict[Provider, type[BaseDriver]] = {
    Provider.OPENAI: OpenAIDriver,
    Provider.GEMINI: GeminiDriver,
    Provider.ANTHROPIC: AnthropicDriver,
}


def get_driver(provider: Provider | str) -> type[BaseDriver]:
    """Return the driver class for ``provider`` (enum member or its name)."""
    return DRIVERS[Provider(provider)]


__all__ = [
    "DEFAULT_TIMEOUT",
    "DRIVERS",
    "AnthropicDriver",
    "BaseDriver",
    "GeminiDriver",
    "OpenAIDriver",
    "Provider",
    "get_driver",
]
