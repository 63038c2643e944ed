"""commitcraft - conventional commit messages from staged changes via LLMs."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "1.1.0"

# Public API (lazy-exported to avoid import-time side effects)
__all__ = [
    # Schema
    "CommitMessage", "GenerationRequest",
    # Generation
    "LLMClient", "Provider", "CommitValidator", "build_prompt",
    # Config
    "Config", "load_config",
    # Git
    "GitRepo",
    # Exceptions
    "CommitCraftError", "GenerationError", "InvalidInputError",
    "ProviderUnavailableError", "ParseExhaustedError", "FormatViolationError",
    "ConfigError", "GitError", "CommandError",
]


def __getattr__(name: str):
    """Lazy attribute loader so ``import commitcraft`` stays cheap.

    The provider SDKs are only imported when a generation symbol is
    actually accessed.
    """
    mapping = {
        "CommitMessage": ("commitcraft.schema", "CommitMessage"),
        "GenerationRequest": ("commitcraft.schema", "GenerationRequest"),
        "LLMClient": ("commitcraft.llm", "LLMClient"),
        "Provider": ("commitcraft.providers", "Provider"),
        "CommitValidator": ("commitcraft.validator", "CommitValidator"),
        "build_prompt": ("commitcraft.prompt", "build_prompt"),
        "Config": ("commitcraft.config", "Config"),
        "load_config": ("commitcraft.config", "load_config"),
        "GitRepo": ("commitcraft.git", "GitRepo"),
        "CommitCraftError": ("commitcraft.exceptions", "CommitCraftError"),
        "GenerationError": ("commitcraft.exceptions", "GenerationError"),
        "InvalidInputError": ("commitcraft.exceptions", "InvalidInputError"),
        "ProviderUnavailableError": (
            "commitcraft.exceptions", "ProviderUnavailableError"
        ),
        "ParseExhaustedError": ("commitcraft.exceptions", "ParseExhaustedError"),
        "FormatViolationError": ("commitcraft.exceptions", "FormatViolationError"),
        "ConfigError": ("commitcraft.exceptions", "ConfigError"),
        "GitError": ("commitcraft.exceptions", "GitError"),
        "CommandError": ("commitcraft.exceptions", "CommandError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'commitcraft' has no attribute {name!r}")


if TYPE_CHECKING:
    from .config import Config, load_config
    from .exceptions import (
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
    from .git import GitRepo
    from .llm import LLMClient
    from .prompt import build_prompt
    from .providers import Provider
    from .schema import CommitMessage, GenerationRequest
    from .validator import CommitValidator
