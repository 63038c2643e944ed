"""Configuration management for commitcraft."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .exceptions import ConfigError

CONFIG_HOME_ENV = "COMMITCRAFT_CONFIG_HOME"
CONFIG_FILE_NAME = "config.json"
DEFAULT_PROVIDER = "gemini"
DEFAULT_REQUEST_TIMEOUT = 60.0

DEFAULT_MODELS = {
    "openai": {
        "model": "gpt-4o-mini",
        "endpoint": "https://api.openai.com/v1",
        "api_key_env": "OPENAI_API_KEY",
    },
    "gemini": {
        "model": "gemini-1.5-flash-latest",
        "endpoint": "https://generativelanguage.googleapis.com",
        "api_key_env": "GEMINI_API_KEY",
    },
    "anthropic": {
        "model": "claude-3-haiku-20240307",
        "endpoint": "https://api.anthropic.com",
        "api_key_env": "ANTHROPIC_API_KEY",
    },
}

# Known models per provider, shown by `commitcraft list`.
MODEL_CATALOG = {
    "openai": [
        ("gpt-4o", "latest, most capable"),
        ("gpt-4o-mini", "fast and efficient, default"),
        ("gpt-4-turbo", ""),
        ("gpt-3.5-turbo", ""),
    ],
    "gemini": [
        ("gemini-1.5-pro-latest", "most capable"),
        ("gemini-1.5-flash-latest", "fast, default"),
        ("gemini-1.0-pro", ""),
    ],
    "anthropic": [
        ("claude-3-5-sonnet-20241022", "latest, most capable"),
        ("claude-3-haiku-20240307", "fast, default"),
        ("claude-3-opus-20240229", "most powerful"),
    ],
}

# Secondary environment variables accepted for a provider's key.
_EXTRA_KEY_ENVS = {
    "gemini": ["GOOGLE_API_KEY"],
    "anthropic": ["CLAUDE_API_KEY"],
}

DEFAULT_ALIASES = {
    "fast": "gemini-1.5-flash-latest",
    "smart": "gpt-4o",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _default_models() -> Dict[str, str]:
    return {name: meta["model"] for name, meta in DEFAULT_MODELS.items()}


@dataclass
class Config:
    """Runtime configuration for commitcraft."""

    provider: str = DEFAULT_PROVIDER
    models: Dict[str, str] = field(default_factory=_default_models)
    endpoints: Dict[str, str] = field(default_factory=dict)
    api_keys: Dict[str, str] = field(default_factory=dict)
    aliases: Dict[str, str] = field(default_factory=dict)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    include_files: bool = False

    def __repr__(self) -> str:
        # Stored keys must never end up in logs or tracebacks.
        return (
            f"Config(provider={self.provider!r}, models={self.models!r}, "
            f"aliases={self.aliases!r}, request_timeout={self.request_timeout!r})"
        )

    @property
    def model(self) -> str:
        return self.models.get(self.provider) or DEFAULT_MODELS[self.provider]["model"]

    @property
    def llm_endpoint(self) -> str:
        return (
            self.endpoints.get(self.provider)
            or DEFAULT_MODELS[self.provider]["endpoint"]
        )

    @property
    def api_key_env(self) -> str:
        return DEFAULT_MODELS[self.provider]["api_key_env"]

    def resolve_model(self, name: Optional[str] = None) -> str:
        """Return the concrete model id for ``name`` (or the provider default)."""
        requested = name or self.model
        return self.aliases.get(requested, requested)

    def resolve_api_key(self, provider: Optional[str] = None) -> str:
        """Return the API key from the environment, else from the config file."""
        provider = provider or self.provider
        env_names = [DEFAULT_MODELS[provider]["api_key_env"]]
        env_names.extend(_EXTRA_KEY_ENVS.get(provider, []))
        for env_name in env_names:
            value = os.environ.get(env_name)
            if value:
                return value
        stored = self.api_keys.get(provider)
        if stored:
            return stored
        raise ConfigError(
            f"API key for provider '{provider}' not found. Set "
            f"{env_names[0]} or run 'commitcraft setup'."
        )

    def to_dict(self) -> Dict[str, object]:
        """Serialise configuration to a dict for persistence."""
        return asdict(self)


def config_dir() -> Path:
    override = os.environ.get(CONFIG_HOME_ENV)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "commitcraft"


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Persist configuration JSON and return the file written."""
    cfg_path = path or config_file_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(json.dumps(config.to_dict(), indent=2))
    return cfg_path


def load_persisted_config(path: Optional[Path] = None) -> Optional[Config]:
    cfg_path = path or config_file_path()
    if not cfg_path.exists():
        return None
    try:
        data = json.loads(cfg_path.read_text())
    except ValueError as e:
        raise ConfigError(f"Failed to parse config file {cfg_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a JSON object")
    known = set(Config.__dataclass_fields__)
    data = {k: v for k, v in data.items() if k in known}
    models = _default_models()
    models.update(data.get("models") or {})
    data["models"] = models
    return Config(**data)


def _parse_timeout(raw: Optional[str], fallback: float) -> float:
    if not raw:
        return fallback
    try:
        value = float(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def load_config(
    *,
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, object]] = None,
) -> Config:
    """Build configuration from config file, environment and overrides.

    Priority: overrides > environment > config file > defaults.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    config = load_persisted_config(path) or Config()

    provider = str(
        overrides.get("provider")
        or os.environ.get("COMMITCRAFT_PROVIDER")
        or config.provider
    ).lower()
    if provider not in DEFAULT_MODELS:
        raise ConfigError(
            "Unknown provider '{}'. Choose one of: {}".format(
                provider, ", ".join(DEFAULT_MODELS)
            )
        )
    config.provider = provider

    model = overrides.get("model") or os.environ.get("COMMITCRAFT_MODEL")
    if model:
        config.models[provider] = str(model)

    config.request_timeout = _parse_timeout(
        str(overrides.get("timeout") or "")
        or os.environ.get("COMMITCRAFT_REQUEST_TIMEOUT"),
        float(config.request_timeout),
    )

    if "include_files" in overrides:
        config.include_files = str(overrides["include_files"]).lower() in _TRUE_VALUES
    return config


def describe_provider(provider: str) -> str:
    meta = DEFAULT_MODELS.get(provider)
    if not meta:
        return provider
    return f"{provider} (default model: {meta['model']})"
