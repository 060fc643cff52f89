"""Environment helpers for pensmith.

Centralizes reading environment variables, resolving the API key and model
for the configured provider, and masking secrets for logging.

Variables:
- <config.llm.api_key_env>: API key for the configured provider (required for completions)
- PEN_MODEL: model override; accepts aliases such as "sonnet" or "opus"
- PEN_SAMPLE_BUDGET_CHARS: character budget for style-analysis samples
- PEN_CRASH_TRACE_FILE: optional breadcrumb trace file
"""
from __future__ import annotations

import os
from typing import Dict, Optional, TYPE_CHECKING

from dotenv import load_dotenv

from .context import EnvValidationError

if TYPE_CHECKING:
    from .config import PenConfig

KNOWN_ANTHROPIC_MODELS = (
    "claude-3-5-sonnet-20241022",
    "claude-3-5-haiku-20241022",
    "claude-3-opus-20240229",
    "claude-3-sonnet-20240229",
    "claude-3-haiku-20240307",
    "claude-sonnet-4-20250514",
    "claude-opus-4-20250514",
)

MODEL_ALIASES: Dict[str, str] = {
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-20250514",
    "haiku": "claude-3-5-haiku-20241022",
    "sonnet-4": "claude-sonnet-4-20250514",
    "opus-4": "claude-opus-4-20250514",
    "sonnet-3.5": "claude-3-5-sonnet-20241022",
    "haiku-3.5": "claude-3-5-haiku-20241022",
    "opus-3": "claude-3-opus-20240229",
    "sonnet-3": "claude-3-sonnet-20240229",
    "haiku-3": "claude-3-haiku-20240307",
}


def load_env() -> None:
    """Load environment variables from a local .env file if present.

    override=True so the local .env takes precedence over lingering shell state.
    """
    load_dotenv(override=True)


def env_str(name: str) -> Optional[str]:
    val = os.getenv(name)
    if val is None or str(val).strip() == "":
        return None
    return val.strip()


def env_int(name: str, default: int) -> int:
    try:
        v = int(os.getenv(name, str(default)))
        if v <= 0:
            return default
        return v
    except ValueError:
        return default


def resolve_model_alias(model: str) -> str:
    return MODEL_ALIASES.get(model.strip().lower(), model.strip())


def resolve_api_key(config: "PenConfig") -> str:
    name = config.llm.api_key_env
    key = env_str(name)
    if key is None:
        raise EnvValidationError(
            f"Missing required environment variable: {name}",
            hint=f"Set {name} in your .env file or environment",
        )
    return key


def resolve_model(config: "PenConfig") -> str:
    """PEN_MODEL (alias-resolved) if set, else the configured model."""
    override = env_str("PEN_MODEL")
    if override is None:
        return config.llm.model
    model = resolve_model_alias(override)
    if config.llm.provider == "anthropic" and model not in KNOWN_ANTHROPIC_MODELS:
        aliases = ", ".join(list(MODEL_ALIASES)[:5])
        raise EnvValidationError(f"Invalid Claude model: {override}", hint=f"Try: {aliases}, ...")
    return model


def mask_env_value(k: str, v: Optional[str]) -> str:
    """Mask secrets in environment values while retaining a short suffix for debugging."""
    if v is None:
        return ""
    kl = (k or "").lower()
    if any(s in kl for s in ("key", "secret", "token", "password")):
        s = str(v)
        if len(s) <= 8:
            return "***"
        return ("*" * (len(s) - 4)) + s[-4:]
    return str(v)
