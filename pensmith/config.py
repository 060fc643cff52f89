"""Project configuration: constants plus the workspace config store.

The config document lives at <root>/.pensmith/config.yaml. Loading is strict:
a missing or unparsable file is an error, never a silent fallback to
defaults. Values from the file are overlaid onto DEFAULT_CONFIG at the top
level only, so a present `llm` block replaces the default block wholesale.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

import yaml

from .context import ConfigMissing, ConfigParseError, load_yaml
from .logging import log_run as _log_run

MARKER_DIR = ".pensmith"
CONFIG_FILE = "config.yaml"

# Corpus categories, in sampling order
PLATFORMS = ("blog", "linkedin", "substack", "twitter")

STYLE_GUIDE_PATH = "writing/_style_guide.md"

DEFAULT_CONFIG: Dict[str, Any] = {
    "author": "",
    "llm": {
        "provider": "anthropic",
        "model": "claude-sonnet-4-20250514",
        "api_key_env": "ANTHROPIC_API_KEY",
    },
}

_LLM_KEYS = ("provider", "model", "api_key_env")


@dataclass(frozen=True)
class LLMSettings:
    provider: str
    model: str
    # Name of the environment variable holding the key, never the key itself
    api_key_env: str


@dataclass(frozen=True)
class PenConfig:
    author: str
    llm: LLMSettings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, source: str = "config") -> "PenConfig":
        llm = data.get("llm")
        if not isinstance(llm, dict):
            raise ConfigParseError(f"Invalid {source}: 'llm' must be a mapping with keys {', '.join(_LLM_KEYS)}")
        missing = [k for k in _LLM_KEYS if llm.get(k) in (None, "")]
        if missing:
            raise ConfigParseError(
                f"Invalid {source}: 'llm' block is missing {', '.join(missing)}. "
                f"Specify all of {', '.join(_LLM_KEYS)} or remove the block to use defaults."
            )
        author = data.get("author")
        return cls(
            author="" if author is None else str(author),
            llm=LLMSettings(
                provider=str(llm["provider"]),
                model=str(llm["model"]),
                api_key_env=str(llm["api_key_env"]),
            ),
        )


def get_default_config() -> PenConfig:
    return PenConfig.from_dict(DEFAULT_CONFIG, source="defaults")


def merge_over_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow overlay: every top-level key in `data` replaces the default value."""
    merged = {k: (dict(v) if isinstance(v, dict) else v) for k, v in DEFAULT_CONFIG.items()}
    merged.update(data)
    return merged


def config_path(root: str | Path) -> Path:
    return Path(root) / MARKER_DIR / CONFIG_FILE


def load_config(root: str | Path | None = None) -> PenConfig:
    from .workspace import require_workspace_root  # lazy import to avoid cycles

    base = Path(root) if root is not None else require_workspace_root()
    path = config_path(base)
    if not path.exists():
        raise ConfigMissing(
            f"Config file not found: {path}. Run `pensmith init --force` to recreate it."
        )
    data = load_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"Invalid config {path}: expected a mapping, got {type(data).__name__}")
    unknown = sorted(str(k) for k in data if k not in DEFAULT_CONFIG)
    if unknown:
        _log_run(f"config: ignoring unknown keys {unknown} in {path}")
    return PenConfig.from_dict(merge_over_defaults(data), source=f"config {path}")


def save_config(config: PenConfig, root: str | Path | None = None) -> Path:
    """Write the full config, overwriting any existing file.

    Without `root`, saves under the located workspace, or the current
    directory when none exists yet (fresh init).
    """
    from .workspace import find_workspace_root  # lazy import to avoid cycles

    base = Path(root) if root is not None else (find_workspace_root() or Path.cwd())
    path = config_path(base)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True), encoding="utf-8")
    _log_run(f"config: saved {path}")
    return path
