"""Error types and strict YAML loading.

Contract:
- load_yaml(path) -> dict | list | scalar  (raises MissingFileError / ConfigParseError)

Error taxonomy:
- PenError: base for every user-facing failure
- WorkspaceNotFound, ConfigMissing, ConfigParseError, TemplateNotFound: fatal,
  propagated to the top-level command handler unmodified
- EnvValidationError: missing API key or invalid model override, with a hint
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from yaml.loader import SafeLoader as _PySafeLoader

from .logging import breadcrumb as _breadcrumb


class PenError(Exception):
    pass


class MissingFileError(PenError):
    pass


class WorkspaceNotFound(PenError):
    def __init__(self, start: Optional[Path] = None):
        where = f" (searched upward from {start})" if start is not None else ""
        super().__init__(f"Not in a pensmith workspace{where}. Run `pensmith init` first.")


class ConfigMissing(PenError):
    pass


class ConfigParseError(PenError):
    pass


class TemplateNotFound(PenError):
    pass


class EnvValidationError(PenError):
    """Environment problem with an optional remediation hint for the CLI."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


def _yaml_load_py(content: str):
    return yaml.load(content, Loader=_PySafeLoader)


def load_yaml(path: str | Path):
    """Read and parse a YAML file, raising on any failure.

    Unlike frontmatter decoding this never degrades to an empty value.
    """
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        _breadcrumb(f"yaml:error:not_found:{p}")
        raise MissingFileError(f"Required file not found: {p}")
    except OSError as e:
        _breadcrumb(f"yaml:error:read_failure:{p}")
        raise PenError(f"Unable to read file {p}: {e}")
    try:
        data = _yaml_load_py(content)
    except yaml.YAMLError as e:
        _breadcrumb(f"yaml:error:invalid_yaml:{p}")
        raise ConfigParseError(f"Invalid YAML in {p}: {e}")
    except Exception as e:
        # Implicit timestamps such as 2024-02-30 raise ValueError from the constructor
        _breadcrumb(f"yaml:error:invalid_yaml:{p}")
        raise ConfigParseError(f"Invalid YAML in {p}: {e}")
    _breadcrumb(f"yaml:parsed_ok:{p}")
    return data
