from pathlib import Path

import pytest

# Load a test-specific environment file so pytest runs are consistent locally
try:
    from dotenv import load_dotenv
    _root = Path(__file__).resolve().parents[1]
    _env_test = _root / ".env.test"
    if _env_test.exists():
        load_dotenv(dotenv_path=_env_test, override=True)
except ImportError:
    pass

from pensmith.config import get_default_config, save_config
from pensmith.workspace import init_workspace


@pytest.fixture(autouse=True)
def _clean_pen_env(monkeypatch: pytest.MonkeyPatch):
    for k in ("PEN_MODEL", "PEN_SAMPLE_BUDGET_CHARS", "PEN_CRASH_TRACE_FILE", "PEN_DEBUG"):
        monkeypatch.delenv(k, raising=False)
    yield


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # Fresh initialized workspace with default config, cwd set to its root
    root = tmp_path / "ws"
    root.mkdir()
    init_workspace(root)
    save_config(get_default_config(), root)
    monkeypatch.chdir(root)
    return root


@pytest.fixture()
def write_doc():
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
