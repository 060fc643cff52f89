"""pensmith CLI entrypoint.

Usage:
  pensmith init [--author NAME] [--provider P] [--model M] [--api-key-env VAR] [--force]
  pensmith analyze [--budget CHARS]
  pensmith render <template> [--set key=value ...]
  pensmith ingest [directory] --platform P [--published]
  pensmith clean [--yes]
"""
from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from functools import partial
from pathlib import Path
from typing import Dict, List

from .config import DEFAULT_CONFIG, PLATFORMS, STYLE_GUIDE_PATH, LLMSettings, PenConfig, load_config, save_config
from .context import EnvValidationError, PenError
from .corpus import collect_samples
from .env import load_env
from .frontmatter import write_markdown
from .ingest import ingest_directory
from .llm import complete
from .logging import log_error_base as _log_error_base, log_run as _log_run
from .sampling import budget_from_env, format_samples, select_representative_samples, summarize
from .templates import apply_template
from .workspace import WORKSPACE_DIRS, find_workspace_root, get_path, init_workspace

_PROVIDER_DEFAULTS = {
    "anthropic": ("claude-sonnet-4-20250514", "ANTHROPIC_API_KEY"),
    "openai": ("gpt-4o", "OPENAI_API_KEY"),
}

ANALYZE_SYSTEM = "You are an expert writing style analyst."

IMPORT_DIR = "writing/import"
DRAFTS_DIR = "writing/drafts"
CLEAN_DISPLAY_LIMIT = 10


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pensmith", description="Writing assistant that learns your voice")
    sub = parser.add_subparsers(dest="cmd")

    p_init = sub.add_parser("init", help="Initialize a workspace in the current directory")
    p_init.add_argument("--author", default=DEFAULT_CONFIG["author"], help="Your name")
    p_init.add_argument("--provider", choices=sorted(_PROVIDER_DEFAULTS), default=DEFAULT_CONFIG["llm"]["provider"])
    p_init.add_argument("--model", help="Model id (default depends on provider)")
    p_init.add_argument("--api-key-env", dest="api_key_env", help="Name of the env var holding the API key")
    p_init.add_argument("--force", action="store_true", help="Rewrite config in an existing workspace")

    p_an = sub.add_parser("analyze", help="Generate a style guide from published writing")
    p_an.add_argument("--budget", type=int, help="Character budget for samples (default: PEN_SAMPLE_BUDGET_CHARS or 400000)")

    p_r = sub.add_parser("render", help="Print a prompt template after interpolation")
    p_r.add_argument("template", help="Template name, e.g. analyze or format/linkedin")
    p_r.add_argument("--set", dest="bindings", action="append", default=[], metavar="KEY=VALUE")

    p_in = sub.add_parser("ingest", help="Import markdown files and generate their metadata")
    p_in.add_argument("directory", nargs="?", help=f"Source directory (default: {IMPORT_DIR})")
    p_in.add_argument("--platform", "-p", choices=PLATFORMS, required=True)
    p_in.add_argument("--published", action="store_true", help="Write to writing/content/<platform> instead of drafts")

    p_cl = sub.add_parser("clean", help="Delete every file in writing/drafts")
    p_cl.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")

    return parser.parse_args(argv)


def cmd_init(ns: argparse.Namespace) -> int:
    existing = find_workspace_root()
    if existing is not None and not ns.force:
        print(f"Already in a pensmith workspace: {existing}")
        print("  Run commands from here or pass --force to rewrite the config.")
        return 0
    root = existing or Path.cwd()
    default_model, default_key_env = _PROVIDER_DEFAULTS[ns.provider]
    config = PenConfig(
        author=ns.author,
        llm=LLMSettings(
            provider=ns.provider,
            model=ns.model or default_model,
            api_key_env=ns.api_key_env or default_key_env,
        ),
    )
    init_workspace(root)
    for d in WORKSPACE_DIRS:
        print(f"  {d}/")
    path = save_config(config, root)
    _log_run(f"=== INIT === root={root}")
    print(f"Workspace initialized: {root}")
    print(f"  Config: {path}")
    print(f"  Set {config.llm.api_key_env} in your environment or .env file before running analyze.")
    return 0


def cmd_analyze(ns: argparse.Namespace) -> int:
    config = load_config()
    samples = collect_samples()
    if not samples:
        print("No writing samples found.")
        print("Publish some writing first:")
        print("  1. Add markdown files under writing/content/<platform>/")
        print("  2. Platforms: blog, linkedin, substack, twitter")
        return 0

    budget = ns.budget if ns.budget is not None else budget_from_env()
    result = select_representative_samples(samples, budget)
    for line in summarize(result):
        print(line)

    platforms = ", ".join(result.categories)
    prompt = apply_template("analyze", {"samples": format_samples(result.selected), "platforms": platforms})
    _log_run(f"analyze: {result.total_selected}/{result.total_samples} samples, {result.total_chars} chars")
    style_guide = complete(prompt, system=ANALYZE_SYSTEM, max_tokens=4096, config=config)

    header = {
        "generated": datetime.now(timezone.utc).isoformat(),
        "sample_count": result.total_selected,
        "platforms": result.categories,
    }
    out_path = write_markdown(get_path(STYLE_GUIDE_PATH), header, style_guide)
    print(f"Style guide saved to {STYLE_GUIDE_PATH}")
    print(f"  Analyzed: {result.total_selected} samples")
    print(f"  Platforms: {platforms}")
    _log_run(f"analyze: wrote {out_path}")
    return 0


def _parse_bindings(pairs: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise PenError(f"Invalid --set value: {pair!r}. Use KEY=VALUE.")
        out[key.strip()] = value
    return out


def cmd_render(ns: argparse.Namespace) -> int:
    print(apply_template(ns.template, _parse_bindings(ns.bindings)))
    return 0


def cmd_ingest(ns: argparse.Namespace) -> int:
    config = load_config()
    source = Path(ns.directory) if ns.directory else get_path(IMPORT_DIR)
    if ns.published:
        dest_label = f"writing/content/{ns.platform}/"
        dest = get_path("writing", "content", ns.platform)
    else:
        dest_label = f"{DRAFTS_DIR}/"
        dest = get_path(DRAFTS_DIR)
    if not source.is_dir():
        raise PenError(f"Directory not found: {source}")
    if not any(source.rglob("*.md")):
        print("No markdown files found in directory.")
        return 0

    print(f"Ingesting files from {source} into {dest_label}")
    _log_run(f"=== INGEST === source={source} dest={dest}")
    report = ingest_directory(source, ns.platform, dest, partial(complete, config=config))

    print("Summary")
    print(f"  Ingested: {report.ingested}")
    print(f"  Skipped:  {report.skipped}")
    print(f"  Failed:   {report.failed}")
    if report.ingested:
        if ns.published:
            print(f"Files are ready for analysis in {dest_label}")
        else:
            print(f"Next: review files in {DRAFTS_DIR}/, then publish to writing/content/{ns.platform}/")
    return 1 if report.failed else 0


def _draft_files(drafts: Path) -> List[Path]:
    return sorted(p for p in drafts.iterdir() if p.is_file())


def cmd_clean(ns: argparse.Namespace) -> int:
    drafts = get_path(DRAFTS_DIR)
    if not drafts.is_dir():
        print("No drafts directory found.")
        print(f"  Expected: {drafts}")
        return 0
    files = _draft_files(drafts)
    if not files:
        print("Drafts directory is already empty.")
        return 0

    print(f"Found {len(files)} file(s) in {DRAFTS_DIR}/:")
    for p in files[:CLEAN_DISPLAY_LIMIT]:
        print(f"  - {p.name}")
    if len(files) > CLEAN_DISPLAY_LIMIT:
        print(f"  ... and {len(files) - CLEAN_DISPLAY_LIMIT} more")

    if not ns.yes:
        try:
            answer = input("Are you sure you want to delete all drafts? [y/N] ")
        except EOFError:
            answer = ""
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled. No files were deleted.")
            return 0

    deleted = 0
    failed = 0
    for p in files:
        try:
            p.unlink()
            deleted += 1
        except OSError as e:
            _log_error_base(f"clean: {p}: {e}")
            print(f"Failed to delete {p.name}: {e}")
            failed += 1
    _log_run(f"clean: deleted={deleted} failed={failed}")
    print(f"Deleted {deleted} file(s)")
    if failed:
        print(f"Failed to delete {failed} file(s)")
        return 1
    return 0


_COMMANDS = {
    "init": cmd_init,
    "analyze": cmd_analyze,
    "render": cmd_render,
    "ingest": cmd_ingest,
    "clean": cmd_clean,
}


def main(argv: List[str] | None = None) -> int:
    load_env()
    ns = _parse_args(list(sys.argv[1:] if argv is None else argv))
    handler = _COMMANDS.get(ns.cmd)
    if handler is None:
        print("Usage: pensmith {init,analyze,render,ingest,clean} ... (see --help)")
        return 1
    try:
        return handler(ns)
    except EnvValidationError as e:
        _log_error_base(f"{ns.cmd}: {e}")
        print(f"Environment validation error: {e}")
        if e.hint:
            print(f"  {e.hint}")
        return 2
    except PenError as e:
        _log_error_base(f"{ns.cmd}: {e}")
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    code = main()
    raise SystemExit(code)
