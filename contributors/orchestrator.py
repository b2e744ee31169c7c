import argparse
import time
import uuid
import json
from typing import Dict, Any, List, Optional

from contributors.plugin import BuildContext, ContributorsFromGit
from contributors.stages.canonical import IdentityCanonicalizer
from contributors.stages.history import DEFAULT_TIMEOUT, HistoryReader
from contributors.stash import PODWEAVER_STASH
from contributors.utils import load_yaml, write_output, validate_config, get_logger

logger = get_logger(__name__)

def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    if overrides.get("authors") is not None:
        cfg["authors"] = list(overrides["authors"])
    if overrides.get("repo_dir") is not None:
        cfg["repo_dir"] = overrides["repo_dir"]

    # Git
    if overrides.get("revision") is not None or overrides.get("git_timeout") is not None:
        git = cfg.setdefault("git", {})
        if overrides.get("revision") is not None:
            git["revision"] = overrides["revision"]
        if overrides.get("git_timeout") is not None:
            git["timeout"] = float(overrides["git_timeout"])  # type: ignore[arg-type]

    if overrides.get("mapping_path") is not None:
        cfg.setdefault("canonical", {})["mapping_path"] = overrides["mapping_path"]

    # Output
    if overrides.get("output_dir") is not None or overrides.get("formats") is not None:
        out = cfg.setdefault("output", {})
        if overrides.get("output_dir") is not None:
            out["dir"] = overrides["output_dir"]
        if overrides.get("formats") is not None:
            out["formats"] = list(overrides["formats"])


def build_plugin(cfg: Dict[str, Any], context: Optional[BuildContext] = None) -> ContributorsFromGit:
    """Wire a plugin from a validated config; the mapping path is resolved here, once."""
    git_cfg = cfg.get("git") or {}
    history = HistoryReader(
        binary=git_cfg.get("binary", "git"),
        repo_dir=cfg.get("repo_dir"),
        revision=git_cfg.get("revision", "HEAD"),
        timeout=float(git_cfg.get("timeout", DEFAULT_TIMEOUT)),
    )
    canonicalizer = IdentityCanonicalizer((cfg.get("canonical") or {}).get("mapping_path"))
    if context is None:
        context = BuildContext(authors=list(cfg.get("authors", [])))
    return ContributorsFromGit(context, history=history, canonicalizer=canonicalizer)


def _execute_pipeline(cfg: Dict[str, Any], run_id: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Run the plugin once against the configured repository."""
    _apply_overrides(cfg, overrides)
    if overrides:
        validate_config(cfg)
    logger.info("config loaded repo_dir=%s authors=%d", cfg.get("repo_dir", "."), len(cfg.get("authors", [])))

    plugin = build_plugin(cfg)

    t0 = time.monotonic()
    plugin.before_build()
    metadata = plugin.metadata()
    logger.info("resolved contributors=%d took_ms=%d", len(plugin.contributor_list()), int((time.monotonic()-t0)*1000))

    stash = plugin.context.stash_named(PODWEAVER_STASH)
    result = {
        "run_id": run_id,
        "contributors": plugin.contributor_list(),
        "stopwords": plugin.stopword_list(),
        "stash": dict(stash.config) if stash is not None else {},
        "metadata": metadata,
    }

    if cfg.get("output"):
        generated_files = write_output(result, cfg["output"])
        logger.info("output written dir=%s files=%d", cfg["output"]["dir"], len(generated_files))
        result["files"] = generated_files

    return result

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect contributors from git history.")
    parser.add_argument("--config", type=str, required=True, help="Path to the contributors config YAML file.")
    parser.add_argument("--author", dest="authors", action="append", help="Declared author to exclude (repeatable, replaces config)")
    parser.add_argument("--repo-dir", dest="repo_dir", type=str, help="Repository to read history from")
    parser.add_argument("--mapping", dest="mapping_path", type=str, help="Alias mapping YAML (canonical -> alternates)")
    parser.add_argument("--revision", dest="revision", type=str, help="History tip passed to git shortlog")
    parser.add_argument("--git-timeout", dest="git_timeout", type=float, help="Seconds before git shortlog is abandoned")
    parser.add_argument("--output-dir", dest="output_dir", type=str, help="Directory for output files")
    parser.add_argument("--format", dest="formats", action="append", choices=["json", "yaml", "txt"], help="Output format (repeatable)")
    return parser

def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "authors": args.authors,
        "repo_dir": args.repo_dir,
        "mapping_path": args.mapping_path,
        "revision": args.revision,
        "git_timeout": args.git_timeout,
        "output_dir": args.output_dir,
        "formats": args.formats,
    }

def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI usage."""
    args = _build_parser().parse_args(argv)
    result = run_once(args.config, overrides=_overrides_from_args(args))
    print(json.dumps({"stash": result["stash"], "metadata": result["metadata"]}, ensure_ascii=False, indent=2))

def run_once(
    config_path: str,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Execute pipeline once with given config file path."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = load_yaml(config_path)
        validate_config(cfg)
        base_overrides = {}
        if overrides:
            base_overrides.update({k: v for k, v in overrides.items() if v is not None})
        return _execute_pipeline(cfg, run_id, base_overrides)

    except Exception as e:
        logger.error("Pipeline execution failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)


if __name__ == "__main__":
    main()
