"""Command-line runner for the generator check suite.

Modes:
- ``checks``: run the reproducibility and statistical check suite and write
  ``checks.json`` and ``checks.md`` into a new run directory
- ``golden``: capture the first ``--count`` 32-bit outputs for a seed as
  ``golden.json`` and ``golden.md``, for pinning in other implementations

Example:
    python -m benchmarks.runner --mode checks --set samples=200000
    python -m benchmarks.runner --mode golden --seed 1 --count 10
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from benchmarks.checks import run_checks
from benchmarks.config import resolve_checks_config
from benchmarks.report import render_checks_markdown, render_golden_markdown
from benchmarks.workflow import artifact_path, next_run_dir, try_get_git_commit, write_run_files
from core.logging import configure_logging, get_logger
from prng.generator import Generator
from prng.seeding import make_seed

__all__ = ["parse_args", "run_checks_mode", "run_golden_mode", "main"]

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Check and capture output of the MT19937 generator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["checks", "golden"],
        default="checks",
        help="Run mode: statistical check suite or golden vector capture",
    )
    parser.add_argument(
        "--workflow-dir",
        type=str,
        default="workflow",
        help="Directory for run outputs",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with check suite settings (checks mode)",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a check suite setting; may be repeated (checks mode)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for golden mode; harvested from system entropy if omitted",
    )
    parser.add_argument("--count", type=int, default=10, help="Words to capture (golden mode)")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    return parser.parse_args(argv)


def run_checks_mode(args: argparse.Namespace, run_dir: Path) -> tuple[dict[str, Any], bool]:
    """Run the check suite and write its artifacts.

    Returns:
        The resolved config and whether every check passed.
    """
    config_path = Path(args.config) if args.config else None
    config = resolve_checks_config(config_path, list(args.overrides))

    summary = run_checks(config)
    summary_json = summary.to_json()

    json_path = artifact_path(run_dir, "checks.json")
    md_path = artifact_path(run_dir, "checks.md")
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(summary_json, f, indent=2)
    md_path.write_text(render_checks_markdown(summary, config), encoding="utf-8")

    print(f"Checks completed: {run_dir.name}")
    print(f"  status: {'✅ PASSED' if summary.passed else '❌ FAILED'}")
    print(f"  num_checks: {summary_json['num_checks']}")
    print(f"  num_passed: {summary_json['num_passed']}")
    print(f"  num_failed: {summary_json['num_failed']}")
    print(f"  checks.json: {json_path}")
    print(f"  checks.md: {md_path}")
    return config, summary.passed


def run_golden_mode(args: argparse.Namespace, run_dir: Path) -> dict[str, Any]:
    """Capture the first output words for a seed and write them as artifacts."""
    if args.count < 1:
        raise ValueError(f"--count must be >= 1, got {args.count}")
    seed = args.seed if args.seed is not None else make_seed()

    with Generator.from_seed(seed) as gen:
        words = [gen.next_uniform_u32() for _ in range(args.count)]

    json_path = artifact_path(run_dir, "golden.json")
    with json_path.open("w", encoding="utf-8") as f:
        json.dump({"seed": seed, "words": words}, f, indent=2)
    artifact_path(run_dir, "golden.md").write_text(
        render_golden_markdown(seed, words), encoding="utf-8"
    )

    print(f"Golden vectors captured: {run_dir.name}")
    print(f"  seed: {seed}")
    print(f"  words: {words}")
    print(f"  golden.json: {json_path}")
    return {"seed": seed, "count": args.count}


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the runner.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success, 2 for checks failure).
    """
    args = parse_args(argv)
    configure_logging(args.log_level)

    run_dir = next_run_dir(Path(args.workflow_dir))
    logger.info("Created run directory %s", run_dir)

    checks_passed = True
    if args.mode == "checks":
        config, checks_passed = run_checks_mode(args, run_dir)
    else:  # golden mode
        config = run_golden_mode(args, run_dir)

    meta: dict[str, Any] = {
        "created_at": datetime.now(UTC).isoformat(),
        "argv": sys.argv if argv is None else ["runner"] + list(argv),
        "mode": args.mode,
    }
    git_commit = try_get_git_commit()
    if git_commit:
        meta["git_commit"] = git_commit
    write_run_files(run_dir, meta=meta, config=config)

    # Return exit code 2 if checks failed (for CI)
    if not checks_passed:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
