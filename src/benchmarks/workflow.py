"""Run directory management for check and capture runs.

Every runner invocation gets its own numbered directory under the workflow
directory, holding ``meta.json`` (what produced the run), ``config.json``
(the resolved settings) and an ``artifacts/`` folder for mode outputs.
"""

from __future__ import annotations

import json
import re
import subprocess
from pathlib import Path
from typing import Any

__all__ = [
    "RUN_DIR_PATTERN",
    "next_run_dir",
    "artifact_path",
    "write_run_files",
    "try_get_git_commit",
]

RUN_DIR_PATTERN = re.compile(r"^run_(\d{4})$")


def next_run_dir(workflow_dir: Path) -> Path:
    """Create and return ``workflow_dir/run_XXXX`` with an ``artifacts/`` subfolder.

    The index is one past the largest existing ``run_XXXX`` directory, so
    gaps left by deleted runs are never reused. Files and non-matching
    directories are ignored.

    Example:
        >>> next_run_dir(Path("workflow"))
        PosixPath('workflow/run_0000')
    """
    workflow_dir.mkdir(parents=True, exist_ok=True)

    indices: list[int] = []
    for entry in workflow_dir.iterdir():
        match = RUN_DIR_PATTERN.match(entry.name)
        if match and entry.is_dir():
            indices.append(int(match.group(1)))

    run_dir = workflow_dir / f"run_{max(indices, default=-1) + 1:04d}"
    (run_dir / "artifacts").mkdir(parents=True, exist_ok=True)
    return run_dir


def artifact_path(run_dir: Path, name: str) -> Path:
    """Path of an output file inside the run's artifacts folder."""
    return run_dir / "artifacts" / name


def _dump_json(path: Path, data: dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def write_run_files(
    run_dir: Path,
    *,
    meta: dict[str, Any],
    config: dict[str, Any],
) -> None:
    """Record how a run was produced.

    Args:
        run_dir: Directory returned by :func:`next_run_dir`.
        meta: Timestamp, argv, mode and (when available) git commit.
        config: Settings the run actually used, after defaults and overrides.
    """
    _dump_json(run_dir / "meta.json", meta)
    _dump_json(run_dir / "config.json", config)


def try_get_git_commit() -> str | None:
    """Return the short hash of the checked-out commit, or None outside git."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None
