"""Benchmarks module for checking generator output.

This package provides utilities for verifying and recording generator
behaviour:

- metrics: Goodness-of-fit statistics
- checks: Reproducibility/statistical check suite
- config: Check suite configuration and overrides
- report: Markdown report generation
- workflow: Run directory management
- runner: CLI for running checks and capturing golden vectors
"""

from __future__ import annotations

from benchmarks.checks import GOLDEN_VECTORS, CheckResult, ChecksSummary, run_checks
from benchmarks.config import DEFAULT_CHECKS_CONFIG, apply_overrides, resolve_checks_config
from benchmarks.metrics import (
    GoodnessOfFit,
    chi2_normal,
    chi2_u32_high_bits,
    chi2_uniform,
    ks_normal,
    ks_uniform,
)
from benchmarks.report import render_checks_markdown, render_golden_markdown
from benchmarks.runner import main as run_runner
from benchmarks.workflow import artifact_path, next_run_dir, try_get_git_commit, write_run_files

__all__ = [
    # Workflow
    "next_run_dir",
    "artifact_path",
    "write_run_files",
    "try_get_git_commit",
    # Metrics
    "GoodnessOfFit",
    "ks_uniform",
    "ks_normal",
    "chi2_uniform",
    "chi2_normal",
    "chi2_u32_high_bits",
    # Config
    "DEFAULT_CHECKS_CONFIG",
    "apply_overrides",
    "resolve_checks_config",
    # Runner
    "run_runner",
    # Checks
    "GOLDEN_VECTORS",
    "CheckResult",
    "ChecksSummary",
    "run_checks",
    # Report
    "render_checks_markdown",
    "render_golden_markdown",
]
