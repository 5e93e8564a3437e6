"""Markdown report generation for check suite results."""

from __future__ import annotations

from typing import Any

from benchmarks.checks import ChecksSummary

__all__ = ["render_checks_markdown", "render_golden_markdown"]


def _format_metrics(name: str, details: dict[str, Any]) -> str:
    if name == "golden_vectors":
        seeds = ", ".join(str(s) for s in details.get("seeds", []))
        return f"seeds={seeds}"
    if name in ("reproducibility", "array_seed_degenerate"):
        return f"draws={details.get('draws', 0)}"
    if name == "uniform_real_range":
        return f"min={details.get('min', 0):.3e}, max={1.0 - details.get('max', 0):.3e} below 1"
    if name == "gaussian_fast_bound":
        return (
            f"observed={details.get('observed_max_abs', 0):.6f}, "
            f"table={details.get('table_max_abs', 0):.6f}, "
            f"bound={details.get('bound', 0):.7f}"
        )
    pvalues = [f"{k[: -len('_pvalue')]} p={v:.4f}" for k, v in details.items() if k.endswith("_pvalue")]
    if pvalues:
        return ", ".join(pvalues) + f" (alpha={details.get('alpha', 0):g})"
    # Generic fallback
    return ", ".join(f"{k}={v}" for k, v in details.items() if k != "error")


def render_checks_markdown(summary: ChecksSummary, config: dict[str, Any]) -> str:
    """Render checks summary as Markdown.

    Args:
        summary: ChecksSummary from run_checks().
        config: Configuration dictionary.

    Returns:
        Markdown string.
    """
    lines: list[str] = []

    # Title
    status = "✅ PASSED" if summary.passed else "❌ FAILED"
    lines.append(f"# Generator Check Report — {status}")
    lines.append("")

    # Config summary
    lines.append("## Configuration")
    lines.append("")
    lines.append(f"- **Seed**: {config.get('seed', 5489)}")
    lines.append(f"- **Samples per test**: {config.get('samples', 1_000_000)}")
    lines.append(f"- **Significance level**: {config.get('alpha', 1e-4)}")
    lines.append(f"- **Gaussian table bits**: {config.get('table_bits', 14)}")
    lines.append("")

    # Results table
    lines.append("## Check Results")
    lines.append("")
    lines.append("| Check | Status | Key Metrics |")
    lines.append("|-------|--------|-------------|")

    for result in summary.results:
        details = result.details
        if details.get("skipped"):
            lines.append(f"| {result.name} | ⏭️ Skipped | {details.get('reason', 'N/A')} |")
            continue
        status_icon = "✅" if result.passed else "❌"
        lines.append(f"| {result.name} | {status_icon} | {_format_metrics(result.name, details)} |")

    lines.append("")

    # Summary
    lines.append("## Summary")
    lines.append("")
    num_passed = sum(1 for r in summary.results if r.passed)
    num_failed = sum(1 for r in summary.results if not r.passed)
    lines.append(f"- **Total checks**: {len(summary.results)}")
    lines.append(f"- **Passed**: {num_passed}")
    lines.append(f"- **Failed**: {num_failed}")
    lines.append("")

    if summary.passed:
        lines.append("**Overall: ✅ ALL CHECKS PASSED**")
    else:
        lines.append("**Overall: ❌ SOME CHECKS FAILED**")
        lines.append("")
        lines.append("Failed checks:")
        for result in summary.results:
            if not result.passed:
                error = result.details.get("error", "See details above")
                lines.append(f"- `{result.name}`: {error}")

    lines.append("")

    return "\n".join(lines)


def render_golden_markdown(seed: int, words: list[int]) -> str:
    """Render captured golden output words as a Markdown table."""
    lines = [f"# Golden vectors for seed {seed}", "", "| # | word | hex |", "|---|------|-----|"]
    for i, word in enumerate(words):
        lines.append(f"| {i} | {word} | 0x{word:08X} |")
    lines.append("")
    return "\n".join(lines)
