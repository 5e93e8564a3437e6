"""Config loading and override utilities for the check suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

__all__ = [
    "DEFAULT_CHECKS_CONFIG",
    "load_json",
    "apply_overrides",
    "resolve_checks_config",
]

DEFAULT_CHECKS_CONFIG: dict[str, Any] = {
    "seed": 5489,
    "samples": 1_000_000,
    "alpha": 1e-4,
    "uniform_bins": 100,
    "normal_bins": 64,
    "u32_high_bits": 8,
    "reproducibility_draws": 1248,
    "table_bits": 14,
}


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def apply_overrides(config: dict[str, Any], overrides: list[str]) -> dict[str, Any]:
    """Return a copy of config with ``dotted.key=value`` overrides applied.

    Values are parsed as JSON when possible and kept as strings otherwise.
    """
    result = json.loads(json.dumps(config))
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: {item}")
        path, raw_val = item.split("=", 1)
        keys = path.split(".")
        target = result
        for key in keys[:-1]:
            if key not in target or not isinstance(target[key], dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = _parse_value(raw_val)
    return result


def resolve_checks_config(
    path: Path | None = None, overrides: list[str] | None = None
) -> dict[str, Any]:
    """Merge defaults, an optional JSON file and overrides into one config.

    Raises:
        ValueError: If the file or overrides name keys the suite does not know,
            or if numeric settings are out of range.
    """
    config = dict(DEFAULT_CHECKS_CONFIG)
    if path is not None:
        config.update(load_json(path))
    config = apply_overrides(config, overrides or [])

    unknown = set(config) - set(DEFAULT_CHECKS_CONFIG)
    if unknown:
        raise ValueError(f"Unknown checks config keys: {sorted(unknown)}")
    if int(config["samples"]) < 1000:
        raise ValueError(f"samples must be >= 1000, got {config['samples']}")
    if not 0.0 < float(config["alpha"]) < 1.0:
        raise ValueError(f"alpha must be in (0, 1), got {config['alpha']}")
    return config
