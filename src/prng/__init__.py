"""Deterministic MT19937 random number generation.

This package provides:

- engine: the Mersenne Twister state vector, twist and tempering
- seeding: scalar and array seed expansion, entropy seed harvesting
- gaussian: Box–Muller transform and the shared inverse-CDF table
- generator: the Generator handle with all output operations
- api: handle-style functions over Generator
"""

from __future__ import annotations

from prng.api import (
    create,
    create_from_array,
    create_from_config,
    destroy,
    harvest_seed,
    next_gaussian,
    next_gaussian_fast,
    next_uniform_real,
    next_uniform_u32,
)
from prng.engine import MTEngine, temper, twist
from prng.gaussian import (
    GAUSSIAN_TABLE_BOUND,
    BoxMullerGaussian,
    GaussianTable,
    build_gaussian_table,
    get_gaussian_table,
)
from prng.generator import Generator
from prng.seeding import ARRAY_BASELINE_SEED, expand_seed, expand_seed_array, make_seed

__all__ = [
    # Engine
    "MTEngine",
    "temper",
    "twist",
    # Seeding
    "ARRAY_BASELINE_SEED",
    "expand_seed",
    "expand_seed_array",
    "make_seed",
    # Gaussian
    "GAUSSIAN_TABLE_BOUND",
    "BoxMullerGaussian",
    "GaussianTable",
    "build_gaussian_table",
    "get_gaussian_table",
    # Generator
    "Generator",
    # Handle API
    "create",
    "create_from_array",
    "create_from_config",
    "harvest_seed",
    "destroy",
    "next_uniform_u32",
    "next_uniform_real",
    "next_gaussian",
    "next_gaussian_fast",
]
