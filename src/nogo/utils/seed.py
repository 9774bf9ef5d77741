"""
Random seed management for reproducibility.
"""

from __future__ import annotations

import random
from typing import Optional

import numpy as np


def set_seed(seed: int) -> None:
    """
    Set global random seeds for reproducibility.

    Sets seeds for:
    - Python random
    - NumPy (legacy global state)

    Agents and searches own their generators (see make_rng); this only
    covers code that still reaches for the global state.

    Args:
        seed: Random seed value
    """
    random.seed(seed)
    np.random.seed(seed)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create an independent generator; None draws fresh OS entropy."""
    return np.random.default_rng(seed)
