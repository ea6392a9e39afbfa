"""Vector helpers for folding conversational refinements into a query embedding."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

MIN_NORM = 1e-10
DEFAULT_REFINEMENT_ALPHA = 0.35


def blend(a: Sequence[float], b: Sequence[float], alpha: float = DEFAULT_REFINEMENT_ALPHA) -> list[float]:
    """Return ``(1 - alpha) * a + alpha * b``, L2-normalised.

    Near-zero blends (e.g. two opposing unit vectors) are returned as is.
    """
    if len(a) != len(b):
        raise ValueError(f"Cannot blend vectors of different lengths ({len(a)} != {len(b)})")
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"alpha must be within [0, 1], got {alpha}")

    mixed = (1.0 - alpha) * np.asarray(a, dtype=np.float64) + alpha * np.asarray(b, dtype=np.float64)
    norm = float(np.linalg.norm(mixed))
    if norm < MIN_NORM:
        return mixed.tolist()
    return (mixed / norm).tolist()
