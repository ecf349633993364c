"""
Dense coverage grid for fabric claims.

Recomputes the duplicate-cell count and the non-overlapping claim set from
a numpy array of per-cell claim counts. Used to cross-check the sparse
ownership-map accumulator.
"""

import numpy as np
from typing import List, Sequence, Set, Tuple

from claim_parser import Claim
from overlap_accumulator import OverlapAccumulator

# int32 cells, about 256 MB
MAX_GRID_CELLS = 1 << 26


def grid_extent(claims: Sequence[Claim]) -> Tuple[int, int]:
    """Return (width, height) of the smallest origin-anchored grid holding all claims."""
    width = max((c.right for c in claims), default=0)
    height = max((c.bottom for c in claims), default=0)
    return width, height


def coverage_counts(claims: Sequence[Claim],
                    max_cells: int = MAX_GRID_CELLS) -> np.ndarray:
    """Count claims per cell. Indexed as counts[y, x].

    Raises ValueError when the grid would exceed max_cells.
    """
    width, height = grid_extent(claims)
    if width * height > max_cells:
        raise ValueError(
            f"grid of {width}x{height} cells exceeds the {max_cells} cell limit"
        )
    counts = np.zeros((height, width), dtype=np.int32)
    for c in claims:
        counts[c.top:c.bottom, c.left:c.right] += 1
    return counts


def dense_duplicate_count(counts: np.ndarray) -> int:
    return int(np.count_nonzero(counts >= 2))


def dense_non_overlapping_ids(claims: Sequence[Claim],
                              counts: np.ndarray) -> Set[int]:
    """Ids of claims whose whole rectangle is covered exactly once."""
    ids = set()
    for c in claims:
        region = counts[c.top:c.bottom, c.left:c.right]
        # empty slices (zero-area claims) pass trivially
        if np.all(region == 1):
            ids.add(c.id)
    return ids


def cross_check(claims: Sequence[Claim],
                accumulator: OverlapAccumulator,
                max_cells: int = MAX_GRID_CELLS) -> List[str]:
    """Compare the accumulator against a dense recount. Returns mismatch messages."""
    try:
        counts = coverage_counts(claims, max_cells=max_cells)
    except ValueError as exc:
        return [f"dense grid not built: {exc}"]
    problems = []

    dense_dup = dense_duplicate_count(counts)
    if dense_dup != accumulator.duplicate_cell_count():
        problems.append(
            f"duplicate cell count: accumulator={accumulator.duplicate_cell_count()}, "
            f"dense={dense_dup}"
        )

    dense_covered = int(np.count_nonzero(counts))
    if dense_covered != accumulator.covered_cell_count():
        problems.append(
            f"covered cell count: accumulator={accumulator.covered_cell_count()}, "
            f"dense={dense_covered}"
        )

    dense_ids = dense_non_overlapping_ids(claims, counts)
    acc_ids = accumulator.non_overlapping_claim_ids()
    if dense_ids != acc_ids:
        only_acc = sorted(acc_ids - dense_ids)
        only_dense = sorted(dense_ids - acc_ids)
        problems.append(
            f"non-overlapping ids differ: accumulator-only={only_acc}, "
            f"dense-only={only_dense}"
        )
    return problems
