"""
Overlap accumulation over fabric claims.

Each claim is rasterized cell by cell into an ownership map. A cell that is
already owned when visited marks both the previous owner and the incoming
claim as overlapping, and is counted once as a duplicate cell.
"""

from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple

from claim_parser import Claim

Cell = Tuple[int, int]


class AccumulatorFinalizedError(RuntimeError):
    """Raised when a claim is ingested after the accumulator was finalized."""


class OverlapAccumulator:
    """Tracks per-cell ownership and the claims that share cells.

    cell_owner only remembers the latest claim to cover a cell, not every
    claim that ever did. That is enough for the duplicate count and the
    non-overlapping set, but not for "which claims overlap claim N" queries.
    """

    def __init__(self):
        self.cell_owner: Dict[Cell, int] = {}
        self._duplicate_cells: Set[Cell] = set()
        self._duplicate_count = 0
        self._claim_ids: Set[int] = set()
        self._overlapping_claim_ids: Set[int] = set()
        self.finalized = False

    def ingest(self, claim: Claim):
        if self.finalized:
            raise AccumulatorFinalizedError(
                f"cannot ingest claim #{claim.id}: accumulator is finalized"
            )
        self._claim_ids.add(claim.id)
        for cell in claim.cells():
            owner = self.cell_owner.get(cell)
            if owner is not None:
                self._overlapping_claim_ids.add(owner)
                self._overlapping_claim_ids.add(claim.id)
                if cell not in self._duplicate_cells:
                    self._duplicate_cells.add(cell)
                    self._duplicate_count += 1
            self.cell_owner[cell] = claim.id

    def ingest_all(self, claims: Iterable[Claim]) -> "OverlapAccumulator":
        for claim in claims:
            self.ingest(claim)
        return self

    def finalize(self):
        """Stop accepting claims. Results stay readable."""
        self.finalized = True

    def duplicate_cell_count(self) -> int:
        return self._duplicate_count

    def non_overlapping_claim_ids(self) -> Set[int]:
        return self._claim_ids - self._overlapping_claim_ids

    def covered_cell_count(self) -> int:
        """Number of distinct cells covered by at least one claim."""
        return len(self.cell_owner)

    def owner_of(self, cell: Cell) -> Optional[int]:
        """Latest claim to cover the cell, or None."""
        return self.cell_owner.get(cell)

    @property
    def duplicate_cells(self) -> FrozenSet[Cell]:
        return frozenset(self._duplicate_cells)

    @property
    def claim_ids(self) -> FrozenSet[int]:
        return frozenset(self._claim_ids)

    @property
    def overlapping_claim_ids(self) -> FrozenSet[int]:
        return frozenset(self._overlapping_claim_ids)
