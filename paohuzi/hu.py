"""
Winning-hand (Hu) check.

A hand is a Hu when every tile falls into a triplet, a run of three
consecutive ranks, or the special run 2-7-10, all within one suit. No
pair is required.
"""

from typing import Iterable, Optional, Tuple
import numpy as np

from .tiles import Tile, TileSet, TileSuit, MAX_RANK, tiles_to_counts


def _index(suit: int, rank: int) -> int:
    return suit * MAX_RANK + rank - 1


def _lowest(counts: np.ndarray) -> Optional[Tuple[int, int]]:
    """Lowest (suit, rank) still held: SMALL before BIG, ascending rank."""
    for suit in TileSuit:
        for rank in range(1, MAX_RANK + 1):
            if counts[_index(suit, rank)] > 0:
                return int(suit), rank
    return None


def _take(counts: np.ndarray, suit: int, ranks: Tuple[int, ...], n: int = 1) -> None:
    for rank in ranks:
        counts[_index(suit, rank)] -= n


def _give(counts: np.ndarray, suit: int, ranks: Tuple[int, ...], n: int = 1) -> None:
    for rank in ranks:
        counts[_index(suit, rank)] += n


def _can_decompose(counts: np.ndarray) -> bool:
    """
    Backtracking search on a private count array.

    At the lowest remaining tile try, in order: a triplet, a run starting
    there, the special run. Counts are restored after each failed branch.
    """
    lowest = _lowest(counts)
    if lowest is None:
        return True
    suit, rank = lowest

    # Triplet
    if counts[_index(suit, rank)] >= 3:
        _take(counts, suit, (rank,), 3)
        if _can_decompose(counts):
            return True
        _give(counts, suit, (rank,), 3)

    # Run starting at this rank
    if rank <= MAX_RANK - 2:
        run = (rank, rank + 1, rank + 2)
        if counts[_index(suit, rank + 1)] > 0 and counts[_index(suit, rank + 2)] > 0:
            _take(counts, suit, run)
            if _can_decompose(counts):
                return True
            _give(counts, suit, run)

    # 2-7-10
    special = (2, 7, 10)
    if rank in special and all(counts[_index(suit, r)] > 0 for r in special):
        _take(counts, suit, special)
        if _can_decompose(counts):
            return True
        _give(counts, suit, special)

    return False


def can_hu_counts(counts: np.ndarray) -> bool:
    """Hu check over a (20,) count snapshot. The snapshot is not modified."""
    counts = np.asarray(counts)
    if counts.shape != (TileSet.NUM_TILE_TYPES,):
        raise ValueError(f"Expected {TileSet.NUM_TILE_TYPES} tile counts, got shape {counts.shape}")
    if np.any(counts < 0):
        raise ValueError("Tile counts must be non-negative")
    return _can_decompose(counts.astype(np.int16))


def can_hu(tiles: Iterable[Tile]) -> bool:
    """True if the tiles split fully into triplets, runs and 2-7-10 runs."""
    return can_hu_counts(tiles_to_counts(tiles))
