"""
PaoHuZi Player Module

Handles per-seat hand management and declared melds.
"""

from enum import IntEnum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np

from .tiles import Tile, TileSet, tiles_to_counts


SPECIAL_RUN = (2, 7, 10)


class MeldType(IntEnum):
    """Types of declared melds"""
    PENG = 0  # 碰 - 3 identical tiles
    CHI = 1   # 吃 - a run of 3 in one suit, or 2-7-10


def is_run(ranks: Tuple[int, ...]) -> bool:
    """True for three consecutive ranks or the special run 2-7-10."""
    ordered = tuple(sorted(ranks))
    if len(ordered) != 3:
        return False
    if ordered == SPECIAL_RUN:
        return True
    return ordered[1] == ordered[0] + 1 and ordered[2] == ordered[1] + 1


@dataclass(frozen=True)
class Meld:
    """
    A declared meld. Immutable once created and public to all seats.

    Attributes:
        meld_type: PENG or CHI
        tiles: Exactly 3 tiles, including the claimed discard
        source_player: Seat the discard was claimed from
        source_tile: The claimed discard
    """
    meld_type: MeldType
    tiles: Tuple[Tile, ...]
    source_player: Optional[int] = None
    source_tile: Optional[Tile] = None

    def __post_init__(self):
        object.__setattr__(self, "tiles", tuple(self.tiles))
        if len(self.tiles) != 3:
            raise ValueError(f"{self.meld_type.name} must have exactly 3 tiles")
        if self.meld_type == MeldType.PENG:
            if not all(t == self.tiles[0] for t in self.tiles):
                raise ValueError("Peng tiles must be identical")
        elif self.meld_type == MeldType.CHI:
            if not all(t.suit == self.tiles[0].suit for t in self.tiles):
                raise ValueError("Chi tiles must share a suit")
            if not is_run(tuple(t.rank for t in self.tiles)):
                raise ValueError("Invalid Chi sequence")

    @property
    def ranks(self) -> Tuple[int, ...]:
        return tuple(sorted(t.rank for t in self.tiles))

    def to_count_array(self) -> np.ndarray:
        return tiles_to_counts(self.tiles)

    def __repr__(self) -> str:
        return f"Meld({self.meld_type.name}, {list(self.tiles)})"

    def __str__(self) -> str:
        tiles_str = " ".join(str(t) for t in sorted(self.tiles))
        return f"[{self.meld_type.name}: {tiles_str}]"


@dataclass
class Player:
    """
    One seat at the table.

    Attributes:
        index: Seat index (0 = Player 1)
        hand: Private tiles, kept in canonical order
        melds: Declared melds
    """
    index: int
    hand: TileSet = field(default_factory=TileSet)
    melds: List[Meld] = field(default_factory=list)

    def add_tile(self, tile: Tile) -> None:
        """Add a tile and re-sort"""
        self.hand.add(tile)
        self.hand.sort()

    def discard_at(self, index: int) -> Tile:
        """Remove the tile at a hand index"""
        tile = self.hand.pop(index)
        self.hand.sort()
        return tile

    def remove_tiles(self, tiles: List[Tile]) -> List[Tile]:
        """
        Remove one hand tile matching each of ``tiles`` (by suit and rank).

        All-or-nothing: if any tile is missing the hand is left untouched
        and ValueError is raised. Returns the removed instances.
        """
        needed = tiles_to_counts(tiles)
        held = self.hand.to_count_array()
        if np.any(held < needed):
            raise ValueError(f"Player {self.index} doesn't hold {list(tiles)}")
        removed = [self.hand.remove(t) for t in tiles]
        self.hand.sort()
        return removed

    def declare_meld(self, meld: Meld) -> None:
        self.melds.append(meld)

    def get_hand_tiles(self) -> List[Tile]:
        return list(self.hand.tiles)

    def get_hand_count_array(self) -> np.ndarray:
        return self.hand.to_count_array()

    def get_melds_count_array(self) -> np.ndarray:
        counts = np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
        for meld in self.melds:
            counts += meld.to_count_array()
        return counts

    @property
    def num_tiles_in_hand(self) -> int:
        return len(self.hand)

    @property
    def num_melds(self) -> int:
        return len(self.melds)

    def reset(self) -> None:
        self.hand = TileSet()
        self.melds = []

    def copy(self) -> 'Player':
        return Player(
            index=self.index,
            hand=self.hand.copy(),
            melds=list(self.melds),  # Melds are frozen, shallow copy is OK
        )

    def __repr__(self) -> str:
        return f"Player({self.index}, hand={len(self.hand)}, melds={len(self.melds)})"

    def __str__(self) -> str:
        melds_str = " | ".join(str(m) for m in self.melds) if self.melds else "None"
        return f"Player {self.index + 1}: Hand[{self.hand}] Melds[{melds_str}]"
