"""
PaoHuZi Wall Module

Handles the draw pile: creation, shuffling, dealing and drawing.
"""

import random
from typing import List, Optional
from dataclasses import dataclass, field

from .tiles import Tile, TileSet


@dataclass
class Wall:
    """
    The draw pile.

    Created once per game, consumed from one end, never refilled.

    Attributes:
        tiles: Remaining tiles; the last element is drawn next
        seed: Seed used for the shuffle
    """
    tiles: List[Tile] = field(default_factory=list)
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.tiles:
            self._create_wall()

    def _create_wall(self) -> None:
        """Create and shuffle a new wall"""
        self.tiles = list(TileSet.create_full_set().tiles)
        self.shuffle()

    def shuffle(self) -> None:
        random.Random(self.seed).shuffle(self.tiles)

    def draw(self) -> Optional[Tile]:
        """
        Draw one tile from the wall.
        Returns None if wall is empty.
        """
        if not self.tiles:
            return None
        return self.tiles.pop()

    def draw_many(self, count: int) -> List[Tile]:
        """Draw up to ``count`` tiles."""
        drawn = []
        for _ in range(count):
            tile = self.draw()
            if tile is None:
                break
            drawn.append(tile)
        return drawn

    def deal_hands(self, num_players: int, dealer: int = 0,
                   hand_size: int = 20, dealer_hand_size: int = 21) -> List[List[Tile]]:
        """
        Deal initial hands, seat by seat.

        The dealer gets ``dealer_hand_size`` tiles (one extra, since the
        dealer discards first without drawing), everyone else ``hand_size``.
        """
        hands = []
        for player_idx in range(num_players):
            n = dealer_hand_size if player_idx == dealer else hand_size
            hands.append(self.draw_many(n))
        return hands

    @property
    def remaining(self) -> int:
        return len(self.tiles)

    @property
    def is_empty(self) -> bool:
        return len(self.tiles) == 0

    def reset(self, seed: Optional[int] = None) -> None:
        """Rebuild and reshuffle with an optional new seed"""
        if seed is not None:
            self.seed = seed
        self._create_wall()

    def copy(self) -> 'Wall':
        new_wall = Wall.__new__(Wall)
        new_wall.tiles = list(self.tiles)
        new_wall.seed = self.seed
        return new_wall

    def __len__(self) -> int:
        return len(self.tiles)

    def __repr__(self) -> str:
        return f"Wall({self.remaining} tiles remaining)"
