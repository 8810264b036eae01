"""
PaoHuZi Tiles System

Defines the 80 tiles used in the trainer:
- Small suit (小) ranks 1-10 x4 = 40
- Big suit (大) ranks 1-10 x4 = 40
Total: 80 tiles, no honor tiles.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import numpy as np


MIN_RANK = 1
MAX_RANK = 10


class TileSuit(IntEnum):
    """Tile suits. SMALL sorts before BIG."""
    SMALL = 0  # 小 - written 一 二 三 ...
    BIG = 1    # 大 - written 壹 贰 叁 ...


SMALL_CN = ["", "一", "二", "三", "四", "五", "六", "七", "八", "九", "十"]
BIG_CN = ["", "壹", "贰", "叁", "肆", "伍", "陆", "柒", "捌", "玖", "拾"]
PINYIN = {
    1: "yī", 2: "èr", 3: "sān", 4: "sì", 5: "wǔ",
    6: "liù", 7: "qī", 8: "bā", 9: "jiǔ", 10: "shí",
}


@dataclass(frozen=True)
class Tile:
    """
    Represents a single tile.

    Attributes:
        suit: SMALL or BIG
        rank: 1-10
        id: Instance identifier (0-79 in a full deck), ignored for equality
    """
    suit: TileSuit
    rank: int
    id: int = 0

    def __post_init__(self):
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"Tile rank must be {MIN_RANK}-{MAX_RANK}, got {self.rank}")

    @property
    def tile_index(self) -> int:
        """Tile type index (0-19): SMALL 1-10 -> 0-9, BIG 1-10 -> 10-19."""
        return int(self.suit) * MAX_RANK + self.rank - 1

    @property
    def key(self) -> Tuple[int, int]:
        return (int(self.suit), self.rank)

    def label(self) -> Tuple[str, str, str]:
        """Bilingual label: (english, chinese, pinyin)."""
        cn = SMALL_CN[self.rank] if self.suit == TileSuit.SMALL else BIG_CN[self.rank]
        en = f"{self.suit.name.capitalize()} {self.rank}"
        return en, cn, PINYIN[self.rank]

    def describe(self) -> str:
        en, cn, pinyin = self.label()
        return f"{en} - {cn} ({pinyin})"

    def __eq__(self, other) -> bool:
        """Two tiles are equal if they have the same suit and rank"""
        if not isinstance(other, Tile):
            return False
        return self.suit == other.suit and self.rank == other.rank

    def __hash__(self) -> int:
        return hash((self.suit, self.rank))

    def __lt__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.key < other.key

    def __repr__(self) -> str:
        return f"Tile({self.suit.name}, {self.rank})"

    def __str__(self) -> str:
        return self.label()[0]

    @classmethod
    def from_index(cls, tile_index: int, instance_id: int = 0) -> 'Tile':
        """Create a tile from its type index (0-19)."""
        if not 0 <= tile_index < TileSet.NUM_TILE_TYPES:
            raise ValueError(f"Tile index must be 0-{TileSet.NUM_TILE_TYPES - 1}, got {tile_index}")
        suit, offset = divmod(tile_index, MAX_RANK)
        return cls(TileSuit(suit), offset + 1, instance_id)

    @classmethod
    def from_string(cls, s: str, instance_id: int = 0) -> 'Tile':
        """
        Parse a tile.

        Accepts "s5", "B10", "small 5", "Big 10" and the Chinese numerals
        "五" (small) / "伍" (big).
        """
        text = s.strip()
        if text in SMALL_CN[1:]:
            return cls(TileSuit.SMALL, SMALL_CN.index(text), instance_id)
        if text in BIG_CN[1:]:
            return cls(TileSuit.BIG, BIG_CN.index(text), instance_id)

        lowered = text.lower().replace(" ", "")
        for prefix, suit in (("small", TileSuit.SMALL), ("big", TileSuit.BIG),
                             ("s", TileSuit.SMALL), ("b", TileSuit.BIG)):
            if lowered.startswith(prefix):
                digits = lowered[len(prefix):]
                if digits.isdigit():
                    return cls(suit, int(digits), instance_id)
                break

        raise ValueError(f"Cannot parse tile string: {s}")


class TileSet:
    """
    Ordered multiset of tiles.

    Used for hands. Canonical order is SMALL before BIG, ascending rank.
    """

    NUM_TILE_TYPES = 20
    NUM_TILES = 80
    COPIES_PER_TYPE = 4

    def __init__(self, tiles: Optional[Iterable[Tile]] = None):
        self.tiles: List[Tile] = list(tiles) if tiles else []

    def add(self, tile: Tile) -> None:
        self.tiles.append(tile)

    def remove(self, tile: Tile) -> Optional[Tile]:
        """
        Remove one tile matching by suit and rank.
        Returns the removed instance, or None if not found.
        """
        for i, t in enumerate(self.tiles):
            if t == tile:
                return self.tiles.pop(i)
        return None

    def pop(self, index: int) -> Tile:
        return self.tiles.pop(index)

    def count(self, tile: Tile) -> int:
        return sum(1 for t in self.tiles if t == tile)

    def find(self, suit: TileSuit, rank: int) -> Optional[Tile]:
        """First tile instance of the given suit and rank."""
        for t in self.tiles:
            if t.suit == suit and t.rank == rank:
                return t
        return None

    def sort(self) -> None:
        """Sort tiles into canonical order"""
        self.tiles.sort()

    def to_count_array(self) -> np.ndarray:
        """20-element array counting each tile type."""
        return tiles_to_counts(self.tiles)

    @classmethod
    def create_full_set(cls) -> 'TileSet':
        """Create a complete set of 80 tiles, ids 0-79."""
        tiles = []
        instance_id = 0
        for suit in TileSuit:
            for rank in range(MIN_RANK, MAX_RANK + 1):
                for _ in range(cls.COPIES_PER_TYPE):
                    tiles.append(Tile(suit, rank, instance_id))
                    instance_id += 1
        return cls(tiles)

    def copy(self) -> 'TileSet':
        return TileSet(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in sorted(self.tiles))


def tiles_to_counts(tiles: Iterable[Tile]) -> np.ndarray:
    """Count array (20,) indexed by Tile.tile_index."""
    counts = np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
    for tile in tiles:
        counts[tile.tile_index] += 1
    return counts


def small(rank: int, instance_id: int = 0) -> Tile:
    """Create a Small-suit tile"""
    return Tile(TileSuit.SMALL, rank, instance_id)


def big(rank: int, instance_id: int = 0) -> Tile:
    """Create a Big-suit tile"""
    return Tile(TileSuit.BIG, rank, instance_id)


def parse_tiles(text: str) -> List[Tile]:
    """Parse a whitespace separated list, e.g. "s2 s7 s10 b5"."""
    return [Tile.from_string(part) for part in text.split()]
