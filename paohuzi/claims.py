"""
Discard claims: the Chi finder and the claim priority resolver.

Both are pure functions over hands; they never touch a Game.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .tiles import Tile, TileSet, MIN_RANK, MAX_RANK
from .player import SPECIAL_RUN


@dataclass(frozen=True)
class PengOption:
    """Claim the discard to complete a triplet."""
    tile: Tile

    @property
    def name(self) -> str:
        return "peng"


@dataclass(frozen=True)
class ChiOption:
    """
    Claim the discard to complete a run.

    ``cards`` holds the two hand tiles followed by the discard.
    """
    cards: Tuple[Tile, Tile, Tile]

    @property
    def name(self) -> str:
        return "chi"

    @property
    def hand_tiles(self) -> Tuple[Tile, Tile]:
        return self.cards[0], self.cards[1]

    @property
    def discard(self) -> Tile:
        return self.cards[2]

    @property
    def ranks(self) -> Tuple[int, ...]:
        return tuple(sorted(c.rank for c in self.cards))

    def describe(self) -> str:
        suit = self.discard.suit.name.lower()
        return f"{'-'.join(str(r) for r in self.ranks)} ({suit})"


ClaimOption = Union[PengOption, ChiOption]


class ClaimResponse(IntEnum):
    """What the designated claimer chose"""
    PASS = 0
    PENG = 1
    CHI = 2


@dataclass(frozen=True)
class ClaimDecision:
    """A claim response plus the Chi option index when it is a Chi."""
    response: ClaimResponse
    chi_index: int = 0


@dataclass(frozen=True)
class ClaimCandidate:
    """
    The single seat granted the floor after a discard.

    Attributes:
        claimer: Seat that may act on the discard
        discarder: Seat that made the discard
        options: Legal claims, Peng first then Chi options in search order
    """
    claimer: int
    discarder: int
    options: Tuple[ClaimOption, ...]

    @property
    def peng(self) -> Optional[PengOption]:
        for option in self.options:
            if isinstance(option, PengOption):
                return option
        return None

    @property
    def chi_options(self) -> List[ChiOption]:
        return [o for o in self.options if isinstance(o, ChiOption)]

    @property
    def option_names(self) -> List[str]:
        names = []
        for option in self.options:
            if option.name not in names:
                names.append(option.name)
        return names


def iter_chi_options(hand: Sequence[Tile], discard: Tile) -> Iterator[ChiOption]:
    """
    Yield each distinct Chi the hand can make with the discard.

    Patterns tried, in order: (r-2, r-1, r), (r-1, r, r+1), (r, r+1, r+2),
    then 2-7-10 when r is one of those ranks. Patterns that leave the 1-10
    range are skipped. Options are deduplicated by rank triple; the first
    matching hand tile of each rank is used.
    """
    suit = discard.suit
    r = discard.rank
    suit_hand = TileSet(t for t in hand if t.suit == suit)

    patterns = [(r - 2, r - 1, r), (r - 1, r, r + 1), (r, r + 1, r + 2)]
    if r in SPECIAL_RUN:
        patterns.append(SPECIAL_RUN)

    seen = set()
    for pattern in patterns:
        if any(x < MIN_RANK or x > MAX_RANK for x in pattern):
            continue
        needed = [x for x in pattern if x != r]
        a = suit_hand.find(suit, needed[0])
        b = suit_hand.find(suit, needed[1])
        if a is None or b is None:
            continue
        ranks = tuple(sorted(pattern))
        if ranks in seen:
            continue
        seen.add(ranks)
        yield ChiOption((a, b, discard))


def find_chi_options(hand: Sequence[Tile], discard: Tile) -> List[ChiOption]:
    return list(iter_chi_options(hand, discard))


def legal_claims(hand: Sequence[Tile], discard: Tile, allow_chi: bool) -> List[ClaimOption]:
    """Peng if two copies are held, then Chi options when allowed."""
    options: List[ClaimOption] = []
    if TileSet(hand).count(discard) >= 2:
        options.append(PengOption(discard))
    if allow_chi:
        options.extend(iter_chi_options(hand, discard))
    return options


def claim_order(discarder: int, num_players: int) -> List[int]:
    """Seats in claim priority order: the next seat, then onward, skipping the discarder."""
    first = (discarder + 1) % num_players
    order = []
    for i in range(num_players):
        seat = (first + i) % num_players
        if seat != discarder:
            order.append(seat)
    return order


def find_claim(hands: Sequence[Sequence[Tile]], discarder: int,
               discard: Optional[Tile]) -> Optional[ClaimCandidate]:
    """
    Find the one seat that holds the floor on a discard.

    Only the seat right after the discarder may Chi; every other seat may
    only Peng. The first seat in priority order with any legal option wins
    and later seats are never examined.
    """
    if discard is None:
        return None
    order = claim_order(discarder, len(hands))
    for seat in order:
        options = legal_claims(hands[seat], discard, allow_chi=(seat == order[0]))
        if options:
            return ClaimCandidate(claimer=seat, discarder=discarder, options=tuple(options))
    return None
