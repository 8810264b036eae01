"""
Table rule configuration.

The trainer is played by 2 or 3 seats. Everything the engine needs to know
about the table lives here so variants are just different TableRules values.
"""

from dataclasses import dataclass

from .tiles import TileSet


@dataclass(frozen=True)
class TableRules:
    """
    Rule configuration for one game.

    Attributes:
        name: Display name of the preset
        num_players: 2 or 3 seats
        dealer: Seat that receives the extra tile and discards first
        hand_size: Tiles dealt to each non-dealer seat
        dealer_hand_size: Tiles dealt to the dealer
        log_capacity: Number of narration lines kept (newest first)
    """

    name: str = "Default"
    num_players: int = 3
    dealer: int = 0
    hand_size: int = 20
    dealer_hand_size: int = 21
    log_capacity: int = 60

    def __post_init__(self):
        if self.num_players not in (2, 3):
            raise ValueError(f"num_players must be 2 or 3, got {self.num_players}")
        if not 0 <= self.dealer < self.num_players:
            raise ValueError(f"dealer must be a seat index, got {self.dealer}")
        if self.hand_size < 1 or self.dealer_hand_size < 1:
            raise ValueError("Hand sizes must be positive")
        if self.tiles_dealt > TileSet.NUM_TILES:
            raise ValueError(f"Deal needs {self.tiles_dealt} tiles, deck has {TileSet.NUM_TILES}")
        if self.log_capacity < 1:
            raise ValueError("log_capacity must be positive")

    @property
    def tiles_dealt(self) -> int:
        return self.dealer_hand_size + self.hand_size * (self.num_players - 1)

    def __repr__(self) -> str:
        return f"TableRules({self.name}, players={self.num_players})"


THREE_PLAYER_RULES = TableRules(name="Three players", num_players=3)

TWO_PLAYER_RULES = TableRules(name="Two players", num_players=2)
