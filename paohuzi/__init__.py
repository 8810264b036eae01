"""
PaoHuZi Trainer Rules Engine
Two suits (Small, Big), ranks 1-10, 2 or 3 players
"""

from .tiles import Tile, TileSuit, TileSet, small, big, parse_tiles
from .player import Player, Meld, MeldType
from .wall import Wall
from .claims import (
    PengOption, ChiOption, ClaimCandidate, ClaimResponse, ClaimDecision,
    find_chi_options, iter_chi_options, find_claim,
)
from .hu import can_hu, can_hu_counts
from .rules import TableRules, THREE_PLAYER_RULES, TWO_PLAYER_RULES
from .seats import DecisionSource, ManualSeat, RandomSeat
from .errors import (
    RulesError, IllegalDiscard, IllegalDraw, IllegalClaimResponse, GameEnded, GameNotStarted,
)
from .game import Game, GamePhase, GameState

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "TileSuit",
    "TileSet",
    "small",
    "big",
    "parse_tiles",
    "Player",
    "Meld",
    "MeldType",
    "Wall",
    "PengOption",
    "ChiOption",
    "ClaimCandidate",
    "ClaimResponse",
    "ClaimDecision",
    "find_chi_options",
    "iter_chi_options",
    "find_claim",
    "can_hu",
    "can_hu_counts",
    "TableRules",
    "THREE_PLAYER_RULES",
    "TWO_PLAYER_RULES",
    "DecisionSource",
    "ManualSeat",
    "RandomSeat",
    "RulesError",
    "IllegalDiscard",
    "IllegalDraw",
    "IllegalClaimResponse",
    "GameEnded",
    "GameNotStarted",
    "Game",
    "GamePhase",
    "GameState",
]
