"""
PaoHuZi Game Engine

Turn/phase state machine for the trainer: dealing, draw, discard, the
claim window after each discard, and the end of the game when the draw
pile runs out.
"""

import copy
import numbers
import logging
from enum import IntEnum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .tiles import Tile
from .player import Player, Meld, MeldType
from .wall import Wall
from .claims import ClaimCandidate, ClaimDecision, ClaimResponse, find_claim
from .hu import can_hu
from .narration import EventLog
from .rules import TableRules, THREE_PLAYER_RULES
from .seats import DecisionSource, ManualSeat, RandomSeat
from .errors import (
    IllegalDiscard, IllegalDraw, IllegalClaimResponse, GameEnded, GameNotStarted,
)

logger = logging.getLogger(__name__)


class GamePhase(IntEnum):
    """Phases of the game"""
    NOT_STARTED = 0
    DEALER_DISCARD = 1  # Dealt; dealer discards without drawing
    DRAW = 2            # Acting seat draws a tile
    DISCARD = 3         # Acting seat must discard
    CLAIM_WINDOW = 4    # One designated seat may Peng, Chi or Pass
    ENDED = 5           # Draw pile exhausted; terminal

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True)
class GameState:
    """
    Read-only snapshot for presentation.

    Hands are only included for observable (interactive) seats.
    """
    players: int
    dealer: int
    current: int
    phase: GamePhase
    turn_count: int
    draw_pile_count: int
    discard_pile: Tuple[Tile, ...]
    last_discard: Optional[Tile]
    last_discard_player: Optional[int]
    hands: Dict[int, Tuple[Tile, ...]]
    hand_sizes: Tuple[int, ...]
    melds: Tuple[Tuple[Meld, ...], ...]
    claim: Optional[ClaimCandidate]
    observable: Tuple[int, ...]
    log: Tuple[str, ...]


def seat_name(seat: int) -> str:
    return "Player 1 (You)" if seat == 0 else f"Player {seat + 1}"


def default_seats(num_players: int, seed: Optional[int] = None) -> List[DecisionSource]:
    """Seat 0 is manual, every other seat is a random bot."""
    seats: List[DecisionSource] = [ManualSeat()]
    for seat in range(1, num_players):
        seats.append(RandomSeat(None if seed is None else seed + seat))
    return seats


class Game:
    """
    The rules engine.

    Owns the whole game state. External callers act only through the verbs
    ``draw``, ``discard``, ``respond_pass``, ``respond_peng`` and
    ``respond_chi``; each verb is validated first and then applied in full.
    After every verb the engine keeps playing automated seats until an
    interactive seat has to decide or the game ends.
    """

    def __init__(self, rules: TableRules = THREE_PLAYER_RULES,
                 seats: Optional[Sequence[DecisionSource]] = None,
                 seed: Optional[int] = None):
        """
        Args:
            rules: Table configuration
            seats: One decision source per seat (default: seat 0 manual,
                the rest random bots)
            seed: Seed for the wall shuffle
        """
        self.rules = rules
        self.num_players = rules.num_players
        self.seed = seed
        self.seats: List[DecisionSource] = (
            list(seats) if seats is not None else default_seats(self.num_players, seed)
        )
        if len(self.seats) != self.num_players:
            raise ValueError(f"Expected {self.num_players} seats, got {len(self.seats)}")

        self.wall = Wall(seed=seed)
        self.players: List[Player] = [Player(i) for i in range(self.num_players)]

        self.phase = GamePhase.NOT_STARTED
        self.dealer = rules.dealer
        self.current = self.dealer
        self.turn_count = 0

        self.discard_pile: List[Tile] = []
        self.last_discard: Optional[Tile] = None
        self.last_discard_player: Optional[int] = None
        self.claim: Optional[ClaimCandidate] = None

        self.log = EventLog(rules.log_capacity)

    # ------------------------------------------------------------------
    # Setup

    def reset(self, seed: Optional[int] = None) -> None:
        """Return to NOT_STARTED with a fresh wall"""
        if seed is not None:
            self.seed = seed
        self.wall.reset(self.seed)
        for player in self.players:
            player.reset()
        for source in self.seats:
            source.reset()
        self.phase = GamePhase.NOT_STARTED
        self.current = self.dealer
        self.turn_count = 0
        self.discard_pile = []
        self.last_discard = None
        self.last_discard_player = None
        self.claim = None
        self.log = EventLog(self.rules.log_capacity)

    def deal(self) -> None:
        """Deal the hands; the dealer holds one extra tile."""
        if self.phase != GamePhase.NOT_STARTED:
            raise RuntimeError("Game already started")

        hands = self.wall.deal_hands(
            self.num_players,
            dealer=self.dealer,
            hand_size=self.rules.hand_size,
            dealer_hand_size=self.rules.dealer_hand_size,
        )
        for player, hand in zip(self.players, hands):
            for tile in hand:
                player.hand.add(tile)
            player.hand.sort()

        self.current = self.dealer
        self.phase = GamePhase.DEALER_DISCARD
        logger.debug("Dealt %d hands, %d tiles left", self.num_players, self.wall.remaining)
        self._narrate(f"Dealer is Player {self.dealer + 1}. Dealer must discard first.")

    def start_game(self) -> None:
        """Deal and play automated seats until someone must decide"""
        self.deal()
        self.advance()

    def add_listener(self, listener: Callable[[str], None]) -> None:
        """Receive each narration line as it is emitted"""
        self.log.add_listener(listener)

    # ------------------------------------------------------------------
    # Driving automated seats

    def advance(self) -> None:
        """
        Run the machine forward.

        Stops when the seat holding decision rights has no answer yet
        (interactive seat) or the game has ended. An illegal claim response
        from a source counts as a pass; an illegal discard index leaves the
        seat waiting for an explicit discard().
        """
        while True:
            if self.phase in (GamePhase.NOT_STARTED, GamePhase.ENDED):
                return

            if self.phase == GamePhase.DEALER_DISCARD:
                self.phase = GamePhase.DISCARD
                self._announce_turn()
                continue

            if self.phase == GamePhase.CLAIM_WINDOW:
                decision = self.seats[self.claim.claimer].respond_to_claim(self, self.claim)
                if decision is None:
                    return
                try:
                    self._validate_decision(decision)
                except IllegalClaimResponse as e:
                    logger.warning("P%d returned an illegal claim response (%s); passing",
                                   self.claim.claimer, e)
                    decision = ClaimDecision(ClaimResponse.PASS)
                self._resolve_claim(decision)
                continue

            seat = self.current
            source = self.seats[seat]
            if self.phase == GamePhase.DRAW:
                if not source.ready_to_draw(self, seat):
                    return
                self._apply_draw()
            elif self.phase == GamePhase.DISCARD:
                index = source.choose_discard(self, seat)
                if index is None:
                    return
                try:
                    self._validate_discard_index(index)
                except IllegalDiscard as e:
                    # Wait for an explicit discard() instead
                    logger.warning("P%d chose an illegal discard (%s)", seat, e)
                    return
                self._apply_discard(index)

    # ------------------------------------------------------------------
    # Verbs

    def draw(self, seat: Optional[int] = None) -> Tile:
        """The acting seat draws one tile. Returns the tile, or ends the game."""
        self._check_playing()
        if self.phase != GamePhase.DRAW:
            raise IllegalDraw(f"Cannot draw in phase {self.phase.name}")
        if seat is not None and seat != self.current:
            raise IllegalDraw(f"Player {seat + 1} is not the acting seat")

        tile = self._apply_draw()
        self.advance()
        return tile

    def discard(self, index: Optional[int], seat: Optional[int] = None) -> Tile:
        """The acting seat discards the tile at ``index`` of its hand."""
        self._check_playing()
        if self.phase != GamePhase.DISCARD:
            raise IllegalDiscard(f"Cannot discard in phase {self.phase.name}")
        if seat is not None and seat != self.current:
            raise IllegalDiscard(f"Player {seat + 1} is not the acting seat")
        self._validate_discard_index(index)

        tile = self._apply_discard(index)
        self.advance()
        return tile

    def respond_pass(self, seat: Optional[int] = None) -> None:
        self._respond(ClaimDecision(ClaimResponse.PASS), seat)

    def respond_peng(self, seat: Optional[int] = None) -> Meld:
        return self._respond(ClaimDecision(ClaimResponse.PENG), seat)

    def respond_chi(self, index: int = 0, seat: Optional[int] = None) -> Meld:
        """Declare the ``index``-th Chi option of the pending claim."""
        return self._respond(ClaimDecision(ClaimResponse.CHI, index), seat)

    def _respond(self, decision: ClaimDecision, seat: Optional[int]) -> Optional[Meld]:
        self._check_playing()
        if self.phase != GamePhase.CLAIM_WINDOW or self.claim is None:
            raise IllegalClaimResponse("No claim is pending")
        if seat is not None and seat != self.claim.claimer:
            raise IllegalClaimResponse(
                f"Player {seat + 1} is not the claimer (Player {self.claim.claimer + 1} is)"
            )
        self._validate_decision(decision)

        meld = self._resolve_claim(decision)
        self.advance()
        return meld

    # ------------------------------------------------------------------
    # Queries

    def check_hu(self, seat: Optional[int] = None) -> bool:
        """Practice check: could this seat's hand be declared a Hu right now?"""
        self._check_playing()
        seat = self.current if seat is None else seat
        if not 0 <= seat < self.num_players:
            raise ValueError(f"No seat {seat}")
        ok = can_hu(self.players[seat].hand)
        if not self.is_observable(seat):
            # Hidden hands stay out of the shared log
            logger.debug("Practice Hu check for hidden seat P%d: %s", seat, ok)
        elif ok:
            self._narrate(f"{seat_name(seat)} can Hu - 胡 (hú)! (Practice check)")
        else:
            self._narrate(f"{seat_name(seat)} not ready to Hu.")
        return ok

    def valid_actions(self, seat: int) -> List[str]:
        """Verbs the seat may call right now"""
        if self.phase == GamePhase.DRAW and seat == self.current:
            return ["draw"]
        if self.phase == GamePhase.DISCARD and seat == self.current:
            return ["discard"]
        if self.phase == GamePhase.CLAIM_WINDOW and self.claim and seat == self.claim.claimer:
            actions = ["pass"]
            if self.claim.peng is not None:
                actions.append("peng")
            if self.claim.chi_options:
                actions.append("chi")
            return actions
        return []

    def decision_seat(self) -> Optional[int]:
        """Seat that holds decision rights, or None when the game is not running"""
        if self.phase == GamePhase.CLAIM_WINDOW and self.claim is not None:
            return self.claim.claimer
        if self.phase in (GamePhase.DEALER_DISCARD, GamePhase.DRAW, GamePhase.DISCARD):
            return self.current
        return None

    def is_observable(self, seat: int) -> bool:
        return self.seats[seat].interactive

    def tile_total(self) -> int:
        """Tiles across draw pile, hands, discard pile and melds"""
        total = self.wall.remaining + len(self.discard_pile)
        for player in self.players:
            total += len(player.hand)
            total += sum(len(m.tiles) for m in player.melds)
        return total

    def get_state(self) -> GameState:
        observable = tuple(s for s in range(self.num_players) if self.is_observable(s))
        return GameState(
            players=self.num_players,
            dealer=self.dealer,
            current=self.current,
            phase=self.phase,
            turn_count=self.turn_count,
            draw_pile_count=self.wall.remaining,
            discard_pile=tuple(self.discard_pile),
            last_discard=self.last_discard,
            last_discard_player=self.last_discard_player,
            hands={s: tuple(self.players[s].hand) for s in observable},
            hand_sizes=tuple(len(p.hand) for p in self.players),
            melds=tuple(tuple(p.melds) for p in self.players),
            claim=self.claim,
            observable=observable,
            log=tuple(self.log.messages),
        )

    # ------------------------------------------------------------------
    # Transitions

    def _apply_draw(self) -> Optional[Tile]:
        if self.wall.is_empty:
            self.phase = GamePhase.ENDED
            logger.info("Draw pile empty after %d turns; game over", self.turn_count)
            self._narrate("Draw pile empty. Game ends.")
            return None

        seat = self.current
        tile = self.wall.draw()
        self.players[seat].add_tile(tile)
        self.turn_count += 1
        self.phase = GamePhase.DISCARD
        logger.debug("P%d drew %r (%d left)", seat, tile, self.wall.remaining)
        self._narrate(f"{seat_name(seat)} drew: {tile.describe()}")
        return tile

    def _apply_discard(self, index: int) -> Tile:
        seat = self.current
        tile = self.players[seat].discard_at(index)
        self.discard_pile.append(tile)
        self.last_discard = tile
        self.last_discard_player = seat
        logger.debug("P%d discarded %r", seat, tile)
        self._narrate(f"{seat_name(seat)} discarded: {tile.describe()}")

        self.phase = GamePhase.CLAIM_WINDOW
        self.claim = find_claim([p.hand.tiles for p in self.players], seat, tile)
        if self.claim is None:
            self._proceed_after_claims()
        else:
            types = " / ".join(self.claim.option_names)
            logger.debug("P%d may claim %s", self.claim.claimer, types)
            self._narrate(f"{seat_name(self.claim.claimer)} may claim: {types}.")
        return tile

    def _resolve_claim(self, decision: ClaimDecision) -> Optional[Meld]:
        claim = self.claim
        claimer = claim.claimer
        meld = None

        if decision.response == ClaimResponse.PASS:
            self._narrate(f"{seat_name(claimer)} passes.")
        elif decision.response == ClaimResponse.PENG:
            meld = self._take_discard(MeldType.PENG, [self.last_discard, self.last_discard])
            self._narrate(f"{seat_name(claimer)} declared Peng - 碰 (pèng).")
        elif decision.response == ClaimResponse.CHI:
            option = claim.chi_options[decision.chi_index]
            meld = self._take_discard(MeldType.CHI, list(option.hand_tiles))
            self._narrate(f"{seat_name(claimer)} declared Chi - 吃 (chī): {option.describe()}.")

        self._proceed_after_claims()
        return meld

    def _take_discard(self, meld_type: MeldType, from_hand: List[Tile]) -> Meld:
        """Move two hand tiles plus the last discard into a new meld."""
        claimer = self.claim.claimer
        player = self.players[claimer]
        discard = self.last_discard

        removed = player.remove_tiles(from_hand)
        self.discard_pile.pop()
        meld = Meld(
            meld_type=meld_type,
            tiles=tuple(removed) + (discard,),
            source_player=self.claim.discarder,
            source_tile=discard,
        )
        player.declare_meld(meld)
        self.last_discard = None
        logger.debug("P%d declared %s", claimer, meld)
        return meld

    def _proceed_after_claims(self) -> None:
        """
        Close the claim window and hand the turn to the seat after the
        discarder, whoever claimed.
        """
        discarder = self.last_discard_player
        self.claim = None
        self.phase = GamePhase.DRAW
        self.current = (discarder + 1) % self.num_players
        self._announce_turn()

    def _announce_turn(self) -> None:
        logger.debug("Turn: P%d (%s)", self.current, self.phase.name)
        self._narrate(f"{seat_name(self.current)} turn.")

    def _narrate(self, msg: str) -> None:
        self.log.push(msg)

    # ------------------------------------------------------------------
    # Validation

    def _check_playing(self) -> None:
        if self.phase == GamePhase.NOT_STARTED:
            raise GameNotStarted("Tiles have not been dealt")
        if self.phase == GamePhase.ENDED:
            raise GameEnded("The game has ended")

    def _validate_discard_index(self, index: Optional[int]) -> None:
        if index is None:
            raise IllegalDiscard("No hand index selected")
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise IllegalDiscard(f"Hand index must be an int, got {index!r}")
        hand_size = len(self.players[self.current].hand)
        if not 0 <= index < hand_size:
            raise IllegalDiscard(f"Hand index {index} out of range (hand has {hand_size} tiles)")

    def _validate_decision(self, decision: ClaimDecision) -> None:
        claim = self.claim
        if decision.response == ClaimResponse.PENG and claim.peng is None:
            raise IllegalClaimResponse("Peng is not offered")
        if decision.response == ClaimResponse.CHI:
            index = decision.chi_index
            if isinstance(index, bool) or not isinstance(index, numbers.Integral):
                raise IllegalClaimResponse(f"Chi option index must be an int, got {index!r}")
            chi_options = claim.chi_options
            if not chi_options:
                raise IllegalClaimResponse("Chi is not offered")
            if not 0 <= decision.chi_index < len(chi_options):
                raise IllegalClaimResponse(
                    f"Chi option {decision.chi_index} out of range ({len(chi_options)} offered)"
                )

    # ------------------------------------------------------------------

    def copy(self) -> 'Game':
        """Deep copy for what-if exploration; listeners are not carried over."""
        new_game = Game.__new__(Game)
        new_game.rules = self.rules
        new_game.num_players = self.num_players
        new_game.seed = self.seed
        new_game.seats = copy.deepcopy(self.seats)
        new_game.wall = self.wall.copy()
        new_game.players = [p.copy() for p in self.players]
        new_game.phase = self.phase
        new_game.dealer = self.dealer
        new_game.current = self.current
        new_game.turn_count = self.turn_count
        new_game.discard_pile = list(self.discard_pile)
        new_game.last_discard = self.last_discard
        new_game.last_discard_player = self.last_discard_player
        new_game.claim = self.claim
        new_game.log = self.log.copy()
        return new_game

    def __repr__(self) -> str:
        return f"Game(phase={self.phase.name}, current={self.current}, wall={self.wall.remaining})"
