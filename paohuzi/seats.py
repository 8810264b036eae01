"""
Decision sources.

Every seat is driven by a DecisionSource. The engine asks the seat's source
for its next move; a source that cannot answer yet returns None (or False
for draws) and the engine waits for the matching external verb
(``draw``, ``discard``, ``respond_*``) instead.
"""

from typing import TYPE_CHECKING, Optional
import numpy as np

from .claims import ClaimCandidate, ClaimDecision, ClaimResponse

if TYPE_CHECKING:
    from .game import Game


class DecisionSource:
    """
    Capability interface for a seat.

    Attributes:
        interactive: Decisions arrive from outside; the seat's hand is
            observable in snapshots.
    """

    interactive = False

    def ready_to_draw(self, game: 'Game', seat: int) -> bool:
        """Whether the engine should draw for this seat right away."""
        raise NotImplementedError

    def choose_discard(self, game: 'Game', seat: int) -> Optional[int]:
        """Hand index to discard, or None to wait for ``Game.discard``."""
        raise NotImplementedError

    def respond_to_claim(self, game: 'Game', candidate: ClaimCandidate) -> Optional[ClaimDecision]:
        """Claim decision, or None to wait for ``Game.respond_*``."""
        raise NotImplementedError

    def reset(self) -> None:
        pass


class ManualSeat(DecisionSource):
    """A human seat: every decision comes through the game's verbs."""

    interactive = True

    def ready_to_draw(self, game: 'Game', seat: int) -> bool:
        return False

    def choose_discard(self, game: 'Game', seat: int) -> Optional[int]:
        return None

    def respond_to_claim(self, game: 'Game', candidate: ClaimCandidate) -> Optional[ClaimDecision]:
        return None

    def __repr__(self) -> str:
        return "ManualSeat()"


class RandomSeat(DecisionSource):
    """
    Automated seat: draws at once, discards a uniformly random hand index,
    and always passes on claims.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def ready_to_draw(self, game: 'Game', seat: int) -> bool:
        return True

    def choose_discard(self, game: 'Game', seat: int) -> Optional[int]:
        hand_size = game.players[seat].num_tiles_in_hand
        return int(self.rng.integers(hand_size))

    def respond_to_claim(self, game: 'Game', candidate: ClaimCandidate) -> Optional[ClaimDecision]:
        return ClaimDecision(ClaimResponse.PASS)

    def reset(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def __repr__(self) -> str:
        return f"RandomSeat(seed={self.seed})"
