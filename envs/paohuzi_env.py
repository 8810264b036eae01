"""
PaoHuZi Gymnasium Environment

A Gymnasium-compatible environment for training agents on the trainer's
rules engine.
"""

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from typing import Optional, Tuple, Dict, Any

from paohuzi.tiles import TileSet
from paohuzi.game import Game, GamePhase
from paohuzi.hu import can_hu
from paohuzi.rules import THREE_PLAYER_RULES, TWO_PLAYER_RULES
from paohuzi.seats import ManualSeat, RandomSeat


class PaoHuZiEnv(gym.Env):
    """
    PaoHuZi environment.

    The agent controls one seat; the other seats are random bots that draw,
    discard at random and always pass claims.

    Observation Space:
        A dictionary containing:
        - hand: (20,) int8 - Count of each tile type in hand
        - melds: (3, 20) int8 - Meld tile counts per seat
        - discards: (20,) int8 - Discard pile counts
        - last_discard: (20,) int8 - One-hot of the claimable discard
        - valid_actions: (28,) int8 - Binary mask of valid actions
        - game_info: (6,) float32 - [current_player, phase, seat,
                                     wall_remaining, turn_count, is_my_turn]

    Action Space:
        Discrete(28):
        - 0-19: Discard a tile of type 0-19
        - 20: Draw
        - 21: Pass on a claim
        - 22: Peng
        - 23-26: Chi option 0-3
        - 27: Declare Hu (hand decomposes while the agent must discard)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1}

    NUM_TILE_TYPES = TileSet.NUM_TILE_TYPES
    MAX_SEATS = 3
    ACTION_DISCARD_START = 0
    ACTION_DRAW = 20
    ACTION_PASS = 21
    ACTION_PENG = 22
    ACTION_CHI_START = 23
    MAX_CHI_OPTIONS = 4
    ACTION_HU = 27
    NUM_ACTIONS = 28

    def __init__(
        self,
        player_idx: int = 0,
        num_players: int = 3,
        seed: Optional[int] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 1000,
    ):
        """
        Args:
            player_idx: Seat controlled by the agent
            num_players: 2 or 3
            seed: Random seed for reproducibility
            render_mode: "human" or "ansi"
            max_episode_steps: Truncate after this many steps
        """
        super().__init__()

        self.rules = THREE_PLAYER_RULES if num_players == 3 else TWO_PLAYER_RULES
        if not 0 <= player_idx < self.rules.num_players:
            raise ValueError(f"player_idx must be a seat index, got {player_idx}")
        self.player_idx = player_idx
        self.render_mode = render_mode
        self.max_episode_steps = max_episode_steps
        self.game = self._make_game(seed)

        n = self.NUM_TILE_TYPES
        self.observation_space = spaces.Dict({
            "hand": spaces.Box(low=0, high=4, shape=(n,), dtype=np.int8),
            "melds": spaces.Box(low=0, high=4, shape=(self.MAX_SEATS, n), dtype=np.int8),
            "discards": spaces.Box(low=0, high=4, shape=(n,), dtype=np.int8),
            "last_discard": spaces.Box(low=0, high=1, shape=(n,), dtype=np.int8),
            "valid_actions": spaces.Box(low=0, high=1, shape=(self.NUM_ACTIONS,), dtype=np.int8),
            "game_info": spaces.Box(low=-1, high=200, shape=(6,), dtype=np.float32),
        })
        self.action_space = spaces.Discrete(self.NUM_ACTIONS)

        self._episode_reward = 0.0
        self._episode_length = 0
        self._declared_hu = False

    def _make_game(self, seed: Optional[int]) -> Game:
        seats = []
        for seat in range(self.rules.num_players):
            if seat == self.player_idx:
                seats.append(ManualSeat())
            else:
                seats.append(RandomSeat(None if seed is None else seed + seat))
        return Game(self.rules, seats=seats, seed=seed)

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(2**31 - 1))

        self.game = self._make_game(seed)
        self.game.start_game()

        self._episode_reward = 0.0
        self._episode_length = 0
        self._declared_hu = False

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict]:
        self._episode_length += 1
        action = int(action)
        reward = 0.0

        mask = self._get_valid_actions_mask()
        valid_indices = np.flatnonzero(mask)
        if len(valid_indices) == 0:
            # Nothing to do: the game is over
            return self._get_observation(), reward, True, False, self._get_info()

        if not 0 <= action < self.NUM_ACTIONS or mask[action] != 1:
            reward = -1.0
            action = int(self.np_random.choice(valid_indices))

        if action == self.ACTION_HU:
            self._declared_hu = True
            reward += 1.0
        else:
            self._apply_action(action)

        self._episode_reward += reward
        terminated = self._declared_hu or self.game.phase == GamePhase.ENDED
        truncated = self._episode_length >= self.max_episode_steps

        info = self._get_info()
        if terminated or truncated:
            info["episode"] = {
                "r": self._episode_reward,
                "l": self._episode_length,
                "hu": self._declared_hu,
            }
        return self._get_observation(), reward, terminated, truncated, info

    def _apply_action(self, action: int) -> None:
        seat = self.player_idx
        if action < self.ACTION_DRAW:
            hand = self.game.players[seat].hand
            index = next(i for i, t in enumerate(hand) if t.tile_index == action)
            self.game.discard(index, seat=seat)
        elif action == self.ACTION_DRAW:
            self.game.draw(seat=seat)
        elif action == self.ACTION_PASS:
            self.game.respond_pass(seat=seat)
        elif action == self.ACTION_PENG:
            self.game.respond_peng(seat=seat)
        else:
            self.game.respond_chi(action - self.ACTION_CHI_START, seat=seat)

    def _get_valid_actions_mask(self) -> np.ndarray:
        mask = np.zeros(self.NUM_ACTIONS, dtype=np.int8)
        if self._declared_hu:
            return mask

        player = self.game.players[self.player_idx]
        for verb in self.game.valid_actions(self.player_idx):
            if verb == "discard":
                for tile in player.hand:
                    mask[self.ACTION_DISCARD_START + tile.tile_index] = 1
                if can_hu(player.hand):
                    mask[self.ACTION_HU] = 1
            elif verb == "draw":
                mask[self.ACTION_DRAW] = 1
            elif verb == "pass":
                mask[self.ACTION_PASS] = 1
            elif verb == "peng":
                mask[self.ACTION_PENG] = 1
            elif verb == "chi":
                count = min(len(self.game.claim.chi_options), self.MAX_CHI_OPTIONS)
                mask[self.ACTION_CHI_START:self.ACTION_CHI_START + count] = 1
        return mask

    def _get_observation(self) -> Dict[str, np.ndarray]:
        player = self.game.players[self.player_idx]

        melds = np.zeros((self.MAX_SEATS, self.NUM_TILE_TYPES), dtype=np.int8)
        for p_idx, p in enumerate(self.game.players):
            melds[p_idx] = p.get_melds_count_array()

        discards = TileSet(self.game.discard_pile).to_count_array()

        last_discard = np.zeros(self.NUM_TILE_TYPES, dtype=np.int8)
        if self.game.last_discard is not None:
            last_discard[self.game.last_discard.tile_index] = 1

        game_info = np.array([
            self.game.current,
            self.game.phase.value,
            self.player_idx,
            self.game.wall.remaining,
            self.game.turn_count,
            1 if self.game.decision_seat() == self.player_idx else 0,
        ], dtype=np.float32)

        return {
            "hand": player.get_hand_count_array(),
            "melds": melds,
            "discards": discards,
            "last_discard": last_discard,
            "valid_actions": self._get_valid_actions_mask(),
            "game_info": game_info,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "turn": self.game.turn_count,
            "phase": self.game.phase.name,
            "current_player": self.game.current,
            "wall_remaining": self.game.wall.remaining,
            "tile_total": self.game.tile_total(),
        }

    def render(self) -> Optional[str]:
        if self.render_mode == "human":
            print(self._render_ansi())
        elif self.render_mode == "ansi":
            return self._render_ansi()
        return None

    def _render_ansi(self) -> str:
        lines = []
        lines.append(f"=== PaoHuZi - Turn {self.game.turn_count} ===")
        lines.append(f"Phase: {self.game.phase.name}")
        lines.append(f"Current Player: {self.game.current}")
        lines.append(f"Wall Remaining: {self.game.wall.remaining}")

        if self.game.last_discard:
            lines.append(f"Last Discard: {self.game.last_discard} (P{self.game.last_discard_player})")

        lines.append("")
        player = self.game.players[self.player_idx]
        lines.append(f"--- Your Hand (Player {self.player_idx}) ---")
        lines.append(f"Hand: {player.hand}")
        if player.melds:
            lines.append(f"Melds: {' | '.join(str(m) for m in player.melds)}")

        lines.append("")
        lines.append("--- Valid Actions ---")
        for verb in self.game.valid_actions(self.player_idx):
            lines.append(f"  {verb}")

        return "\n".join(lines)

    def close(self):
        pass


def register_envs():
    """Register the PaoHuZi environment with Gymnasium."""
    gym.register(
        id="PaoHuZi-v0",
        entry_point="envs.paohuzi_env:PaoHuZiEnv",
        max_episode_steps=1000,
    )
