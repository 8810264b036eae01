"""
Baseline agents for the PaoHuZi environment.

Both agents act on the environment's dictionary observation and only pick
actions the ``valid_actions`` mask allows.
"""

import numpy as np
from typing import Dict, Optional


class RandomAgent:
    """
    Random agent that selects uniformly from valid actions.

    This serves as a baseline for comparison with trained agents.
    """

    ACTION_PASS = 21

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Random seed for reproducibility
        """
        self.rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, np.ndarray]) -> int:
        """
        Select an action given the current observation.

        Returns:
            Action index
        """
        valid_indices = np.flatnonzero(observation["valid_actions"])
        if len(valid_indices) == 0:
            return self.ACTION_PASS
        return int(self.rng.choice(valid_indices))

    def predict(self, observation: Dict[str, np.ndarray], deterministic: bool = True):
        """Predict action (SB3-style interface). Returns (action, state)."""
        return self.act(observation), None

    def reset(self):
        pass

    def __repr__(self) -> str:
        return "RandomAgent()"


class GreedyAgent:
    """
    Claims whatever it can and declares Hu as soon as the hand allows.

    Priority: Hu > Peng > Chi > Draw > Discard (random) > Pass
    """

    ACTION_DISCARD_START = 0
    ACTION_DRAW = 20
    ACTION_PASS = 21
    ACTION_PENG = 22
    ACTION_CHI_START = 23
    ACTION_HU = 27

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, np.ndarray]) -> int:
        valid_actions = observation["valid_actions"]
        valid_indices = np.flatnonzero(valid_actions)
        if len(valid_indices) == 0:
            return self.ACTION_PASS

        for action in (self.ACTION_HU, self.ACTION_PENG, self.ACTION_CHI_START, self.ACTION_DRAW):
            if valid_actions[action] == 1:
                return action

        discards = valid_indices[valid_indices < self.ACTION_DRAW]
        if len(discards) > 0:
            return int(self.rng.choice(discards))
        return self.ACTION_PASS

    def predict(self, observation: Dict[str, np.ndarray], deterministic: bool = True):
        return self.act(observation), None

    def reset(self):
        pass

    def __repr__(self) -> str:
        return "GreedyAgent()"
