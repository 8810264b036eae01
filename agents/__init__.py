"""
PaoHuZi Agents
"""

from .random_agent import RandomAgent, GreedyAgent

__all__ = [
    "RandomAgent",
    "GreedyAgent",
]
