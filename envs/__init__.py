"""
PaoHuZi Gymnasium Environment
"""

from .paohuzi_env import PaoHuZiEnv, register_envs

__all__ = ["PaoHuZiEnv", "register_envs"]
