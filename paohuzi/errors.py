"""
Engine errors.

Every error is a caller-input error: the request is rejected and the game
is left exactly as it was.
"""


class RulesError(Exception):
    """Base class for rejected engine requests"""


class IllegalDiscard(RulesError, ValueError):
    """No index given, index out of range, wrong phase, or not the acting seat"""


class IllegalDraw(RulesError, ValueError):
    """Draw requested outside the Draw phase or by a seat that is not acting"""


class IllegalClaimResponse(RulesError, ValueError):
    """Peng/Chi not offered, Chi index out of range, or wrong responder"""


class GameEnded(RulesError, RuntimeError):
    """Any request after the draw pile ran out"""


class GameNotStarted(RulesError, RuntimeError):
    """Any request before the tiles were dealt"""
