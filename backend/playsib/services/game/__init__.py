"""Game domain services: the wheel, countdowns and the session loop.

This package holds pure game mechanics with no database access,
so HTTP routes and socket handlers can drive it and tests can tick it by hand.
"""
from .countdown import Countdown
from .session import AWAITING_ANSWER, AWAITING_CATEGORY, CLOSED, ENDED, REVEALING, GameSession
from .wheel import CategoryWheel, SpinResult, winning_index
