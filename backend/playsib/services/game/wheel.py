import math
import random
import threading
from typing import NamedTuple, Optional, Sequence

# Segments are drawn from -90 degrees (12 o'clock) while rotation is measured
# from 3 o'clock; the pointer sits at the top.
POINTER_OFFSET_DEG = 90.0


class SpinResult(NamedTuple):
    rotation: float
    index: int
    category: str


def winning_index(rotation: float, segments: int) -> int:
    """Index of the segment under the top pointer for a cumulative rotation."""
    if segments < 1:
        raise ValueError('wheel needs at least one segment')
    segment_width = 360.0 / segments
    normalized = (360.0 - (rotation % 360.0) + POINTER_OFFSET_DEG) % 360.0
    index = int(math.floor(normalized / segment_width))
    if index >= segments:
        index = 0
    return index


class CategoryWheel:
    """Random category picker with a persistent cumulative rotation.

    Only the rotation is kept between spins, so any result can be
    re-derived from ``SpinResult.rotation`` with :func:`winning_index`.
    """

    def __init__(self, categories: Sequence[str], min_spins: int = 4, max_spins: int = 7,
                 rng: Optional[random.Random] = None, rotation: float = 0.0):
        if len(categories) < 2:
            raise ValueError('wheel needs at least two categories')
        if min_spins < 0 or max_spins < min_spins:
            raise ValueError('invalid spin range')
        self.categories = list(categories)
        self.min_spins = min_spins
        self.max_spins = max_spins
        self.rotation = float(rotation)
        self.spinning = False
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    @property
    def segment_width(self) -> float:
        return 360.0 / len(self.categories)

    def category_at(self, rotation: float) -> str:
        return self.categories[winning_index(rotation, len(self.categories))]

    def spin(self) -> Optional[SpinResult]:
        """Start a spin and return where it lands, or None if one is in progress.

        The wheel stays ``spinning`` until :meth:`settle` is called.
        """
        with self._lock:
            if self.spinning:
                return None
            self.spinning = True
            turns = self._rng.randint(self.min_spins, self.max_spins)
            offset = self._rng.uniform(0.0, 360.0) % 360.0
            self.rotation += turns * 360.0 + offset
            index = winning_index(self.rotation, len(self.categories))
            return SpinResult(self.rotation, index, self.categories[index])

    def settle(self) -> None:
        with self._lock:
            self.spinning = False
