"""Match quality: how close (and therefore informative) a pairing is"""

import math

from ..constants import BETA
from .gaussian import sq
from .model import Rating


def match_quality(r1: Rating, r2: Rating, beta: float = BETA) -> float:
    """Symmetric closeness score in (0, 1], 1 when the means coincide.

    A given mean gap scores lower as the combined uncertainty shrinks, i.e.
    the same gap is judged more decisive once both items are well known.
    """
    denominator = 2 * sq(beta) + sq(r1.sigma) + sq(r2.sigma)
    return math.exp(-sq(r1.mu - r2.mu) / (2 * denominator))
