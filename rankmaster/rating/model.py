"""Pairwise Gaussian skill update (TrueSkill-style two-player, no draw margin)"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from ..constants import (
    BETA, TAU, INITIAL_MU, INITIAL_SIGMA, DRAW_SHRINK, MIN_SIGMA,
)
from .gaussian import pdf, cdf, sq

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rating:
    """Gaussian belief about an item's skill"""
    mu: float     # mean skill
    sigma: float  # uncertainty (standard deviation), always > 0

    def to_dict(self) -> dict:
        return {"mu": self.mu, "sigma": self.sigma}


def create_initial_rating() -> Rating:
    return Rating(mu=INITIAL_MU, sigma=INITIAL_SIGMA)


class RatingCalculator:
    """Closed-form Bayesian update for a single win/loss outcome"""

    def __init__(self, beta: float = BETA, tau: float = TAU):
        self.beta = beta  # performance variance scale
        self.tau = tau    # per-match dynamics noise

    def update(self, winner: Rating, loser: Rating,
               is_draw: bool = False) -> Tuple[Rating, Rating]:
        """Return revised (winner, loser) ratings.

        Inputs are not modified. Storing the result, counting the match and
        stamping the play time are left to the caller.

        Args:
            winner: Rating of the item that was picked
            loser: Rating of the item that was not picked
            is_draw: Use the legacy draw path (fixed 5% sigma shrink)
        """
        if is_draw:
            return self._draw(winner), self._draw(loser)

        c = math.sqrt(2 * sq(self.beta) + sq(winner.sigma) + sq(loser.sigma))
        t = (winner.mu - loser.mu) / c
        v, w = self._v_w(t)

        new_winner = Rating(
            mu=winner.mu + (sq(winner.sigma) / c) * v,
            sigma=self._posterior_sigma(winner.sigma, c, w),
        )
        new_loser = Rating(
            mu=loser.mu - (sq(loser.sigma) / c) * v,
            sigma=self._posterior_sigma(loser.sigma, c, w),
        )
        return new_winner, new_loser

    def _v_w(self, t: float) -> Tuple[float, float]:
        """Mean and variance correction factors for a win at normalised gap t"""
        denom = cdf(t)
        if denom <= 0.0:
            # cdf underflowed on a huge upset; pdf(t)/cdf(t) tends to -t
            v = -t
            return v, 1.0
        v = pdf(t) / denom
        return v, v * (v + t)

    def _posterior_sigma(self, sigma: float, c: float, w: float) -> float:
        radicand = sq(sigma) * (1 - (sq(sigma) / sq(c)) * w)
        if radicand < 0.0:
            logger.debug("Clamping negative sigma radicand %.6g (sigma=%.4f, w=%.6f)",
                         radicand, sigma, w)
            radicand = 0.0
        return math.sqrt(radicand + sq(self.tau))

    @staticmethod
    def _draw(rating: Rating) -> Rating:
        # Legacy behaviour: no principled draw update, sigma shrinks by 5%
        return Rating(mu=rating.mu, sigma=max(rating.sigma * DRAW_SHRINK, MIN_SIGMA))


_default_calculator = RatingCalculator()


def update_ratings(winner: Rating, loser: Rating,
                   is_draw: bool = False) -> Tuple[Rating, Rating]:
    """Update with the default constants"""
    return _default_calculator.update(winner, loser, is_draw)
