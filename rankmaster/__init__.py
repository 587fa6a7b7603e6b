"""RankMaster - rank photographs through pairwise votes with Gaussian skill ratings."""

from .constants import INITIAL_MU, INITIAL_SIGMA, BETA, TAU, TARGET_SIGMA
from .rating import (
    Rating, RatingCalculator, create_initial_rating, update_ratings,
    match_quality, library_progress,
)
from .selection import PairSelector, RecentItems
from .library import ImageRecord, RankingSession, Vote

__all__ = [
    'INITIAL_MU',
    'INITIAL_SIGMA',
    'BETA',
    'TAU',
    'TARGET_SIGMA',
    'Rating',
    'RatingCalculator',
    'create_initial_rating',
    'update_ratings',
    'match_quality',
    'library_progress',
    'PairSelector',
    'RecentItems',
    'ImageRecord',
    'RankingSession',
    'Vote',
]
