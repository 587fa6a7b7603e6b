"""Gaussian skill ratings, match quality and library progress"""

from .gaussian import pdf, cdf, erf
from .model import Rating, RatingCalculator, create_initial_rating, update_ratings
from .quality import match_quality
from .progress import ProgressStats, library_progress, progress_stats

__all__ = [
    'pdf',
    'cdf',
    'erf',
    'Rating',
    'RatingCalculator',
    'create_initial_rating',
    'update_ratings',
    'match_quality',
    'ProgressStats',
    'library_progress',
    'progress_stats',
]
