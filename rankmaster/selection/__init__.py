"""Pair selection and recency tracking"""

from .pairing import PairSelector
from .recency import RecentItems

__all__ = [
    'PairSelector',
    'RecentItems',
]
