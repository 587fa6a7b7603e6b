"""Library-wide confidence reporting"""

from dataclasses import dataclass
from typing import Sequence

from ..constants import INITIAL_SIGMA, TARGET_SIGMA


@dataclass
class ProgressStats:
    """Snapshot shown to the user while ranking"""
    confidence: float  # 0.0-1.0
    ranked_count: int  # images with at least one resolved match
    total_count: int


def library_progress(images: Sequence, initial_sigma: float = INITIAL_SIGMA,
                     target_sigma: float = TARGET_SIGMA) -> float:
    """Mean normalised uncertainty reduction over all images.

    Each image contributes (initial - sigma) / (initial - target), clamped to
    [0, 1]. An empty library reports 0.
    """
    if not images:
        return 0.0

    total_travel = initial_sigma - target_sigma
    if total_travel <= 0:
        raise ValueError("target_sigma must be below initial_sigma")
    total = 0.0
    for img in images:
        travel = initial_sigma - img.rating.sigma
        total += max(0.0, min(1.0, travel / total_travel))

    return total / len(images)


def progress_stats(images: Sequence, initial_sigma: float = INITIAL_SIGMA,
                   target_sigma: float = TARGET_SIGMA) -> ProgressStats:
    return ProgressStats(
        confidence=library_progress(images, initial_sigma, target_sigma),
        ranked_count=sum(1 for img in images if img.matches > 0),
        total_count=len(images),
    )
