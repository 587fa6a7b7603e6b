"""Next-pair selection: bootstrap under-played items, then maximise information"""

import logging
import random
from typing import Collection, List, Optional, Sequence, Tuple

from ..constants import BETA
from ..rating.quality import match_quality

logger = logging.getLogger(__name__)


class PairSelector:
    """Two-phase pair selection heuristic.

    Phase 1 (coverage) looks for two items with fewer than
    ``bootstrap_matches`` resolved matches that were not shown recently.
    Phase 2 (exploitation) anchors on the most uncertain, least shown item of
    a random sample and pairs it with the sampled item of closest skill.

    Records are read, never modified; the caller counts impressions.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 max_probes: int = 100,
                 bootstrap_matches: int = 3,
                 sample_size: int = 50,
                 recent_retries: int = 5,
                 impression_weight: float = 0.1,
                 beta: float = BETA):
        self.rng = rng if rng is not None else random.Random()
        self.max_probes = max_probes
        self.bootstrap_matches = bootstrap_matches
        self.sample_size = sample_size
        self.recent_retries = recent_retries
        self.impression_weight = impression_weight
        self.beta = beta

    def select(self, images: Sequence, recent: Collection[str] = ()) -> Optional[Tuple]:
        """Return two distinct records, or None with fewer than two images"""
        if len(images) < 2:
            return None

        unranked = self._find_unranked(images, recent)
        if len(unranked) >= 2:
            return unranked[0], unranked[1]

        return self._select_informative(images, recent)

    def _pick(self, images: Sequence):
        return images[self.rng.randrange(len(images))]

    def _find_unranked(self, images: Sequence, recent: Collection[str]) -> List:
        found = []
        seen = set()
        for _ in range(self.max_probes):
            if len(found) >= 2:
                break
            candidate = self._pick(images)
            if candidate.matches >= self.bootstrap_matches:
                continue
            if candidate.filename in recent or candidate.filename in seen:
                continue
            seen.add(candidate.filename)
            found.append(candidate)
        return found

    def _score(self, record) -> float:
        # Higher uncertainty and fewer prior views rank first
        return record.rating.sigma - record.impressions * self.impression_weight

    def _sample(self, images: Sequence, recent: Collection[str]) -> List:
        candidates = []
        for _ in range(min(len(images), self.sample_size)):
            candidate = self._pick(images)
            retries = 0
            while candidate.filename in recent and retries < self.recent_retries:
                candidate = self._pick(images)
                retries += 1
            candidates.append(candidate)
        return candidates

    def _select_informative(self, images: Sequence, recent: Collection[str]) -> Tuple:
        candidates = self._sample(images, recent)
        # sorted() is stable, ties keep sampling order
        candidates = sorted(candidates, key=self._score, reverse=True)

        p1 = candidates[0]
        best_p2 = candidates[1] if len(candidates) > 1 else None
        best_quality = -1.0

        for p2 in candidates[1:]:
            if p2.filename == p1.filename:
                continue
            q = match_quality(p1.rating, p2.rating, self.beta)
            if q > best_quality:
                best_quality = q
                best_p2 = p2

        if best_p2 is None or best_p2.filename == p1.filename:
            logger.debug("Sample collapsed onto %s, drawing opponent from full library", p1.filename)
            best_p2 = self._pick(images)
            while best_p2.filename == p1.filename:
                best_p2 = self._pick(images)

        return p1, best_p2
