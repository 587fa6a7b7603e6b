"""Ranking session: drives pair selection, votes and persistence for one library"""

from __future__ import annotations

import logging
import os
import pathlib
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from ..config import RankMasterConfig
from ..errors import SessionError
from ..logging_setup import log_event
from ..rating.model import RatingCalculator
from ..rating.progress import ProgressStats, progress_stats
from ..selection.pairing import PairSelector
from ..selection.recency import RecentItems
from .ledger import save_database, scan_directory
from .records import ImageRecord, now_ms

logger = logging.getLogger(__name__)


class Vote(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    SKIP = "skip"


@dataclass
class ComparisonPair:
    left: ImageRecord
    right: ImageRecord

    def contains(self, filename: str) -> bool:
        return filename in (self.left.filename, self.right.filename)


class RankingSession:
    """Holds the working set of records and the pairs currently queued.

    Votes must be resolved one at a time. Besides the pair on screen the
    session keeps one lookahead pair; removing a record that the lookahead
    references discards it.
    """

    def __init__(self, directory: Union[str, os.PathLike], images: List[ImageRecord],
                 config: Optional[RankMasterConfig] = None,
                 selector: Optional[PairSelector] = None,
                 calculator: Optional[RatingCalculator] = None):
        self.directory = pathlib.Path(directory)
        self.images = list(images)
        self.config = config or RankMasterConfig()

        pairing = self.config.pairing
        if selector is None:
            selector = PairSelector(
                rng=random.Random(pairing.seed),
                max_probes=pairing.max_probes,
                bootstrap_matches=pairing.bootstrap_matches,
                sample_size=pairing.sample_size,
                recent_retries=pairing.recent_retries,
                impression_weight=pairing.impression_weight,
                beta=self.config.rating.beta,
            )
        self.selector = selector
        self.calculator = calculator or RatingCalculator(
            beta=self.config.rating.beta, tau=self.config.rating.tau,
        )
        self.recent = RecentItems(pairing.recent_capacity)

        self.current: Optional[ComparisonPair] = None
        self.lookahead: Optional[ComparisonPair] = None
        self.session_votes = 0

    @classmethod
    def open(cls, directory: Union[str, os.PathLike],
             config: Optional[RankMasterConfig] = None, **kwargs) -> RankingSession:
        """Scan a directory and build a session over its images"""
        config = config or RankMasterConfig()
        result = scan_directory(directory, config.session.db_filename)
        return cls(directory, result.images, config=config, **kwargs)

    def start(self) -> ComparisonPair:
        if len(self.images) < 2:
            raise SessionError(f"{self.directory} contains fewer than 2 supported images")
        self.current = self.next_pair()
        self.lookahead = self.next_pair()
        log_event("session", "start", directory=str(self.directory), images=len(self.images))
        return self.current

    def next_pair(self) -> Optional[ComparisonPair]:
        """Select a pair, count one impression each and mark both as recent"""
        pair = self.selector.select(self.images, self.recent)
        if pair is None:
            return None

        left, right = pair
        left.impressions += 1
        right.impressions += 1
        self.recent.add(left.filename)
        self.recent.add(right.filename)
        return ComparisonPair(left, right)

    def advance(self) -> Optional[ComparisonPair]:
        """Promote the lookahead pair and queue a new one"""
        if self.lookahead is None:
            self.current = self.next_pair()
        else:
            self.current = self.lookahead
        self.lookahead = self.next_pair()
        return self.current

    def vote(self, choice: Union[Vote, str]) -> Optional[ComparisonPair]:
        """Resolve the current pair and move on to the next one"""
        choice = Vote(choice)
        if self.current is None:
            raise SessionError("No pair to vote on; call start() first")

        if choice is not Vote.SKIP:
            if choice is Vote.LEFT:
                winner, loser = self.current.left, self.current.right
            else:
                winner, loser = self.current.right, self.current.left
            self._record_result(winner, loser)

        return self.advance()

    def _record_result(self, winner: ImageRecord, loser: ImageRecord) -> None:
        new_winner, new_loser = self.calculator.update(winner.rating, loser.rating)
        played_at = now_ms()

        winner.rating = new_winner
        winner.matches += 1
        winner.last_played = played_at

        loser.rating = new_loser
        loser.matches += 1
        loser.last_played = played_at

        self.session_votes += 1
        log_event("session", "vote", winner=winner.filename, loser=loser.filename,
                  winner_mu=new_winner.mu, loser_mu=new_loser.mu,
                  votes=self.session_votes)

        interval = self.config.session.autosave_interval
        if interval and self.session_votes % interval == 0:
            try:
                self.save()
            except OSError:
                logger.exception("Auto-save failed after %d votes", self.session_votes)

    def remove(self, filename: str) -> ImageRecord:
        """Drop a record from the working set, e.g. after its file was moved away"""
        record = self._find(filename)
        if record is None:
            raise SessionError(f"No image named {filename} in this session")

        self.images = [img for img in self.images if img.filename != filename]
        self.recent.discard(filename)

        if self.lookahead is not None and self.lookahead.contains(filename):
            self.lookahead = None
        if self.current is not None and self.current.contains(filename):
            self.advance()

        log_event("session", "remove", filename=filename, remaining=len(self.images))
        return record

    def restore(self, record: ImageRecord) -> None:
        """Put a previously removed record back into the working set"""
        if self._find(record.filename) is not None:
            raise SessionError(f"{record.filename} is already in this session")
        self.images.append(record)
        log_event("session", "restore", filename=record.filename, images=len(self.images))

    def _find(self, filename: str) -> Optional[ImageRecord]:
        for img in self.images:
            if img.filename == filename:
                return img
        return None

    def progress(self) -> ProgressStats:
        return progress_stats(self.images, target_sigma=self.config.rating.target_sigma)

    def leaderboard(self, limit: Optional[int] = None) -> List[ImageRecord]:
        """Records ordered by mean skill, best first"""
        ranked = sorted(self.images, key=lambda img: img.rating.mu, reverse=True)
        return ranked if limit is None else ranked[:limit]

    def save(self) -> pathlib.Path:
        path = save_database(self.directory, self.images, self.config.session.db_filename)
        log_event("session", "save", path=str(path), images=len(self.images),
                  votes=self.session_votes)
        return path
