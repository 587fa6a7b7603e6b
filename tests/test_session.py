"""Tests for the ranking session"""

import random

import orjson
import pytest
import rankmaster.library.session as session_module
from rankmaster.config import RankMasterConfig, SessionConfig
from rankmaster.constants import DB_FILENAME, INITIAL_MU
from rankmaster.errors import SessionError
from rankmaster.library.records import ImageRecord
from rankmaster.library.session import ComparisonPair, RankingSession, Vote
from rankmaster.rating.model import Rating
from rankmaster.selection.pairing import PairSelector


def _images(n):
    return [ImageRecord(filename=f"img_{i:02d}.jpg") for i in range(n)]


def _session(tmp_path, n=6, autosave_interval=0, seed=11):
    config = RankMasterConfig(session=SessionConfig(autosave_interval=autosave_interval))
    return RankingSession(tmp_path, _images(n), config=config,
                          selector=PairSelector(rng=random.Random(seed)))


class TestSessionStart:
    """Test session setup and pair queueing"""

    def test_needs_two_images(self, tmp_path):
        """A library with fewer than two images cannot be ranked"""
        session = _session(tmp_path, n=1)
        with pytest.raises(SessionError):
            session.start()

    def test_start_queues_two_pairs(self, tmp_path):
        """Start fills the current and lookahead pairs"""
        session = _session(tmp_path)
        current = session.start()
        assert isinstance(current, ComparisonPair)
        assert session.current is current
        assert session.lookahead is not None
        assert current.left.filename != current.right.filename

    def test_impressions_counted_once(self, tmp_path):
        """Each generated pair adds one impression per member"""
        session = _session(tmp_path)
        session.start()
        assert sum(img.impressions for img in session.images) == 4

    def test_pairs_marked_recent(self, tmp_path):
        """Both members of generated pairs enter the recency set"""
        session = _session(tmp_path)
        session.start()
        for pair in (session.current, session.lookahead):
            assert pair.left.filename in session.recent
            assert pair.right.filename in session.recent

    def test_open_directory(self, tmp_path):
        """open() scans the directory for images"""
        for name in ("a.jpg", "b.png", "c.txt"):
            (tmp_path / name).write_bytes(b"x")
        session = RankingSession.open(tmp_path)
        assert sorted(img.filename for img in session.images) == ["a.jpg", "b.png"]


class TestVoting:
    """Test vote resolution"""

    def test_vote_requires_pair(self, tmp_path):
        """Voting before start() is an error"""
        session = _session(tmp_path)
        with pytest.raises(SessionError):
            session.vote(Vote.LEFT)

    def test_invalid_choice(self, tmp_path):
        """Unknown choices are rejected"""
        session = _session(tmp_path)
        session.start()
        with pytest.raises(ValueError):
            session.vote("middle")

    @pytest.mark.parametrize("choice", [Vote.LEFT, "right"])
    def test_vote_updates_both(self, tmp_path, choice):
        """Winner gains, loser drops, both count a match"""
        session = _session(tmp_path)
        pair = session.start()
        lookahead = session.lookahead
        if Vote(choice) is Vote.LEFT:
            winner, loser = pair.left, pair.right
        else:
            winner, loser = pair.right, pair.left

        session.vote(choice)

        assert winner.rating.mu > INITIAL_MU
        assert loser.rating.mu < INITIAL_MU
        assert winner.matches == 1 and loser.matches == 1
        assert winner.last_played > 0 and loser.last_played > 0
        assert session.session_votes == 1
        assert session.current is lookahead

    def test_skip(self, tmp_path):
        """Skipping advances without touching ratings"""
        session = _session(tmp_path)
        pair = session.start()
        session.vote(Vote.SKIP)
        assert pair.left.matches == 0 and pair.right.matches == 0
        assert pair.left.rating.mu == INITIAL_MU
        assert session.session_votes == 0
        assert sum(img.impressions for img in session.images) == 6

    def test_autosave(self, tmp_path):
        """The ledger is written every autosave_interval votes"""
        session = _session(tmp_path, autosave_interval=2)
        session.start()
        session.vote(Vote.LEFT)
        assert not (tmp_path / DB_FILENAME).exists()
        session.vote(Vote.SKIP)
        assert not (tmp_path / DB_FILENAME).exists()
        session.vote(Vote.RIGHT)
        data = orjson.loads((tmp_path / DB_FILENAME).read_bytes())
        assert len(data["images"]) == 6
        assert sum(r["matches"] for r in data["images"].values()) == 4

    def test_autosave_failure_still_advances(self, tmp_path, monkeypatch, caplog):
        """A failed auto-save is logged and the vote still completes"""
        def fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(session_module, "save_database", fail)
        session = _session(tmp_path, autosave_interval=1)
        pair = session.start()
        lookahead = session.lookahead
        session.vote(Vote.LEFT)
        assert pair.left.matches == 1 and pair.right.matches == 1
        assert session.session_votes == 1
        assert session.current is lookahead
        assert "Auto-save failed" in caplog.text

    def test_many_rounds(self, tmp_path):
        """A long session keeps ratings valid and converges"""
        session = _session(tmp_path, n=8)
        session.start()
        strength = {img.filename: i for i, img in enumerate(session.images)}
        for _ in range(300):
            pair = session.current
            left_wins = strength[pair.left.filename] > strength[pair.right.filename]
            session.vote(Vote.LEFT if left_wins else Vote.RIGHT)
        assert all(img.rating.sigma > 0 for img in session.images)
        assert session.progress().confidence > 0.5
        board = [strength[img.filename] for img in session.leaderboard()]
        assert board.index(7) < board.index(0)
        assert sum(board[:4]) > sum(board[4:])


class TestRemoveRestore:
    """Test dropping and restoring records mid-session"""

    def test_remove_discards_stale_pairs(self, tmp_path):
        """Removing a queued record drops it from every pair and the recency set"""
        session = _session(tmp_path)
        session.start()
        name = session.lookahead.left.filename

        removed = session.remove(name)

        assert removed.filename == name
        assert name not in [img.filename for img in session.images]
        assert name not in session.recent
        for pair in (session.current, session.lookahead):
            assert pair is None or not pair.contains(name)

    def test_remove_current(self, tmp_path):
        """Removing a record on screen advances to another pair"""
        session = _session(tmp_path)
        session.start()
        name = session.current.right.filename
        session.remove(name)
        assert session.current is not None
        assert not session.current.contains(name)

    def test_remove_unknown(self, tmp_path):
        """Removing an unknown filename is an error"""
        session = _session(tmp_path)
        with pytest.raises(SessionError):
            session.remove("nope.jpg")

    def test_restore(self, tmp_path):
        """A removed record can be restored once"""
        session = _session(tmp_path)
        session.start()
        record = session.remove("img_03.jpg")
        session.restore(record)
        assert record in session.images
        with pytest.raises(SessionError):
            session.restore(record)


class TestReporting:
    """Test progress, leaderboard and saving"""

    def test_leaderboard_order(self, tmp_path):
        """Leaderboard sorts by mean, best first"""
        images = [
            ImageRecord("low.jpg", Rating(10.0, 2.0)),
            ImageRecord("high.jpg", Rating(40.0, 2.0)),
            ImageRecord("mid.jpg", Rating(25.0, 2.0)),
        ]
        session = RankingSession(tmp_path, images)
        assert [img.filename for img in session.leaderboard()] == ["high.jpg", "mid.jpg", "low.jpg"]
        assert [img.filename for img in session.leaderboard(1)] == ["high.jpg"]

    def test_progress(self, tmp_path):
        """Progress reflects the working set"""
        session = _session(tmp_path, n=4)
        stats = session.progress()
        assert stats.total_count == 4
        assert stats.ranked_count == 0
        assert stats.confidence == 0.0

    def test_save(self, tmp_path):
        """save() writes the ledger for the working set"""
        session = _session(tmp_path, n=3)
        path = session.save()
        data = orjson.loads(path.read_bytes())
        assert sorted(data["images"]) == ["img_00.jpg", "img_01.jpg", "img_02.jpg"]
