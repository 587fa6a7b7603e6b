"""Ledger records and the persisted envelope"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import orjson

from ..constants import DB_VERSION, INITIAL_MU, INITIAL_SIGMA
from ..errors import LedgerError
from ..rating.model import Rating, create_initial_rating


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ImageRecord:
    """One image in the library"""
    filename: str
    rating: Rating = field(default_factory=create_initial_rating)
    matches: int = 0
    impressions: int = 0  # times shown, including skips
    last_played: int = 0  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "rating": self.rating.to_dict(),
            "matches": self.matches,
            "impressions": self.impressions,
            "lastPlayed": self.last_played,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], filename: Optional[str] = None) -> ImageRecord:
        """Build a record from persisted data, filling in missing counters.

        filename is the ledger key the record is stored under and wins over
        the name stored inside the record.
        """
        name = filename or data.get("filename")
        if not name:
            raise LedgerError("Ledger record has no filename")

        raw_rating = data.get("rating") or {}
        try:
            mu = float(raw_rating.get("mu", INITIAL_MU))
            sigma = float(raw_rating.get("sigma", INITIAL_SIGMA))
            matches = int(data.get("matches") or 0)
            impressions = int(data.get("impressions") or 0)
            last_played = int(data.get("lastPlayed") or 0)
        except (TypeError, ValueError, AttributeError) as e:
            raise LedgerError(f"Invalid ledger record for {name}: {e}") from e

        if not math.isfinite(mu) or not math.isfinite(sigma) or sigma <= 0:
            raise LedgerError(f"Invalid rating for {name}: mu={mu} sigma={sigma}")

        return cls(
            filename=name,
            rating=Rating(mu=mu, sigma=sigma),
            matches=matches,
            impressions=impressions,
            last_played=last_played,
        )


@dataclass
class RankingDatabase:
    """Envelope written to the ledger file"""
    version: int = DB_VERSION
    last_updated: int = 0
    images: Dict[str, ImageRecord] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: List[ImageRecord]) -> RankingDatabase:
        return cls(
            version=DB_VERSION,
            last_updated=now_ms(),
            images={r.filename: r for r in records},
        )

    def to_json(self) -> bytes:
        payload = {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "images": {name: r.to_dict() for name, r in self.images.items()},
        }
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2)

    @classmethod
    def from_json(cls, raw: bytes) -> RankingDatabase:
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise LedgerError(f"Ledger is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise LedgerError("Ledger root must be an object")

        images_data = data.get("images")
        if images_data is None:
            images_data = {}
        if not isinstance(images_data, dict):
            raise LedgerError("Ledger 'images' must be an object")

        images = {}
        for name, record in images_data.items():
            if not isinstance(record, dict):
                raise LedgerError(f"Ledger entry for {name} must be an object")
            images[name] = ImageRecord.from_dict(record, filename=name)

        return cls(
            version=int(data.get("version") or DB_VERSION),
            last_updated=int(data.get("lastUpdated") or 0),
            images=images,
        )
