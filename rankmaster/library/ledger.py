"""Directory scanning and ledger persistence"""

from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass
from typing import List, Optional, Union

from ..constants import DB_FILENAME, SUPPORTED_EXTENSIONS
from ..errors import LedgerError
from .records import ImageRecord, RankingDatabase

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass
class ScanResult:
    images: List[ImageRecord]
    database: RankingDatabase


def is_supported(filename: str) -> bool:
    """True if the last extension is a supported image type"""
    if "." not in filename:
        return False
    return filename.rsplit(".", 1)[1].lower() in SUPPORTED_EXTENSIONS


def list_images(directory: PathLike) -> List[str]:
    """Names of supported image files directly inside directory, sorted"""
    root = pathlib.Path(directory)
    return sorted(
        entry.name for entry in root.iterdir()
        if entry.is_file() and is_supported(entry.name)
    )


def load_database(directory: PathLike, db_filename: str = DB_FILENAME) -> Optional[RankingDatabase]:
    """Read the ledger, or None if the directory has none yet.

    Raises LedgerError when the file exists but cannot be read or parsed.
    """
    db_path = pathlib.Path(directory) / db_filename
    if not db_path.exists():
        return None
    try:
        raw = db_path.read_bytes()
    except OSError as e:
        raise LedgerError(f"Cannot read ledger {db_path}: {e}") from e
    return RankingDatabase.from_json(raw)


def scan_directory(directory: PathLike, db_filename: str = DB_FILENAME) -> ScanResult:
    """Match image files on disk against the ledger.

    Persisted records are reused for files still present; new files get a
    fresh record. Ledger entries for missing files are left out. A corrupt
    ledger is logged and ignored so ranking can restart from scratch.
    """
    filenames = list_images(directory)

    try:
        db = load_database(directory, db_filename)
    except LedgerError:
        logger.exception("Could not load ledger in %s, starting fresh", directory)
        db = None

    known = db.images if db is not None else {}
    images = [known.get(name) or ImageRecord(filename=name) for name in filenames]

    logger.info("Scanned %s: %d images (%d already rated)",
                directory, len(images), sum(1 for name in filenames if name in known))
    return ScanResult(images=images, database=RankingDatabase.from_records(images))


def save_database(directory: PathLike, images: List[ImageRecord],
                  db_filename: str = DB_FILENAME) -> pathlib.Path:
    """Write the ledger atomically and return its path"""
    db_path = pathlib.Path(directory) / db_filename
    tmp_path = db_path.with_name(db_path.name + ".tmp")
    tmp_path.write_bytes(RankingDatabase.from_records(images).to_json())
    os.replace(tmp_path, db_path)
    logger.debug("Saved %d records to %s", len(images), db_path)
    return db_path
