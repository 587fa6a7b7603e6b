from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import List, Optional

from ..config import load_config
from ..errors import RankMasterError
from ..library.session import RankingSession
from ..logging_setup import setup_logging

DEFAULT_LEADERBOARD_SIZE = 10


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rankmaster",
                                description="Report on a photo library ranked by pairwise votes")
    p.add_argument("--config", default=None, help="Configuration file path")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Show ranking confidence for a library")
    status.add_argument("directory")

    top = sub.add_parser("top", help="Show the best rated images")
    top.add_argument("directory")
    top.add_argument("-n", "--limit", type=int, default=DEFAULT_LEADERBOARD_SIZE,
                     help=f"Number of images to list (default: {DEFAULT_LEADERBOARD_SIZE})")
    return p


def _print_status(session: RankingSession) -> None:
    stats = session.progress()
    print(f"Library: {session.directory}")
    print(f"Confidence: {stats.confidence * 100:.1f}%")
    print(f"Ranked: {stats.ranked_count}/{stats.total_count}")


def _print_top(session: RankingSession, limit: int) -> None:
    board = session.leaderboard(limit)
    print(f"\nTop {len(board)} images:")
    for i, img in enumerate(board, 1):
        print(f"{i}. {img.rating.mu:.2f} ±{img.rating.sigma:.2f} ({img.matches} matches) {img.filename}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(overwrite=False, level=getattr(logging, args.log_level))
    logger = logging.getLogger(__name__)

    directory = pathlib.Path(args.directory)
    if not directory.is_dir():
        logger.error("Not a directory: %s", directory)
        return 1

    try:
        config = load_config(args.config)
        session = RankingSession.open(directory, config=config)
    except RankMasterError as e:
        logger.error("%s", e)
        return 1

    if args.command == "status":
        _print_status(session)
    elif args.command == "top":
        _print_top(session, max(args.limit, 0))
    return 0


if __name__ == "__main__":
    sys.exit(main())
