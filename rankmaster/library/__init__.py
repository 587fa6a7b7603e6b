"""Image records, ledger persistence and ranking sessions"""

from .records import ImageRecord, RankingDatabase
from .ledger import ScanResult, scan_directory, load_database, save_database
from .session import RankingSession, ComparisonPair, Vote

__all__ = [
    'ImageRecord',
    'RankingDatabase',
    'ScanResult',
    'scan_directory',
    'load_database',
    'save_database',
    'RankingSession',
    'ComparisonPair',
    'Vote',
]
