"""Exceptions raised outside the rating engine"""


class RankMasterError(Exception):
    """Base class for all RankMaster errors"""


class ConfigError(RankMasterError):
    """Configuration file could not be read or is invalid"""


class LedgerError(RankMasterError):
    """Persisted ranking ledger is malformed"""


class SessionError(RankMasterError):
    """Ranking session was used in an invalid state"""
