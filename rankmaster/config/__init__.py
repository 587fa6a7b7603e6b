"""TOML configuration: packaged defaults overlaid with an optional user file"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Union

import tomli

from ..constants import (
    AUTO_SAVE_INTERVAL_MATCHES, BETA, DB_FILENAME, INITIAL_SIGMA, RECENT_CAPACITY,
    TARGET_SIGMA, TAU,
)
from ..errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_HOME = pathlib.Path.home() / ".rankmaster"
CONFIG_PATH = CONFIG_HOME / "config.toml"
DEFAULTS_PATH = pathlib.Path(__file__).resolve().parent / "defaults.toml"


@dataclass
class RatingConfig:
    target_sigma: float = TARGET_SIGMA
    beta: float = BETA
    tau: float = TAU


@dataclass
class PairingConfig:
    max_probes: int = 100
    bootstrap_matches: int = 3
    sample_size: int = 50
    recent_retries: int = 5
    impression_weight: float = 0.1
    recent_capacity: int = RECENT_CAPACITY
    seed: Optional[int] = None


@dataclass
class SessionConfig:
    autosave_interval: int = AUTO_SAVE_INTERVAL_MATCHES  # 0 disables auto-save
    db_filename: str = DB_FILENAME


@dataclass
class RankMasterConfig:
    rating: RatingConfig = field(default_factory=RatingConfig)
    pairing: PairingConfig = field(default_factory=PairingConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


def _read_toml(path: pathlib.Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e


def _check_value(section: str, key: str, value: Any, default: Any) -> Any:
    """Coerce a TOML value to the type of the field's default, or raise"""
    if isinstance(value, bool):
        ok = isinstance(default, bool)
    elif default is None or isinstance(default, int):
        ok = isinstance(value, int)
    elif isinstance(default, float):
        ok = isinstance(value, (int, float))
        if ok:
            value = float(value)
    else:
        ok = isinstance(value, type(default))
    if not ok:
        expected = "int" if default is None else type(default).__name__
        raise ConfigError(f"{section}.{key} must be {expected}, got {type(value).__name__}")
    return value


def _build_section(cls, values: Dict[str, Any], section: str):
    if not isinstance(values, dict):
        raise ConfigError(f"[{section}] must be a table")
    defaults = {f.name: f.default for f in fields(cls)}
    unknown = set(values) - set(defaults)
    if unknown:
        raise ConfigError(f"Unknown keys in [{section}]: {', '.join(sorted(unknown))}")
    return cls(**{
        key: _check_value(section, key, value, defaults[key])
        for key, value in values.items()
    })


def load_config(path: Optional[Union[str, pathlib.Path]] = None) -> RankMasterConfig:
    """Load defaults, then overlay the user's config file section by section.

    A missing user file is not an error; an unreadable or invalid one is.
    """
    merged: Dict[str, Dict[str, Any]] = {
        name: dict(values) for name, values in _read_toml(DEFAULTS_PATH).items()
    }

    user_path = pathlib.Path(path) if path is not None else CONFIG_PATH
    if user_path.exists():
        for name, values in _read_toml(user_path).items():
            if not isinstance(values, dict):
                raise ConfigError(f"[{name}] must be a table")
            merged.setdefault(name, {}).update(values)
        logger.info("Loaded configuration from %s", user_path)
    elif path is not None:
        raise ConfigError(f"Config file not found: {user_path}")

    sections = {"rating": RatingConfig, "pairing": PairingConfig, "session": SessionConfig}
    unknown = set(merged) - set(sections)
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    config = RankMasterConfig(**{
        name: _build_section(cls, merged.get(name, {}), name)
        for name, cls in sections.items()
    })
    _validate(config)
    return config


def _validate(config: RankMasterConfig) -> None:
    if config.rating.beta <= 0 or config.rating.tau <= 0:
        raise ConfigError("rating.beta and rating.tau must be positive")
    if not 0 < config.rating.target_sigma < INITIAL_SIGMA:
        raise ConfigError(f"rating.target_sigma must be between 0 and {INITIAL_SIGMA}")
    for key in ("max_probes", "bootstrap_matches", "recent_retries"):
        if getattr(config.pairing, key) < 0:
            raise ConfigError(f"pairing.{key} must not be negative")
    if config.pairing.recent_capacity < 1:
        raise ConfigError("pairing.recent_capacity must be at least 1")
    if config.pairing.sample_size < 2:
        raise ConfigError("pairing.sample_size must be at least 2")
    if config.session.autosave_interval < 0:
        raise ConfigError("session.autosave_interval must not be negative")
