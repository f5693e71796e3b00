from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Optional

from .adapter import parse_flag
from .errors import InvalidOptionError

MIN_COST = 1
MAX_COST = 30
DEFAULT_COST = 12


def parse_cost(value: Any) -> int:
    """Coerce an iterationCountLog2 value, rejecting anything outside 1 - 30."""
    if isinstance(value, bool):
        raise InvalidOptionError("Iteration count log2 must be an integer", "iterationCountLog2")
    try:
        cost = int(value)
    except (TypeError, ValueError):
        raise InvalidOptionError(
            f"Iteration count log2 must be an integer, got {value!r}", "iterationCountLog2"
        ) from None
    if cost < MIN_COST or cost > MAX_COST:
        raise InvalidOptionError(
            f"Iteration count log2 must be between {MIN_COST} and {MAX_COST}", "iterationCountLog2"
        )
    return cost


@dataclass(frozen=True)
class Pbkdf2Config:
    """Settings for one PBKDF2 adapter value.

    Reads from environment variables with the SECUREHASH_ prefix, or accepts
    explicit values.
    """

    algorithm: str = "sha256"
    iteration_count_log2: int = DEFAULT_COST
    throw_on_failure: bool = False

    def __post_init__(self) -> None:
        parse_cost(self.iteration_count_log2)

    @property
    def iteration_count(self) -> int:
        return 1 << self.iteration_count_log2

    @classmethod
    def from_env(cls) -> Pbkdf2Config:
        """Load configuration from environment variables."""
        return cls(
            iteration_count_log2=parse_cost(
                os.getenv("SECUREHASH_ITERATION_COUNT_LOG2", str(DEFAULT_COST))
            ),
            throw_on_failure=parse_flag(
                "SECUREHASH_THROW_ON_FAILURE", os.getenv("SECUREHASH_THROW_ON_FAILURE", "")
            ),
        )


_config: Optional[Pbkdf2Config] = None


def get_config() -> Pbkdf2Config:
    """Get or create the singleton configuration."""
    global _config
    if _config is None:
        _config = Pbkdf2Config.from_env()
    return _config


def set_config(config: Optional[Pbkdf2Config]) -> None:
    """Override the global configuration; None reloads from the environment."""
    global _config
    _config = config
