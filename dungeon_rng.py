from __future__ import annotations

"""Random source used by dungeon generation.

The generator only needs bounded integers, so the interface is a single
``next_int(min, max)`` call over the half-open range ``[min, max)``.
``DungeonRNG`` backs it with a seeded numpy ``Generator``; when no seed is
given, one is drawn from the operating system's entropy pool.  Failure to read
that pool is fatal and surfaces as :class:`EntropyError`.
"""

import secrets
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import numpy as np
import structlog

log = structlog.get_logger(__name__)


class EntropyError(RuntimeError):
    """Raised when no entropy can be obtained to seed the generator."""


@runtime_checkable
class RandomSource(Protocol):
    def next_int(self, min_value: int, max_value: int) -> int:
        """Return an integer uniformly distributed over ``[min_value, max_value)``."""
        ...


def _fresh_seed() -> int:
    try:
        return secrets.randbits(32)
    except (OSError, NotImplementedError) as e:
        log.critical("Unable to read system entropy", error=str(e))
        raise EntropyError("System entropy source unavailable") from e


class DungeonRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else _fresh_seed()
        self.rng = np.random.default_rng(self.initial_seed)
        self.draws = 0

    def next_int(self, min_value: int, max_value: int) -> int:
        if max_value <= min_value:
            raise ValueError(
                f"empty range: max ({max_value}) must exceed min ({min_value})"
            )
        val = int(self.rng.integers(min_value, max_value))
        self.draws += 1
        return val

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
            "draws": self.draws,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]
        if "draws" in state:
            self.draws = state["draws"]

    def reset(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else _fresh_seed()
        self.rng = np.random.default_rng(self.initial_seed)
        self.draws = 0


__all__ = ["DungeonRNG", "EntropyError", "RandomSource"]
