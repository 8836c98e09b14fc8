"""
Environment-driven settings for the solver and logging.

    DRAGON_SOLVER_TIMEOUT     seconds before a search gives up (unset: no limit)
    DRAGON_SOLVER_MAX_STATES  boards to expand before a search gives up (unset: no limit)
    DRAGON_DEBUG              1/true/yes/on turns on debug logging
    DRAGON_API_SOLVE_TIMEOUT  seconds allowed to a solve requested over HTTP (default 10)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .solver import SearchContext

logger = logging.getLogger(__name__)

T = TypeVar('T')

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'
DEFAULT_API_SOLVE_TIMEOUT = 10.0


def _env_flag(name: str) -> bool:
    return os.getenv(name, '0').lower() in ('1', 'true', 'yes', 'on')


def _env_number(name: str, parse: Callable[[str], T]) -> Optional[T]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        value = parse(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return None
    if value <= 0:  # type: ignore[operator]
        logger.warning(f"Ignoring {name}={raw!r}: must be positive")
        return None
    return value


@dataclass
class SolverSettings:
    timeout_sec: Optional[float] = None
    max_states: Optional[int] = None
    debug: bool = False

    def make_context(self) -> SearchContext:
        return SearchContext(timeout_sec=self.timeout_sec, max_expansions=self.max_states)


def load_settings() -> SolverSettings:
    return SolverSettings(
        timeout_sec=_env_number('DRAGON_SOLVER_TIMEOUT', float),
        max_states=_env_number('DRAGON_SOLVER_MAX_STATES', int),
        debug=_env_flag('DRAGON_DEBUG'),
    )


def load_api_solve_timeout() -> float:
    return _env_number('DRAGON_API_SOLVE_TIMEOUT', float) or DEFAULT_API_SOLVE_TIMEOUT


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
