"""
Projection runner — applies a ProjectionConfig to the projection engine.

Two modes of operation:
  1. run_projection():    one-off run, logs inputs and timing
  2. cached_projection(): memoized on (records, resolved config); the UI calls
                          this on every re-render with unchanged data

The config is resolved first, so an open ``as_of_date`` is pinned to today
before it becomes part of the cache key. A cached result therefore never
leaks across midnight.
"""

from __future__ import annotations

import time
from functools import lru_cache
from typing import Iterable, Tuple

from core.config import ProjectionConfig
from core.logging_config import get_logger
from models.projection import ProjectionResult
from models.records import Account, BalanceCheckpoint, Transaction

from .projection import project

logger = get_logger(__name__)

PROJECTION_CACHE_SIZE = 32


def run_projection(
    accounts: Iterable[Account],
    checkpoints: Iterable[BalanceCheckpoint],
    transactions: Iterable[Transaction],
    config: ProjectionConfig,
) -> ProjectionResult:
    """
    Run one projection with the settings in ``config``.

    Parameters
    ----------
    accounts, checkpoints, transactions
        Inbound records (any iterables)
    config : ProjectionConfig
        Horizon, threshold, as-of date and recurrence ceiling

    Returns
    -------
    ProjectionResult
    """
    cfg = config.resolved()
    accounts = tuple(accounts)
    checkpoints = tuple(checkpoints)
    transactions = tuple(transactions)

    logger.info(
        "Running projection: %d accounts, %d checkpoints, %d transactions, %d days from %s",
        len(accounts),
        len(checkpoints),
        len(transactions),
        cfg.horizon_days,
        cfg.as_of_date,
    )
    started = time.perf_counter()

    result = project(
        accounts,
        checkpoints,
        transactions,
        cfg.horizon_days,
        cfg.warning_threshold,
        today=cfg.as_of_date,
        max_iterations=cfg.max_iterations,
    )

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Projection finished in %.1f ms: %d data points, %d warnings",
        elapsed_ms,
        len(result.data_points),
        len(result.warnings),
        extra={"elapsed_ms": round(elapsed_ms, 1)},
    )
    return result


@lru_cache(maxsize=PROJECTION_CACHE_SIZE)
def _cached(
    accounts: Tuple[Account, ...],
    checkpoints: Tuple[BalanceCheckpoint, ...],
    transactions: Tuple[Transaction, ...],
    config: ProjectionConfig,
) -> ProjectionResult:
    return run_projection(accounts, checkpoints, transactions, config)


def cached_projection(
    accounts: Iterable[Account],
    checkpoints: Iterable[BalanceCheckpoint],
    transactions: Iterable[Transaction],
    config: ProjectionConfig,
) -> ProjectionResult:
    """Memoized run_projection(); identical records and settings return the same result object."""
    return _cached(tuple(accounts), tuple(checkpoints), tuple(transactions), config.resolved())


def clear_projection_cache() -> None:
    _cached.cache_clear()
