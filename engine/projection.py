"""
Cash-flow projection engine — checkpoints + transactions -> daily balance timeline.

Flow of project():
  1. Anchor each account on its latest checkpoint at/before today
     (no checkpoint: balance 0 anchored at today)
  2. Collect events from the earliest anchor through the horizon end
  3. Replay events up to and including today to get today's true balances
  4. Walk forward day by day from today, applying that day's events and
     snapshotting every account plus the exact total
  5. Flag balances strictly below the warning threshold, once per (account, day)

Today's own events are applied by both the replay (3) and the first forward
step (4), so they count twice in today's balance.

Balances are threaded through each step as an explicit mapping (a fold);
nothing is stored on modules or objects, so concurrent calls are safe.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from core import dates
from core.dates import DateLike, add_days, date_range, to_date
from core.logging_config import get_logger
from core.money import Number, add, round_amount, sum_amounts
from core.schema import MAX_RECURRENCE_ITERATIONS
from models.projection import ProjectionDataPoint, ProjectionResult, ProjectionWarning
from models.records import Account, BalanceCheckpoint, Transaction

from .events import ProjectionEvent, collect_events
from .recurrence import iter_occurrences

logger = get_logger(__name__)

Balances = Mapping[str, Decimal]

_ZERO = round_amount(0)


@dataclass(frozen=True)
class Anchor:
    """Where an account's calculation starts: a balance known to be true on a date."""

    balance: Decimal
    date: date
    checkpoint_id: Optional[str] = None


def _latest_checkpoints(
    checkpoints: Iterable[BalanceCheckpoint], as_of: date
) -> Dict[str, BalanceCheckpoint]:
    # first one wins on a date tie
    latest: Dict[str, BalanceCheckpoint] = {}
    for cp in checkpoints:
        if cp.date > as_of:
            continue
        current = latest.get(cp.account_id)
        if current is None or cp.date > current.date:
            latest[cp.account_id] = cp
    return latest


def resolve_anchors(
    accounts: Iterable[Account], checkpoints: Iterable[BalanceCheckpoint], today: date
) -> Dict[str, Anchor]:
    latest = _latest_checkpoints(checkpoints, today)
    anchors: Dict[str, Anchor] = {}
    for account in accounts:
        cp = latest.get(account.id)
        if cp is None:
            anchors[account.id] = Anchor(balance=_ZERO, date=today)
        else:
            anchors[account.id] = Anchor(balance=cp.amount, date=cp.date, checkpoint_id=cp.id)
    return anchors


def apply_event(balances: Balances, event: ProjectionEvent) -> Dict[str, Decimal]:
    """New balance mapping with ``event`` applied; unknown accounts are ignored."""
    if event.account_id not in balances:
        logger.debug("Skipping %s event for unknown account %s", event.type.value, event.account_id)
        return dict(balances)

    updated = dict(balances)
    if event.is_reset:
        updated[event.account_id] = event.amount
    else:
        updated[event.account_id] = add(balances[event.account_id], event.amount)
    return updated


def replay_history(
    events: Iterable[ProjectionEvent], anchors: Mapping[str, Anchor], today: date
) -> Dict[str, Decimal]:
    """
    Balances as of today: each anchor plus every delta dated between the
    account's anchor date and today (both inclusive). Checkpoints are skipped;
    past ones were consumed as anchors.
    """

    def _relevant(event: ProjectionEvent) -> bool:
        anchor = anchors.get(event.account_id)
        return (
            anchor is not None
            and event.date <= today
            and event.date >= anchor.date
            and not event.is_reset
        )

    opening = {account_id: anchor.balance for account_id, anchor in anchors.items()}
    return reduce(apply_event, filter(_relevant, events), opening)


def walk_forward(
    events: Iterable[ProjectionEvent],
    opening: Balances,
    *,
    start: date,
    end: date,
    accounts: Sequence[Account],
    warning_threshold: Decimal,
) -> Tuple[List[ProjectionDataPoint], List[ProjectionWarning]]:
    by_day: Dict[date, List[ProjectionEvent]] = defaultdict(list)
    for event in events:
        if start <= event.date <= end:
            by_day[event.date].append(event)

    names = {a.id: a.name for a in accounts}
    data_points: List[ProjectionDataPoint] = []
    warnings: List[ProjectionWarning] = []
    warned = set()

    balances: Dict[str, Decimal] = dict(opening)
    for day in date_range(start, end):
        balances = reduce(apply_event, by_day.get(day, ()), balances)
        snapshot = dict(balances)
        data_points.append(
            ProjectionDataPoint(date=day, balances=snapshot, total=sum_amounts(snapshot.values()))
        )

        for account_id, balance in snapshot.items():
            key = (account_id, day)
            if balance < warning_threshold and key not in warned:
                warned.add(key)
                warnings.append(
                    ProjectionWarning(
                        date=day,
                        account_id=account_id,
                        account_name=names.get(account_id, "Unknown Account"),
                        balance=balance,
                        threshold=warning_threshold,
                    )
                )

    return data_points, warnings


def project(
    accounts: Iterable[Account],
    checkpoints: Iterable[BalanceCheckpoint],
    transactions: Iterable[Transaction],
    horizon_days: int,
    warning_threshold: Number,
    *,
    today: Optional[DateLike] = None,
    max_iterations: int = MAX_RECURRENCE_ITERATIONS,
) -> ProjectionResult:
    """
    Project every account's balance from today through ``today + horizon_days``.

    Parameters
    ----------
    accounts, checkpoints, transactions
        Plain records from the data-access collaborator
    horizon_days : int
        Days to project past today; the result has horizon_days + 1 points
    warning_threshold : number
        Balances strictly below this produce a ProjectionWarning
    today : date-like, optional
        Projection start; defaults to the system date
    max_iterations : int
        Step ceiling for each recurrence expansion

    Returns
    -------
    ProjectionResult with data points and warnings in date order. Deterministic
    for identical inputs and ``today``.
    """
    accounts = tuple(accounts)
    checkpoints = tuple(checkpoints)
    transactions = tuple(transactions)

    today_d = to_date(today) if today is not None else dates.today()
    horizon_end = add_days(today_d, horizon_days)
    threshold = round_amount(warning_threshold)

    anchors = resolve_anchors(accounts, checkpoints, today_d)
    window_start = min((a.date for a in anchors.values()), default=today_d)

    events = collect_events(
        checkpoints,
        transactions,
        today=today_d,
        window_start=window_start,
        horizon_end=horizon_end,
        max_iterations=max_iterations,
    )
    opening = replay_history(events, anchors, today_d)
    data_points, warnings = walk_forward(
        events,
        opening,
        start=today_d,
        end=horizon_end,
        accounts=accounts,
        warning_threshold=threshold,
    )

    logger.debug(
        "Projected %d accounts over %d days: %d events, %d warnings",
        len(accounts),
        horizon_days,
        len(events),
        len(warnings),
        extra={"today": today_d, "window_start": window_start},
    )

    return ProjectionResult(
        data_points=tuple(data_points),
        warnings=tuple(warnings),
        accounts=accounts,
        warning_threshold=threshold,
    )


def account_balance(
    account_id: str,
    checkpoints: Iterable[BalanceCheckpoint],
    transactions: Iterable[Transaction],
    as_of: DateLike,
) -> Decimal:
    """
    Balance of one account at the end of ``as_of``.

    Starts from the latest checkpoint at/before ``as_of`` (0 if none) and adds
    one-time and recurring amounts dated strictly after that checkpoint and
    on/before ``as_of``.
    """
    as_of_d = to_date(as_of)
    anchor = _latest_checkpoints(
        (cp for cp in checkpoints if cp.account_id == account_id), as_of_d
    ).get(account_id)

    balance = anchor.amount if anchor is not None else _ZERO
    since = anchor.date if anchor is not None else None

    def _counts(d: date) -> bool:
        return (since is None or d > since) and d <= as_of_d

    deltas: List[Decimal] = []
    for tx in transactions:
        if tx.account_id != account_id:
            continue
        if not tx.is_recurring:
            if _counts(tx.date):
                deltas.append(tx.amount)
            continue
        range_start = since if since is not None else tx.date
        deltas.extend(
            occ.amount for occ in iter_occurrences(tx, range_start, as_of_d) if _counts(occ.date)
        )

    return add(balance, sum_amounts(deltas))
