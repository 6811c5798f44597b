"""
Turn the data-access collaborator's plain records into typed models.

Records arrive as dicts (rows from storage, or a JSON snapshot) using either
camelCase or snake_case keys. Amounts may be numbers or money text; dates may
be ISO strings, dates or timestamps. Recurrence rules may be dicts, JSON text
or already-built rule objects.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from core.dates import to_date
from core.logging_config import get_logger
from core.money import parse_amount, round_amount
from models.records import Account, BalanceCheckpoint, Transaction
from models.rules import (
    BiweeklyRule,
    DailyRule,
    DaysOfMonth,
    LastDayOfMonth,
    MonthlyRule,
    NthWeekday,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
)

logger = get_logger(__name__)

_RULE_TYPES = (DailyRule, WeeklyRule, BiweeklyRule, MonthlyRule, YearlyRule)


class RecordError(ValueError):
    """An inbound record that cannot be turned into a model at all."""


# --- Payload models ---

class _Payload(BaseModel):
    # accountId and account_id are both accepted
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _coerce_id(value: Any) -> Any:
    return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


def _coerce_amount(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_amount(value)
        if parsed is None:
            raise ValueError(f"not a money amount: {value!r}")
        return parsed
    if isinstance(value, bool):
        raise ValueError("amount must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"amount must be finite, got {value!r}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"amount must be finite, got {value!r}")
        return round_amount(value)
    if isinstance(value, (int, float)):
        return round_amount(value)
    return value


def _coerce_date(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return to_date(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"not a date: {value!r}") from exc


class _RecordPayload(_Payload):
    @field_validator("id", "account_id", mode="before", check_fields=False)
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def coerce_amount(cls, value: Any) -> Any:
        return _coerce_amount(value)

    @field_validator("date", "end_date", mode="before", check_fields=False)
    @classmethod
    def coerce_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("date", "amount", check_fields=False)
    @classmethod
    def require_value(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field is required")
        return value


class AccountPayload(_RecordPayload):
    id: str
    name: str

    def to_record(self) -> Account:
        return Account(id=self.id, name=self.name)


class CheckpointPayload(_RecordPayload):
    id: str
    account_id: str
    date: Any
    amount: Any
    notes: Optional[str] = None

    def to_record(self) -> BalanceCheckpoint:
        return BalanceCheckpoint(
            id=self.id,
            account_id=self.account_id,
            date=self.date,
            amount=self.amount,
            notes=self.notes or None,
        )


class RulePayload(_Payload):
    """Stored shape of a recurrence rule; ``interval`` None or 0 means 1."""

    frequency: str
    interval: Optional[int] = None
    days_of_month: Optional[List[int]] = None
    last_day_of_month: Optional[bool] = None
    weekday: Optional[int] = None
    week_of_month: Optional[int] = None

    def to_rule(self) -> RecurrenceRule:
        frequency = self.frequency.strip().lower()
        interval = self.interval or 1

        if frequency == "daily":
            return DailyRule(interval=interval)
        if frequency == "weekly":
            return WeeklyRule(interval=interval)
        if frequency == "biweekly":
            return BiweeklyRule()
        if frequency == "yearly":
            return YearlyRule(interval=interval)
        if frequency == "monthly":
            # lastDayOfMonth > nth weekday > days of month
            if self.last_day_of_month:
                pattern = LastDayOfMonth()
            elif self.weekday is not None and self.week_of_month is not None:
                pattern = NthWeekday(weekday=self.weekday, week=self.week_of_month)
            elif self.days_of_month:
                pattern = DaysOfMonth(days=tuple(self.days_of_month))
            else:
                raise ValueError(
                    "Monthly rule needs daysOfMonth, lastDayOfMonth or weekday + weekOfMonth."
                )
            return MonthlyRule(pattern=pattern, interval=interval)
        raise ValueError(f"Unknown frequency: {self.frequency!r}")


class TransactionPayload(_RecordPayload):
    id: str
    account_id: str
    description: str = ""
    amount: Any
    date: Any
    category: Optional[str] = None
    is_recurring: bool = False
    recurrence_rule: Any = None
    end_date: Any = None

    def to_record(self) -> Transaction:
        rule: Optional[RecurrenceRule] = None
        if self.recurrence_rule is not None:
            try:
                rule = parse_rule(self.recurrence_rule)
            except ValueError as exc:
                logger.warning(
                    "Ignoring malformed recurrence rule on transaction %s: %s", self.id, exc
                )
        return Transaction(
            id=self.id,
            account_id=self.account_id,
            description=self.description,
            amount=self.amount,
            date=self.date,
            category=self.category or None,
            is_recurring=self.is_recurring,
            recurrence_rule=rule,
            end_date=self.end_date,
        )


# --- Public API ---

def parse_rule(raw: Union[RecurrenceRule, Mapping[str, Any], str]) -> RecurrenceRule:
    """
    Build a RecurrenceRule from its stored form.

    Raises ValueError (pydantic's ValidationError included) when the payload
    does not describe a legal rule.
    """
    if isinstance(raw, _RULE_TYPES):
        return raw
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Recurrence rule is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ValueError(f"Recurrence rule must be a mapping, got {type(raw).__name__}")
    return RulePayload.model_validate(dict(raw)).to_rule()


@dataclass(frozen=True)
class RecordSet:
    accounts: Tuple[Account, ...] = field(default_factory=tuple)
    checkpoints: Tuple[BalanceCheckpoint, ...] = field(default_factory=tuple)
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)

    @property
    def account_ids(self) -> List[str]:
        return [a.id for a in self.accounts]


_Record = TypeVar("_Record", Account, BalanceCheckpoint, Transaction)


def _load_many(
    rows: Iterable[Any],
    payload: Type[_Payload],
    record_type: Type[_Record],
    kind: str,
) -> Tuple[_Record, ...]:
    out: List[_Record] = []
    for i, row in enumerate(rows):
        if isinstance(row, record_type):
            out.append(row)
            continue
        if not isinstance(row, Mapping):
            raise RecordError(f"{kind} #{i} must be a mapping, got {type(row).__name__}")
        try:
            out.append(payload.model_validate(dict(row)).to_record())
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise RecordError(
                f"{kind} #{i} (id={row.get('id')!r}) is invalid: bad or missing {fields}"
            ) from exc
    return tuple(out)


def load_records(
    *,
    accounts: Iterable[Any] = (),
    checkpoints: Iterable[Any] = (),
    transactions: Iterable[Any] = (),
) -> RecordSet:
    """
    Parse plain records into a RecordSet.

    Rows may be dicts (camelCase or snake_case) or already-built models.
    Raises RecordError for a row missing an id, date or amount, or carrying
    values of the wrong type. A malformed recurrence rule only drops the rule.
    """
    records = RecordSet(
        accounts=_load_many(accounts, AccountPayload, Account, "account"),
        checkpoints=_load_many(checkpoints, CheckpointPayload, BalanceCheckpoint, "checkpoint"),
        transactions=_load_many(transactions, TransactionPayload, Transaction, "transaction"),
    )
    logger.debug(
        "Loaded %d accounts, %d checkpoints, %d transactions",
        len(records.accounts),
        len(records.checkpoints),
        len(records.transactions),
    )
    return records


def load_snapshot(path: Union[str, Path]) -> Tuple[RecordSet, Dict[str, Any]]:
    """
    Read a JSON snapshot with ``accounts``, ``checkpoints``, ``transactions``
    and optional ``settings``. Returns (records, settings).
    """
    with open(path, "r", encoding="utf-8") as fh:
        doc = json.load(fh)
    if not isinstance(doc, Mapping):
        raise RecordError(f"Snapshot {path} must be a JSON object.")

    records = load_records(
        accounts=doc.get("accounts") or (),
        checkpoints=doc.get("checkpoints") or (),
        transactions=doc.get("transactions") or (),
    )
    settings = dict(doc.get("settings") or {})
    return records, settings
