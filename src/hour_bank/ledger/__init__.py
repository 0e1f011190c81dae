"""Hour bank ledger: classification, durations and balances."""

from hour_bank.ledger.balance import (
    BalanceSummary,
    consolidated_balances,
    dashboard_stats,
    format_balance,
    group_balances,
    summarize,
)
from hour_bank.ledger.classification import UnknownOccurrenceError, classify, classify_any
from hour_bank.ledger.duration import DurationResult, calculate_duration
from hour_bank.ledger.entries import EntryValidationError, PreparedEntry, prepare_entry
from hour_bank.ledger.types import (
    AdjustmentRecord,
    BatchRecord,
    Duration,
    EntryDraft,
    EntryFlow,
    RecordType,
    RegularRecord,
    Role,
    record_variant,
)

__all__ = [
    "BalanceSummary",
    "consolidated_balances",
    "dashboard_stats",
    "format_balance",
    "group_balances",
    "summarize",
    "UnknownOccurrenceError",
    "classify",
    "classify_any",
    "DurationResult",
    "calculate_duration",
    "EntryValidationError",
    "PreparedEntry",
    "prepare_entry",
    "AdjustmentRecord",
    "BatchRecord",
    "Duration",
    "EntryDraft",
    "EntryFlow",
    "RecordType",
    "RegularRecord",
    "Role",
    "record_variant",
]
