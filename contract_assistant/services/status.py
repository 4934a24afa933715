"""Contract status derivation.

All comparisons happen on UTC calendar dates: ``today`` is the current UTC
date and ``end_date`` is a plain date, so a contract ending today has zero
days remaining regardless of the time of day.
"""

from datetime import date, datetime, timezone

from contract_assistant.models.contract import Contract, ContractStatus

EXPIRING_WINDOW_DAYS = 30


def utc_today() -> date:
    """Current calendar date in UTC"""
    return datetime.now(timezone.utc).date()


def days_remaining(end_date: date, today: date) -> int:
    """Whole days from today until end_date, negative once it has passed"""
    return (end_date - today).days


def derive_status(
    contract: Contract,
    today: date,
    window_days: int = EXPIRING_WINDOW_DAYS,
) -> ContractStatus:
    """Derive lifecycle status from the end date.

    Ending today counts as expiring, the window is inclusive on both ends.
    """
    remaining = days_remaining(contract.end_date, today)
    if remaining < 0:
        return ContractStatus.EXPIRED
    if remaining <= window_days:
        return ContractStatus.EXPIRING
    return ContractStatus.ACTIVE


def with_status(
    contract: Contract,
    today: date,
    window_days: int = EXPIRING_WINDOW_DAYS,
) -> Contract:
    """Copy of the contract with a freshly derived status"""
    return contract.model_copy(update={"status": derive_status(contract, today, window_days)})
