"""Expiry alerts derived from contract status"""

from datetime import date
from typing import Iterable

from contract_assistant.models.contract import Alert, Contract, ContractStatus
from contract_assistant.services.status import (
    EXPIRING_WINDOW_DAYS,
    days_remaining,
    derive_status,
)

ALERT_STATUSES = (ContractStatus.EXPIRING, ContractStatus.EXPIRED)


def _alert_message(contract: Contract, status: ContractStatus, remaining: int) -> str:
    if status == ContractStatus.EXPIRED:
        days = -remaining
        return f"Contract '{contract.title}' is expired, ended {days} day{'s' if days != 1 else ''} ago"
    if remaining == 0:
        return f"Contract '{contract.title}' is expiring, ends today"
    return f"Contract '{contract.title}' is expiring, ends in {remaining} day{'s' if remaining != 1 else ''}"


def generate_alerts(
    contracts: Iterable[Contract],
    today: date,
    window_days: int = EXPIRING_WINDOW_DAYS,
) -> list[Alert]:
    """Build one alert per expiring or expired contract, keeping input order"""
    alerts = []
    for contract in contracts:
        status = derive_status(contract, today, window_days)
        if status not in ALERT_STATUSES:
            continue
        remaining = days_remaining(contract.end_date, today)
        alerts.append(Alert(
            contract_id=contract.id,
            title=contract.title,
            company=contract.company,
            end_date=contract.end_date,
            days_remaining=remaining,
            status=status,
            message=_alert_message(contract, status, remaining),
        ))
    return alerts
