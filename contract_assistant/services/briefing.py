"""Renders the contract collection into the assistant's system prompt"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Union

from contract_assistant.models.contract import Contract
from contract_assistant.services.status import (
    EXPIRING_WINDOW_DAYS,
    days_remaining,
    derive_status,
)

INTRO = (
    "You are a helpful contract management assistant. "
    "You have access to detailed contract information including salaries."
)

INSTRUCTIONS = [
    "When users ask about their salary, provide the exact amount from the contract data",
    "Match users by their name (client_name) or position (title)",
    "Be specific and include all relevant details like salary, dates, and status",
    "If asked about status, mention days remaining for expiring contracts",
    "Be conversational, friendly, and helpful",
    "Always include salary amounts when discussing contracts",
    "Format responses clearly with contract details",
]


def format_inr(amount: Optional[Union[int, float]]) -> str:
    """Format an amount as Indian rupees with lakh/crore grouping, no paise.

    >>> format_inr(1500000)
    '₹15,00,000'
    """
    if not amount:
        return "Not specified"

    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    digits = str(abs(rounded))

    # Last three digits form one group, the rest are grouped in pairs
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    groups.append(tail)
    return f"{sign}₹{','.join(groups)}"


def _contract_block(contract: Contract, today: date, window_days: int) -> str:
    status = derive_status(contract, today, window_days)
    lines = [
        f"Contract ID: {contract.id}",
        f"  - Title/Position: {contract.title}",
        f"  - Company: {contract.company}",
        f"  - Client Name: {contract.client_name}",
        f"  - Contract Type: {contract.contract_type.value}",
        f"  - Status: {status.value}",
        f"  - Start Date: {contract.start_date.isoformat()}",
        f"  - End Date: {contract.end_date.isoformat()}",
        f"  - Days Remaining: {days_remaining(contract.end_date, today)}",
        f"  - Salary: {format_inr(contract.salary)}",
    ]
    if contract.notes:
        lines.append(f"  - Notes: {contract.notes}")
    return "\n".join(lines)


def build_briefing(
    contracts: Sequence[Contract],
    today: date,
    window_days: int = EXPIRING_WINDOW_DAYS,
) -> str:
    """Build the system prompt describing every contract.

    The output depends only on the contracts and ``today``; the model gets no
    other context besides the user's message.
    """
    parts = [INTRO, ""]
    parts.append("Instructions:")
    parts.extend(f"- {line}" for line in INSTRUCTIONS)
    parts.append("")
    parts.append(f"Current contracts in system (Total: {len(contracts)}):")
    parts.append("")
    for contract in contracts:
        parts.append(_contract_block(contract, today, window_days))
        parts.append("")
    return "\n".join(parts)
