"""Data models"""

from contract_assistant.models.contract import (
    IMMUTABLE_FIELDS,
    REQUIRED_FIELDS,
    Alert,
    Contract,
    ContractStatus,
    ContractType,
)
from contract_assistant.models.chat import (
    ChatExchange,
    ChatReply,
)

__all__ = [
    "IMMUTABLE_FIELDS",
    "REQUIRED_FIELDS",
    "Alert",
    "Contract",
    "ContractStatus",
    "ContractType",
    "ChatExchange",
    "ChatReply",
]
