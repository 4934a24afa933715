"""JSON document stores"""

from contract_assistant.db.base import JsonDocument
from contract_assistant.db.contracts import ContractStore
from contract_assistant.db.chat_history import ChatSessionStore

__all__ = [
    "JsonDocument",
    "ContractStore",
    "ChatSessionStore",
]
