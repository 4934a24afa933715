"""Chat session store backed by a single JSON document"""

import logging
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from contract_assistant.db.base import JsonDocument
from contract_assistant.exceptions import NotFoundError, PersistenceError
from contract_assistant.models.chat import ChatExchange
from contract_assistant.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ChatSessionStore:
    """Mapping from session id to its append-only list of exchanges"""

    def __init__(self, path: Union[str, Path]):
        self.document = JsonDocument(path, default=dict)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ChatSessionStore":
        settings = settings or get_settings()
        return cls(settings.chat_history_file)

    def init(self) -> bool:
        """Create the chat history file if absent"""
        return self.document.ensure_exists()

    @staticmethod
    def new_session_id() -> str:
        return uuid4().hex

    def append(self, session_id: str, exchange: ChatExchange) -> None:
        """Append an exchange, creating the session on first use"""
        with self.document.transaction() as sessions:
            history = sessions.setdefault(session_id, [])
            history.append(exchange.model_dump(mode="json"))
            logger.info(f"Session {session_id} now has {len(history)} exchanges")

    def get(self, session_id: str) -> list[ChatExchange]:
        sessions = self.document.read()
        if session_id not in sessions:
            raise NotFoundError(f"Chat history {session_id} not found")
        try:
            return [ChatExchange.model_validate(item) for item in sessions[session_id]]
        except PydanticValidationError as e:
            raise PersistenceError(f"Malformed exchange in session {session_id}: {e}") from e

    def list_sessions(self) -> list[str]:
        return list(self.document.read())
