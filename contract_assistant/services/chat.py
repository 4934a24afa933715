"""Conversational assistant over the contract collection"""

import asyncio
import logging
from typing import Optional

from contract_assistant.db.chat_history import ChatSessionStore
from contract_assistant.db.contracts import ContractStore
from contract_assistant.exceptions import ValidationError
from contract_assistant.models.chat import ChatExchange, ChatReply
from contract_assistant.services.briefing import build_briefing
from contract_assistant.utils.llm import OllamaClient

logger = logging.getLogger(__name__)


class ContractChatService:
    """Answers questions about contracts and records each exchange"""

    def __init__(
        self,
        contracts: ContractStore,
        sessions: ChatSessionStore,
        llm: OllamaClient,
    ):
        self.contracts = contracts
        self.sessions = sessions
        self.llm = llm

    def briefing(self) -> str:
        """System prompt built from the current contract collection"""
        return build_briefing(
            self.contracts.list_all(),
            self.contracts.clock(),
            self.contracts.window_days,
        )

    async def chat(self, message: str, chat_id: Optional[str] = None) -> ChatReply:
        """Run one chat round.

        The exchange is only recorded once the model has replied, so a failed
        call leaves the session untouched.
        """
        if not message or not message.strip():
            raise ValidationError("Message is required", fields=["message"])

        session_id = chat_id or self.sessions.new_session_id()
        # Store access is blocking file I/O, keep it off the event loop
        loop = asyncio.get_running_loop()
        briefing = await loop.run_in_executor(None, self.briefing)
        reply = await self.llm.ask(briefing, message)

        exchange = ChatExchange(user=message, bot=reply)
        await loop.run_in_executor(None, lambda: self.sessions.append(session_id, exchange))
        logger.info(f"Chat {session_id}: recorded exchange")

        return ChatReply(response=reply, chat_id=session_id, timestamp=exchange.timestamp)

    def history(self, chat_id: str) -> list[ChatExchange]:
        return self.sessions.get(chat_id)
