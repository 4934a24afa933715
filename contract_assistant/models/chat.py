"""Chat-related models"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatExchange(BaseModel):
    """One user message and the assistant's reply"""
    timestamp: datetime = Field(default_factory=_utcnow)
    user: str
    bot: str


class ChatReply(BaseModel):
    """Result of one chat round"""
    response: str
    chat_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
