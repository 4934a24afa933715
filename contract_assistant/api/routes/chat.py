"""Chat API routes"""

import asyncio
import logging

from fastapi import APIRouter

from contract_assistant.api.schemas import (
    ChatAPIResponse,
    ChatHistoryResponse,
    ChatRequest,
    HealthResponse,
)
from contract_assistant.db.chat_history import ChatSessionStore
from contract_assistant.db.contracts import ContractStore
from contract_assistant.exceptions import ContractAssistantError
from contract_assistant.services.chat import ContractChatService
from contract_assistant.utils.llm import get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter()

# Shared chat service, set via init_service() from app.py
service: ContractChatService = ContractChatService(
    ContractStore.from_settings(),
    ChatSessionStore.from_settings(),
    get_llm_client(),
)


def init_service(shared_service: ContractChatService):
    """Set the shared chat service (called from app.py)."""
    global service
    service = shared_service


@router.get("/")
async def root():
    return {"message": "Contract Management Chatbot API with Ollama", "status": "running"}


@router.post("/api/chat", response_model=ChatAPIResponse)
async def chat(request: ChatRequest):
    """Answer a question about the contracts and record the exchange"""
    reply = await service.chat(request.message or "", request.chat_id)
    return ChatAPIResponse(**reply.model_dump())


@router.get("/api/chat/history/{chat_id}", response_model=ChatHistoryResponse)
def chat_history(chat_id: str):
    return ChatHistoryResponse(chat_id=chat_id, messages=service.history(chat_id))


@router.get("/api/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    ollama_available = await service.llm.ping()
    try:
        contracts = await asyncio.get_running_loop().run_in_executor(None, service.contracts.list_all)
    except ContractAssistantError as e:
        logger.warning(f"Health check could not read contracts: {e}")
        contracts = None

    healthy = ollama_available and contracts is not None
    return HealthResponse(
        status="ok" if healthy else "degraded",
        model=service.llm.model,
        ollama_url=service.llm.base_url,
        ollama_available=ollama_available,
        contracts_readable=contracts is not None,
        contracts=len(contracts or []),
    )
