"""Request/response schemas for the API"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from contract_assistant import __version__
from contract_assistant.models import Alert, ChatExchange, Contract, ContractType


# =========================================================
# Contract schemas
# =========================================================

class ContractCreateRequest(BaseModel):
    """New contract. Required fields are checked by the store so that a
    missing one is reported as a 400 with the field names."""
    title: Optional[str] = None
    company: Optional[str] = None
    client_name: Optional[str] = None
    contract_type: Optional[ContractType] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    salary: Optional[Union[int, float]] = None
    notes: Optional[str] = None


class ContractUpdateRequest(BaseModel):
    """Partial update, only fields that are sent get merged"""
    title: Optional[str] = None
    company: Optional[str] = None
    client_name: Optional[str] = None
    contract_type: Optional[ContractType] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    salary: Optional[Union[int, float]] = None
    notes: Optional[str] = None


class ContractListResponse(BaseModel):
    contracts: list[Contract] = []


class ContractResponse(BaseModel):
    contract: Contract


class ContractMutationResponse(BaseModel):
    message: str
    contract: Contract


class ContractCreateResponse(ContractMutationResponse):
    success: bool = True


class MessageResponse(BaseModel):
    message: str


class SearchRequest(BaseModel):
    query: str = Field(..., description="Text matched against title, company, client name and status")


class SearchResponse(BaseModel):
    results: list[Contract] = []
    count: int = 0


class AlertListResponse(BaseModel):
    alerts: list[Alert] = []
    count: int = 0


# =========================================================
# Chat schemas
# =========================================================

class ChatRequest(BaseModel):
    """Chat request from client"""
    message: Optional[str] = Field(None, description="User message")
    chat_id: Optional[str] = Field(None, description="Session ID. None = start a new session")


class ChatAPIResponse(BaseModel):
    response: str
    chat_id: str
    timestamp: datetime


class ChatHistoryResponse(BaseModel):
    chat_id: str
    messages: list[ChatExchange] = []


class HealthResponse(BaseModel):
    """Health check response"""
    status: str  # "ok" | "degraded"
    model: str
    ollama_url: str
    ollama_available: bool = False
    contracts_readable: bool = True
    contracts: int = 0
    version: str = __version__
