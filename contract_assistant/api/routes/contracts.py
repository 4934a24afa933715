"""Contract API routes: CRUD, search and alerts"""

import logging

from fastapi import APIRouter

from contract_assistant.api.schemas import (
    AlertListResponse,
    ContractCreateRequest,
    ContractCreateResponse,
    ContractListResponse,
    ContractMutationResponse,
    ContractResponse,
    ContractUpdateRequest,
    MessageResponse,
    SearchRequest,
    SearchResponse,
)
from contract_assistant.db.contracts import ContractStore
from contract_assistant.services.alerts import generate_alerts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Shared contract store, set via init_store() from app.py
store: ContractStore = ContractStore.from_settings()


def init_store(shared_store: ContractStore):
    """Set the shared contract store (called from app.py)."""
    global store
    store = shared_store


@router.get("/contracts", response_model=ContractListResponse)
def list_contracts():
    """All contracts with freshly derived status"""
    contracts = store.list_all()
    logger.info(f"Returning {len(contracts)} contracts")
    return ContractListResponse(contracts=contracts)


@router.post("/contracts", response_model=ContractCreateResponse, status_code=201)
def create_contract(request: ContractCreateRequest):
    contract = store.create(request.model_dump(exclude_unset=True))
    return ContractCreateResponse(message="Contract created successfully", contract=contract)


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(contract_id: int):
    return ContractResponse(contract=store.get(contract_id))


@router.put("/contracts/{contract_id}", response_model=ContractMutationResponse)
def update_contract(contract_id: int, request: ContractUpdateRequest):
    contract = store.update(contract_id, request.model_dump(exclude_unset=True))
    return ContractMutationResponse(message="Contract updated", contract=contract)


@router.delete("/contracts/{contract_id}", response_model=MessageResponse)
def delete_contract(contract_id: int):
    """Delete a contract; unknown ids succeed too"""
    store.delete(contract_id)
    return MessageResponse(message="Contract deleted")


@router.post("/search", response_model=SearchResponse)
def search_contracts(request: SearchRequest):
    results = store.search(request.query)
    return SearchResponse(results=results, count=len(results))


@router.get("/alerts", response_model=AlertListResponse)
def list_alerts():
    """Alerts for expiring and expired contracts"""
    alerts = generate_alerts(store.list_all(), store.clock(), store.window_days)
    return AlertListResponse(alerts=alerts, count=len(alerts))
