"""Pytest configuration and fixtures"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from contract_assistant.api.app import create_app
from contract_assistant.db.chat_history import ChatSessionStore
from contract_assistant.db.contracts import ContractStore
from contract_assistant.services.status import utc_today

TODAY = date(2025, 6, 15)


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch):
    """Point both data files at a temporary directory"""
    monkeypatch.setenv("CONTRACTS_FILE", str(tmp_path / "contracts.json"))
    monkeypatch.setenv("CHAT_HISTORY_FILE", str(tmp_path / "chat_history.json"))
    monkeypatch.setenv("OLLAMA_URL", "http://ollama.test")

    yield

    # Cleanup handled by tmp_path fixture


class FakeLLM:
    """Stands in for OllamaClient, records every call"""

    model = "fake-model"
    base_url = "http://ollama.test"

    def __init__(self, reply: str = "You have one contract.", error: Exception = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def ask(self, briefing: str, message: str) -> str:
        self.calls.append((briefing, message))
        if self.error:
            raise self.error
        return self.reply

    async def ping(self) -> bool:
        return self.error is None


def days_from_today(days: int) -> str:
    """ISO date relative to the real UTC today"""
    return (utc_today() + timedelta(days=days)).isoformat()


def contract_fields(**overrides) -> dict:
    fields = {
        "title": "Quality Assurance",
        "company": "Acme Corp",
        "client_name": "Priya Sharma",
        "contract_type": "individual",
        "start_date": "2025-01-01",
        "end_date": "2026-01-01",
        "salary": 1500000,
        "notes": "Remote",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def contract_store(tmp_path):
    """Store with a fixed clock"""
    return ContractStore(tmp_path / "contracts.json", clock=lambda: TODAY)


@pytest.fixture
def chat_store(tmp_path):
    return ChatSessionStore(tmp_path / "chat_history.json")


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(fake_llm):
    """API client with the Ollama call replaced"""
    with TestClient(create_app(llm=fake_llm)) as test_client:
        yield test_client
