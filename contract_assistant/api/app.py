"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contract_assistant import __version__
from contract_assistant.api.routes import chat as chat_routes
from contract_assistant.api.routes import contracts as contract_routes
from contract_assistant.db.chat_history import ChatSessionStore
from contract_assistant.db.contracts import ContractStore
from contract_assistant.exceptions import (
    NotFoundError,
    PersistenceError,
    UpstreamUnavailable,
    ValidationError,
)
from contract_assistant.services.chat import ContractChatService
from contract_assistant.utils.config import Settings, get_settings
from contract_assistant.utils.llm import OllamaClient

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s | %(message)s",
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc), "missing_fields": exc.fields})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_unavailable(request: Request, exc: UpstreamUnavailable):
        return JSONResponse(
            status_code=500,
            content={
                "error": f"Error communicating with Ollama. {exc.hint}",
                "details": str(exc),
            },
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(
    settings: Optional[Settings] = None,
    llm: Optional[OllamaClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or get_settings()

    contracts = ContractStore.from_settings(settings)
    sessions = ChatSessionStore.from_settings(settings)
    service = ContractChatService(contracts, sessions, llm or OllamaClient.from_settings(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: make sure both data files exist"""
        contracts.init()
        sessions.init()
        logger.info(f"Contracts file: {contracts.document.path}")
        logger.info(f"Chat history file: {sessions.document.path}")
        logger.info(f"Using model {service.llm.model} at {service.llm.base_url}")
        yield

    app = FastAPI(
        title="Contract Assistant API",
        description="Contract tracking with expiry alerts and an Ollama chat assistant",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS: the frontend is served from another port
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    contract_routes.init_store(contracts)
    chat_routes.init_service(service)
    app.include_router(contract_routes.router)
    app.include_router(chat_routes.router)
    _register_error_handlers(app)

    return app
