"""Configuration management using pydantic-settings"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Persisted documents
    contracts_file: str = Field(default="./data/contracts.json", description="Path to contracts JSON document")
    chat_history_file: str = Field(default="./data/chat_history.json", description="Path to chat history JSON document")

    # Ollama settings
    ollama_url: str = Field(default="http://localhost:11434", description="Base URL of the Ollama server")
    ollama_model: str = Field(default="llama2:7b", description="Ollama model used for chat")
    ollama_timeout: float = Field(default=120.0, description="Seconds to wait for an Ollama reply")
    llm_temperature: Optional[float] = Field(default=None, description="Sampling temperature, model default if unset")

    # Alerting
    expiring_window_days: int = Field(default=30, ge=0, description="Days before end date a contract counts as expiring")

    log_level: str = Field(default="INFO", description="Logging level")

    # API server
    api_host: str = Field(default="0.0.0.0", description="Host the API binds to")
    api_port: int = Field(default=3000, description="Port the API listens on")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    """Get application settings"""
    return Settings()
