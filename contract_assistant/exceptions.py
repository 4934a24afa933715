"""Error taxonomy shared by stores, services and the API"""

from typing import Optional, Sequence

OLLAMA_HINT = "Make sure Ollama is running with: ollama serve"


class ContractAssistantError(Exception):
    """Base class for all application errors"""


class ValidationError(ContractAssistantError):
    """Client-fixable input problem, e.g. missing required contract fields"""

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class NotFoundError(ContractAssistantError):
    """Unknown contract id or chat session"""


class UpstreamUnavailable(ContractAssistantError):
    """The inference service could not produce a reply"""

    def __init__(self, message: str, hint: str = OLLAMA_HINT):
        super().__init__(message)
        self.hint = hint


class PersistenceError(ContractAssistantError):
    """A JSON document could not be read or written"""
