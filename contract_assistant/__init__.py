"""Contract tracking backend with an Ollama-powered assistant"""

__version__ = "0.1.0"
