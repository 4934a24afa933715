"""Entry point for `python -m contract_assistant`"""

from contract_assistant.cli.main import app

if __name__ == "__main__":
    app()
