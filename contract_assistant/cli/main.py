"""Main CLI application"""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from contract_assistant.db.chat_history import ChatSessionStore
from contract_assistant.db.contracts import ContractStore
from contract_assistant.exceptions import ContractAssistantError, NotFoundError, UpstreamUnavailable
from contract_assistant.models.contract import Contract, ContractStatus
from contract_assistant.services.alerts import generate_alerts
from contract_assistant.services.briefing import format_inr
from contract_assistant.services.chat import ContractChatService
from contract_assistant.utils.config import get_settings
from contract_assistant.utils.llm import OllamaClient

app = typer.Typer(
    name="contract-assistant",
    help="Contract tracking with expiry alerts and an Ollama chat assistant",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    ContractStatus.ACTIVE: "green",
    ContractStatus.EXPIRING: "yellow",
    ContractStatus.EXPIRED: "red",
}


def _contracts_table(contracts: list[Contract], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Company")
    table.add_column("Client")
    table.add_column("Type")
    table.add_column("Ends")
    table.add_column("Salary", justify="right")
    table.add_column("Status")

    for c in contracts:
        style = STATUS_STYLES.get(c.status, "white")
        table.add_row(
            str(c.id),
            c.title,
            c.company,
            c.client_name,
            c.contract_type.value,
            c.end_date.isoformat(),
            format_inr(c.salary),
            f"[{style}]{c.status.value}[/{style}]",
        )
    return table


@app.command("init")
def init():
    """Create the contracts and chat history files"""
    settings = get_settings()
    for name, store in (
        ("contracts", ContractStore.from_settings(settings)),
        ("chat history", ChatSessionStore.from_settings(settings)),
    ):
        created = store.init()
        state = "created" if created else "already exists"
        console.print(f"[green][OK][/green] {name}: {store.document.path} ({state})")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API"""
    import uvicorn

    from contract_assistant.api.app import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)

    console.print(Panel.fit(
        f"[bold blue]Contract Assistant API[/bold blue]\n\n"
        f"Contracts file: {settings.contracts_file}\n"
        f"Chat history file: {settings.chat_history_file}\n"
        f"Model: {settings.ollama_model} at {settings.ollama_url}\n"
        f"Make sure Ollama is running: [cyan]ollama serve[/cyan]",
        border_style="blue",
    ))
    uvicorn.run(
        "contract_assistant.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("list")
def list_contracts(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """List all contracts with their current status"""
    try:
        contracts = ContractStore.from_settings().list_all()
    except ContractAssistantError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([c.model_dump(mode="json") for c in contracts], ensure_ascii=False, indent=2))
        return

    if not contracts:
        console.print("[yellow]No contracts yet[/yellow]")
        return
    console.print(_contracts_table(contracts, f"Contracts ({len(contracts)})"))


@app.command("alerts")
def alerts(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show contracts that are expiring or expired"""
    store = ContractStore.from_settings()
    try:
        items = generate_alerts(store.list_all(), store.clock(), store.window_days)
    except ContractAssistantError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([a.model_dump(mode="json") for a in items], ensure_ascii=False, indent=2))
        return

    if not items:
        console.print("[green]No alerts, all contracts are active[/green]")
        return

    table = Table(title=f"Alerts ({len(items)})")
    table.add_column("ID", justify="right")
    table.add_column("Company")
    table.add_column("Ends")
    table.add_column("Days", justify="right")
    table.add_column("Message")
    for a in items:
        style = STATUS_STYLES[a.status]
        table.add_row(
            str(a.contract_id),
            a.company,
            a.end_date.isoformat(),
            str(a.days_remaining),
            f"[{style}]{a.message}[/{style}]",
        )
    console.print(table)


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Text to match against title, company, client or status"),
):
    """Search contracts"""
    results = ContractStore.from_settings().search(query)
    if not results:
        console.print(f"[yellow]No contracts match '{query}'[/yellow]")
        return
    console.print(_contracts_table(results, f"Results for '{query}' ({len(results)})"))


@app.command("ask")
def ask(
    message: str = typer.Argument(..., help="Question about your contracts"),
    chat_id: Optional[str] = typer.Option(None, "--chat-id", "-c", help="Continue an existing session"),
):
    """Ask the assistant a question"""
    settings = get_settings()
    service = ContractChatService(
        ContractStore.from_settings(settings),
        ChatSessionStore.from_settings(settings),
        OllamaClient.from_settings(settings),
    )

    try:
        with console.status("[blue]Thinking...[/blue]"):
            reply = asyncio.run(service.chat(message, chat_id))
    except UpstreamUnavailable as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print(f"[yellow]{e.hint}[/yellow]")
        raise typer.Exit(1)
    except ContractAssistantError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(Panel(reply.response, title="Assistant", border_style="green"))
    console.print(f"[dim]chat id: {reply.chat_id}[/dim]")


@app.command("sessions")
def sessions():
    """List chat sessions with their exchange counts"""
    store = ChatSessionStore.from_settings()
    session_ids = store.list_sessions()
    if not session_ids:
        console.print("[yellow]No chat sessions yet[/yellow]")
        return

    table = Table(title=f"Chat sessions ({len(session_ids)})")
    table.add_column("Chat ID", style="cyan")
    table.add_column("Exchanges", justify="right")
    table.add_column("Last message")
    for session_id in session_ids:
        exchanges = store.get(session_id)
        last = exchanges[-1].timestamp.isoformat() if exchanges else "-"
        table.add_row(session_id, str(len(exchanges)), last)
    console.print(table)


@app.command("history")
def history(
    chat_id: str = typer.Argument(..., help="Session ID"),
):
    """Show the exchanges of a chat session"""
    try:
        exchanges = ChatSessionStore.from_settings().get(chat_id)
    except NotFoundError:
        console.print(f"[red]Chat history '{chat_id}' not found[/red]")
        raise typer.Exit(1)

    for exchange in exchanges:
        console.print(f"[dim]{exchange.timestamp.isoformat()}[/dim]")
        console.print(f"[cyan]You:[/cyan] {exchange.user}")
        console.print(f"[green]Assistant:[/green] {exchange.bot}\n")
