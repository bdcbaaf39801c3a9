"""CLI interface for the Tecfag RAG assistant."""

import asyncio
import json
import logging
import os
import uuid
from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ....config import get_logger, settings, setup_logging
from ....core.domain import ChatMessage, ChatMode, ChatResponse, DocumentRecord
from ....core.services import QueryAnalyzer
from ...common.exception_handler import format_exception_json, log_exception

app = typer.Typer(
    name="tecfag-rag",
    help="Tecfag I.A. - assistente técnico e comercial sobre o catálogo de equipamentos",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"

EXIT_COMMANDS = ("sair", "quit", "exit", "q")

logger = get_logger("cli")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )


def handle_cli_error(exc: Exception) -> None:
    """Display an error as a short message, or as full JSON when DEBUG=true."""
    log_exception(exc, log=logger, level=logging.DEBUG)
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, ensure_ascii=False, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = error_data["error"].get("code", "UNKNOWN")
    console.print(f"\n[red]Error [{error_code}]:[/] {error_data['error']['message']}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")

    location = error_data.get("location", {})
    if location:
        loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
        console.print(f"[dim]Location: {loc_str}[/]")

    console.print("[dim]Set DEBUG=true for full details[/]")


def _print_response(response: ChatResponse, max_sources: int = 5) -> None:
    console.print(Panel(Markdown(response.response), title="[bold blue]Tecfag I.A.[/]", border_style="blue"))

    if response.sources:
        console.print("[dim]Fontes:[/]")
        for source in response.sources[:max_sources]:
            console.print(f"  [dim]{source.file_name} (trecho {source.chunk_index}, {source.similarity:.2f})[/]")

    if response.token_usage:
        usage = response.token_usage
        console.print(f"[dim]Tokens: {usage.total_tokens} ({usage.model})[/]")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Pergunta sobre os documentos indexados"),
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Restrict to one catalog"),
    mode: ChatMode = typer.Option(ChatMode.EDUCATIONAL, "--mode", "-m", help="Answer persona"),
    table: bool = typer.Option(False, "--table", help="Prefer markdown tables"),
) -> None:
    """Ask a single question and get an answer."""
    from ....composition import get_answer_service

    try:
        service = get_answer_service()
        with console.status("[bold green]Pensando...[/]"):
            response = asyncio.run(service.answer(question, catalog, mode=mode, table_mode=table))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    _print_response(response)


@app.command()
def chat(
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Restrict to one catalog"),
    mode: ChatMode = typer.Option(ChatMode.EDUCATIONAL, "--mode", "-m", help="Answer persona"),
) -> None:
    """Start an interactive chat session."""
    from ....composition import get_answer_service

    console.print(
        Panel.fit(
            "[bold blue]Tecfag I.A.[/]\n"
            "[dim]Assistente sobre os equipamentos e catálogos da Tecfag[/]\n\n"
            "Exemplos:\n"
            "• Quantas seladoras temos no catálogo?\n"
            "• Qual a diferença entre a TC20 e a TC30?\n"
            "• Como operar a datadora hot stamp?\n\n"
            "[dim]Digite 'sair' para encerrar[/]",
            title="Bem-vindo",
            border_style="blue",
        )
    )

    try:
        service = get_answer_service()
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    history: list[ChatMessage] = []
    while True:
        try:
            question = Prompt.ask("\n[bold cyan]Você[/]")

            if question.lower() in EXIT_COMMANDS:
                console.print("[dim]Até logo![/]")
                break

            if not question.strip():
                continue

            with console.status("[bold green]Pensando...[/]"):
                response = asyncio.run(service.answer(question, catalog, history, mode=mode))

            console.print()
            _print_response(response, max_sources=3)
            history.append(ChatMessage(role="user", content=question))
            history.append(ChatMessage(role="assistant", content=response.response))

        except KeyboardInterrupt:
            console.print("\n[dim]Até logo![/]")
            break
        except Exception as exc:
            handle_cli_error(exc)


@app.command()
def analyze(
    question: str = typer.Argument(..., help="Question to classify"),
) -> None:
    """Show how a question would be classified and retrieved."""
    analysis = QueryAnalyzer().analyze(question)

    table = Table(title="Query analysis", show_header=False)
    table.add_row("type", analysis.type.value)
    table.add_row("context_size", str(analysis.context_size))
    table.add_row("needs_multi_query", str(analysis.needs_multi_query))
    table.add_row("is_count_query", str(analysis.is_count_query))
    table.add_row("requires_full_scan", str(analysis.requires_full_scan))
    table.add_row("categories", ", ".join(analysis.categories) or "-")
    table.add_row("keywords", ", ".join(analysis.keywords) or "-")
    console.print(table)

    if analysis.suggested_queries:
        console.print("[bold]Sub-queries:[/]")
        for query in analysis.suggested_queries:
            console.print(f"  • {query}")


def _read_text(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Error:[/] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


@app.command()
def index(
    path: Path = typer.Argument(..., help="Plain-text or markdown file with extracted text"),
    name: str | None = typer.Option(None, "--name", help="File name shown in sources"),
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Catalog the document belongs to"),
    file_type: str | None = typer.Option(None, "--type", help="File type (defaults to the extension)"),
    document_id: str | None = typer.Option(None, "--id", help="Document id (random when omitted)"),
) -> None:
    """Index a text file into the knowledge base."""
    from ....composition import get_indexer

    text = _read_text(path)
    record = DocumentRecord(
        id=document_id or uuid.uuid4().hex,
        file_name=name or path.name,
        file_type=file_type or path.suffix.lstrip(".") or None,
        catalog_id=catalog,
    )

    try:
        with console.status(f"[bold green]Indexando {record.file_name}...[/]"):
            report = asyncio.run(get_indexer().index_document(record, text))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(
        f"[green]✅ {record.file_name}[/] indexed as [bold]{report.document_id}[/]: "
        f"{report.chunk_count} chunks, ~{report.total_tokens} tokens"
    )


@app.command()
def reindex(
    document_id: str = typer.Argument(..., help="Id of an indexed document"),
    path: Path = typer.Argument(..., help="File with the document's current text"),
) -> None:
    """Replace an indexed document's chunks with freshly chunked text."""
    from ....composition import get_indexer

    text = _read_text(path)
    try:
        with console.status("[bold green]Reindexando...[/]"):
            report = asyncio.run(get_indexer().reindex_document(document_id, text))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(f"[green]✅ Reindexed {document_id}:[/] {report.chunk_count} chunks")


@app.command()
def delete(
    document_id: str = typer.Argument(..., help="Id of an indexed document"),
) -> None:
    """Delete a document and all of its chunks."""
    from ....composition import get_indexer

    try:
        asyncio.run(get_indexer().delete_document(document_id))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(f"[green]✅ Deleted {document_id}[/]")


@app.command()
def stats(
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Restrict to one catalog"),
) -> None:
    """Show the current state of the knowledge base."""
    from ....composition import get_vector_store

    try:
        document_stats = asyncio.run(get_vector_store().get_document_stats(catalog))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print("[bold]Tecfag I.A. knowledge base[/]\n")
    console.print(f"  Documents: {document_stats.total_documents}")
    console.print(f"  Chunks: {document_stats.total_chunks}")

    if document_stats.total_documents == 0:
        console.print("\n[yellow]Knowledge base is empty. Run 'tecfag-rag index PATH' to add documents.[/]")
        return

    for name in document_stats.document_names:
        console.print(f"  [dim]• {name}[/]")


@app.command()
def suggest(
    catalog: str | None = typer.Option(None, "--catalog", "-c", help="Restrict to one catalog"),
    count: int = typer.Option(3, "--count", "-n", min=1, help="Number of questions"),
) -> None:
    """Suggest questions about the indexed documents."""
    from ....composition import get_answer_service

    try:
        with console.status("[bold green]Gerando sugestões...[/]"):
            questions = asyncio.run(get_answer_service().suggest_questions(catalog, count))
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    for question in questions:
        console.print(f"• {question}")


if __name__ == "__main__":
    app()
