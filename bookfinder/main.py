import asyncio
import logging
import typer
from rich.console import Console
from rich.table import Table
from bookfinder.config import config
from bookfinder.models import SearchResult
from bookfinder.search import book_search

app = typer.Typer(
    name="bookfinder",
    help="Academic book discovery - asks an LLM for recommendations and finds covers and PDFs for them.",
    add_completion=False
)
console = Console()

def render_result(result: SearchResult):
    if not result.books:
        console.print(f"[yellow]No results for '{result.query}'.[/yellow]")
        return

    if result.enhanced_query and result.enhanced_query != result.query:
        console.print(f"Enhanced query: [bold]{result.enhanced_query}[/bold]")
    if result.search_terms:
        console.print(f"Search terms: [dim]{', '.join(result.search_terms)}[/dim]")

    table = Table(title=f"Recommendations for '{result.query}'")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Author", style="magenta")
    table.add_column("PDF", style="green")
    table.add_column("Cover", style="dim", overflow="fold")

    for i, book in enumerate(result.books, start=1):
        table.add_row(
            str(i),
            book.title,
            ", ".join(book.author),
            book.download_url or "-",
            book.cover_url,
        )

    console.print(table)
    console.print(
        f"[bold]{result.total_results}[/bold] books, "
        f"[green]{result.pdf_found_count}[/green] with PDFs, "
        f"[yellow]{result.books_without_pdfs or 0}[/yellow] without"
    )

@app.command()
def search(
    query: str = typer.Argument(..., help="What to find books about"),
    verbose: bool = typer.Option(False, "--verbose", help="Show detailed output")
):
    """
    Recommends academic books for QUERY and looks up covers and PDFs.
    """
    if verbose:
        from bookfinder.logger import setup_logging
        setup_logging(logging.DEBUG)

    if not config.OPENROUTER_API_KEY:
        console.print("[red]Error: OPENROUTER_API_KEY is not set. Set it with:[/red]")
        console.print("[yellow]  bookfinder config-set OPENROUTER_API_KEY <key>[/yellow]")
        raise typer.Exit(code=1)

    with console.status(f"Searching for [bold]{query}[/bold]..."):
        result = asyncio.run(book_search.search(query))

    render_result(result)

@app.command()
def config_set(
    key: str = typer.Argument(..., help="Config key (OPENROUTER_API_KEY, GOOGLE_API_KEY, GOOGLE_CX, etc)"),
    value: str = typer.Argument(..., help="Value to set")
):
    """
    Set a configuration value globally (e.g. OPENROUTER_API_KEY, GOOGLE_CX).
    """
    try:
        config.save(key.upper(), value)
    except ValueError as e:
        console.print(f"[red]Invalid value for {key.upper()}: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Updated {key.upper()}[/green]")

@app.command()
def serve(
    port: int = typer.Option(8743, "--port", help="Port to bind to")
):
    """
    Runs the REST API for the web frontend.
    """
    from bookfinder.api import start_server
    start_server(port)

if __name__ == "__main__":
    app()
