import logging
import subprocess
import sys
from typing import Any, Dict, Optional

import typer

from bookshelf.client import BookshelfClient, BookshelfClientError
from bookshelf.config import settings
from bookshelf.ui_helpers import set_output_mode, print_book_list, print_book

logger = logging.getLogger(__name__)

app = typer.Typer(help="Bookshelf CLI")


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="Base URL of a running bookshelf server",
    ),
):
    """Global CLI options (output mode, server URL)."""
    if output:
        set_output_mode(output)
    ctx.obj = {"url": url or settings.api_url}


def _client(ctx: typer.Context) -> BookshelfClient:
    url = (ctx.obj or {}).get("url") or settings.api_url
    return BookshelfClient(base_url=url)


def _fail(error: BookshelfClientError) -> None:
    print(f"Error: {error.message}")
    raise typer.Exit(code=1)


def _book_payload(name: str, year: int, author: str, summary: str, publisher: str,
                  page_count: int, read_page: int, reading: bool) -> Dict[str, Any]:
    return {
        "name": name,
        "year": year,
        "author": author,
        "summary": summary,
        "publisher": publisher,
        "pageCount": page_count,
        "readPage": read_page,
        "reading": reading,
    }


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host", help="Bind address"),
    port: int = typer.Option(settings.api_port, "--port", "-p", help="Port to listen on"),
):
    """Start the HTTP server with uvicorn."""
    url = f"http://{host}:{port}/"
    logger.info(f"Starting bookshelf server on {url}")
    print(f"Starting bookshelf server on {url}")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "bookshelf.api:app",
        "--host", host,
        "--port", str(port),
        "--log-level", settings.log_level.lower(),
    ]
    try:
        subprocess.run(args)
    except KeyboardInterrupt:
        print("Server stopped.")


@app.command("list")
def cli_list(ctx: typer.Context):
    """List every book on the shelf."""
    with _client(ctx) as client:
        try:
            books = client.list_books()
        except BookshelfClientError as e:
            _fail(e)
    print_book_list(books)


@app.command("show")
def cli_show(ctx: typer.Context, book_id: str = typer.Argument(..., help="Book id")):
    """Show every field of a single book."""
    with _client(ctx) as client:
        try:
            book = client.get_book(book_id)
        except BookshelfClientError as e:
            _fail(e)
    print_book(book)


@app.command("add")
def cli_add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Book name"),
    year: int = typer.Option(..., "--year", "-y", help="Publication year"),
    author: str = typer.Option(..., "--author", "-a", help="Author"),
    summary: str = typer.Option(..., "--summary", "-s", help="Short summary"),
    publisher: str = typer.Option(..., "--publisher", help="Publisher"),
    page_count: int = typer.Option(..., "--page-count", help="Total number of pages"),
    read_page: int = typer.Option(0, "--read-page", help="Last page read"),
    reading: bool = typer.Option(False, "--reading/--not-reading", help="Currently reading"),
):
    """Add a book to the shelf."""
    payload = _book_payload(name, year, author, summary, publisher, page_count, read_page, reading)
    with _client(ctx) as client:
        try:
            book_id = client.add_book(payload)
        except BookshelfClientError as e:
            _fail(e)
    print(f"Book added: {book_id}")


@app.command("update")
def cli_update(
    ctx: typer.Context,
    book_id: str = typer.Argument(..., help="Book id"),
    name: str = typer.Option(..., "--name", "-n", help="Book name"),
    year: int = typer.Option(..., "--year", "-y", help="Publication year"),
    author: str = typer.Option(..., "--author", "-a", help="Author"),
    summary: str = typer.Option(..., "--summary", "-s", help="Short summary"),
    publisher: str = typer.Option(..., "--publisher", help="Publisher"),
    page_count: int = typer.Option(..., "--page-count", help="Total number of pages"),
    read_page: int = typer.Option(0, "--read-page", help="Last page read"),
    reading: bool = typer.Option(False, "--reading/--not-reading", help="Currently reading"),
):
    """Replace every field of an existing book."""
    payload = _book_payload(name, year, author, summary, publisher, page_count, read_page, reading)
    with _client(ctx) as client:
        try:
            message = client.update_book(book_id, payload)
        except BookshelfClientError as e:
            _fail(e)
    print(message)


@app.command("remove")
def cli_remove(ctx: typer.Context, book_id: str = typer.Argument(..., help="Book id")):
    """Remove a book by id."""
    with _client(ctx) as client:
        try:
            message = client.delete_book(book_id)
        except BookshelfClientError as e:
            _fail(e)
    print(message)


@app.command("clear")
def cli_clear(ctx: typer.Context):
    """Remove every book from the shelf."""
    with _client(ctx) as client:
        try:
            message = client.delete_all_books()
        except BookshelfClientError as e:
            _fail(e)
    print(message)


if __name__ == "__main__":
    app()
