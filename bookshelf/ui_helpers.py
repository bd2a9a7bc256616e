import os
import json
from typing import Any, Dict, List
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable controlling CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKSHELF_CLI_OUTPUT"

_console = Console()

BOOK_FIELDS = (
    ("id", "ID"),
    ("shortId", "Short ID"),
    ("name", "Name"),
    ("year", "Year"),
    ("author", "Author"),
    ("summary", "Summary"),
    ("publisher", "Publisher"),
    ("pageCount", "Page count"),
    ("readPage", "Read page"),
    ("finished", "Finished"),
    ("reading", "Reading"),
    ("insertedAt", "Inserted at"),
    ("updatedAt", "Updated at"),
)


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_book_list(books: List[Dict[str, Any]]) -> None:
    """Print the shelf summary in the current output mode.
    - plain: 'id - name (publisher)' lines, or 'No books on the shelf.'
    - json: JSON array of id, name, publisher
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books on the shelf.")
        return

    if mode == "json":
        print(json.dumps(books, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Publisher", style="white")
        for b in books:
            table.add_row(escape(str(b.get("id", ""))), escape(str(b.get("name", ""))),
                          escape(str(b.get("publisher", ""))))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.get('id', '')} - {b.get('name', '')} ({b.get('publisher', '')})")


def print_book(book: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{label}:[/] {escape(str(book.get(key)))}" for key, label in BOOK_FIELDS)
        _console.print(Panel.fit(content, title=escape(str(book.get("name", ""))), border_style="blue"))
    else:
        for key, label in BOOK_FIELDS:
            print(f"{label}: {book.get(key)}")
