from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2026-10-19T08:15:30.123Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class BookInput:
    """Caller-supplied book fields, as read from a request payload.

    Values are kept as received; the create path validates them strictly,
    the update path only checks ``name`` and the page bound.
    """

    name: Any = None
    year: Any = None
    author: Any = None
    summary: Any = None
    publisher: Any = None
    page_count: Any = None
    read_page: Any = None
    reading: Any = None

    @staticmethod
    def from_payload(data: dict) -> "BookInput":
        return BookInput(
            name=data.get("name"),
            year=data.get("year"),
            author=data.get("author"),
            summary=data.get("summary"),
            publisher=data.get("publisher"),
            page_count=data.get("pageCount"),
            read_page=data.get("readPage"),
            reading=data.get("reading"),
        )

    @property
    def finished(self) -> bool:
        return self.read_page == self.page_count


class Book:
    """A single book record on the shelf."""

    def __init__(self, book_id: str, short_id: str, data: BookInput, inserted_at: datetime,
                 updated_at: datetime | None = None) -> None:
        self.id = book_id
        self.short_id = short_id
        self.inserted_at = inserted_at
        self.updated_at = updated_at or inserted_at
        self.apply(data)

    def apply(self, data: BookInput) -> None:
        """Replace every mutable field from ``data`` and recompute ``finished``."""
        self.name = data.name
        self.year = data.year
        self.author = data.author
        self.summary = data.summary
        self.publisher = data.publisher
        self.page_count = data.page_count
        self.read_page = data.read_page
        self.reading = data.reading
        self.finished = data.finished

    def to_input(self) -> BookInput:
        return BookInput(**{f.name: getattr(self, f.name) for f in fields(BookInput)})

    def copy(self) -> "Book":
        return Book(self.id, self.short_id, self.to_input(), self.inserted_at, self.updated_at)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} by {self.author} ({self.id})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shortId": self.short_id,
            "name": self.name,
            "year": self.year,
            "author": self.author,
            "summary": self.summary,
            "publisher": self.publisher,
            "pageCount": self.page_count,
            "readPage": self.read_page,
            "finished": self.finished,
            "reading": self.reading,
            "insertedAt": format_timestamp(self.inserted_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    def to_summary(self) -> dict:
        return {"id": self.id, "name": self.name, "publisher": self.publisher}
