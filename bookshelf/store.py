import logging
import secrets
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from bookshelf.book import Book, BookInput
from bookshelf.config import settings
from bookshelf.validators import BookValidator

logger = logging.getLogger(__name__)

# URL-safe alphabet, 64 symbols.
ID_ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"


class BookValidationError(ValueError):
    """The supplied book fields break a validation rule."""


class BookNotFoundError(LookupError):
    """No book on the shelf has the requested id."""

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


def generate_id(size: int) -> str:
    """Random URL-safe identifier of ``size`` characters."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookStore:
    """Holds the shelf's books in insertion order and guards them with one lock."""

    def __init__(self, id_size: Optional[int] = None, short_id_size: Optional[int] = None,
                 clock: Callable[[], datetime] = utc_now) -> None:
        self.id_size = id_size or settings.book_id_size
        self.short_id_size = short_id_size or settings.book_short_id_size
        self._clock = clock
        self._books: List[Book] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def __contains__(self, book_id: str) -> bool:
        with self._lock:
            return self._index_of(book_id) is not None

    # ------------------------- Core operations ------------------------- #
    def create(self, payload: dict) -> str:
        """Validate ``payload`` with the full schema, store the book and return its id."""
        result = BookValidator.validate_create(payload)
        if not result.ok:
            logger.warning(f"Rejected new book: {result.message}")
            raise BookValidationError(result.message)

        data = BookInput.from_payload(payload)
        with self._lock:
            book_id = self._new_unique_id()
            short_id = generate_id(self.short_id_size)
            book = Book(book_id, short_id, data, inserted_at=self._clock())
            self._books.append(book)

        logger.info(f"Created book: id={book_id}, short_id={short_id}")
        return book_id

    def list(self) -> List[dict]:
        """Summary view of every book: id, name and publisher only."""
        with self._lock:
            return [book.to_summary() for book in self._books]

    def get_by_id(self, book_id: str) -> Book:
        with self._lock:
            index = self._index_of(book_id)
            if index is None:
                raise BookNotFoundError(book_id)
            return self._books[index].copy()

    def update(self, book_id: str, data: BookInput) -> Book:
        """Replace a book's mutable fields in place.

        Only ``name`` presence and ``readPage <= pageCount`` are checked here;
        the other fields are stored as given.
        """
        with self._lock:
            index = self._index_of(book_id)
            if index is None:
                raise BookNotFoundError(book_id)

            result = BookValidator.validate_update(data)
            if not result.ok:
                logger.warning(f"Rejected update of book {book_id}: {result.message}")
                raise BookValidationError(result.message)

            book = self._books[index]
            book.apply(data)
            book.updated_at = self._clock()
            logger.info(f"Updated book {book_id}")
            return book.copy()

    def delete_by_id(self, book_id: str) -> None:
        with self._lock:
            index = self._index_of(book_id)
            if index is None:
                raise BookNotFoundError(book_id)
            del self._books[index]
        logger.info(f"Deleted book {book_id}")

    def delete_all(self) -> int:
        """Empty the shelf. Returns how many books were removed."""
        with self._lock:
            removed = len(self._books)
            self._books = []
        logger.info(f"Deleted all books ({removed} removed)")
        return removed

    # ------------------------- Helpers ------------------------- #
    def _index_of(self, book_id: str) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def _new_unique_id(self) -> str:
        while True:
            book_id = generate_id(self.id_size)
            if self._index_of(book_id) is None:
                return book_id
