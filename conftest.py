import pytest

from bookshelf.store import BookStore


@pytest.fixture
def store():
    # Fresh, empty shelf for each test
    return BookStore()


@pytest.fixture
def book_payload():
    return {
        "name": "A",
        "year": 2020,
        "author": "X",
        "summary": "s",
        "publisher": "p",
        "pageCount": 100,
        "readPage": 100,
        "reading": False,
    }
