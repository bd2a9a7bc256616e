"""Bookshelf - in-memory book record manager

This package contains the application modules:
- Data models (book.py)
- Input validation (validators.py)
- Book store service (store.py)
- HTTP API (api.py)
- HTTP client and CLI (client.py, main.py)
"""

__version__ = "1.0.0"
