import logging
from typing import Any, Dict, List, Optional

import httpx

from bookshelf.config import settings

logger = logging.getLogger(__name__)


class BookshelfClientError(Exception):
    """A request to the bookshelf server failed.

    ``status_code`` is ``None`` when the server could not be reached.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BookshelfClient:
    """Small synchronous client for a running bookshelf server."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.client_timeout, connect=5.0),
            transport=transport,
        )

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request to {self.base_url}{path} failed: {e}")
            raise BookshelfClientError(f"Could not reach bookshelf server at {self.base_url}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise BookshelfClientError(message or response.text or response.reason_phrase,
                                       status_code=response.status_code)
        return body

    def add_book(self, payload: Dict[str, Any]) -> str:
        body = self._request("POST", "/books", json=payload)
        return body["data"]["bookId"]

    def list_books(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/books")["data"]["books"]

    def get_book(self, book_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/books/{book_id}")["data"]["book"]

    def update_book(self, book_id: str, payload: Dict[str, Any]) -> str:
        return self._request("PUT", f"/books/{book_id}", json=payload)["message"]

    def delete_book(self, book_id: str) -> str:
        return self._request("DELETE", f"/books/{book_id}")["message"]

    def delete_all_books(self) -> str:
        return self._request("DELETE", "/books")["message"]

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BookshelfClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
