import pytest
from fastapi.testclient import TestClient

from bookshelf.api import create_app
from bookshelf.store import BookStore


@pytest.fixture
def client():
    # Each test gets its own application and empty store
    app = create_app(store=BookStore())
    with TestClient(app) as test_client:
        yield test_client


def _add(client, payload):
    response = client.post("/books", json=payload)
    assert response.status_code == 201
    return response.json()["data"]["bookId"]


def test_get_books_empty(client):
    response = client.get("/books")
    assert response.status_code == 200
    assert response.json() == {"status": "success", "data": {"books": []}}


def test_add_finished_book(client, book_payload):
    response = client.post("/books", json=book_payload)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Book added successfully"
    book_id = body["data"]["bookId"]

    book = client.get(f"/books/{book_id}").json()["data"]["book"]
    assert book["id"] == book_id
    assert book["finished"] is True
    assert book["reading"] is False
    assert book["pageCount"] == 100
    assert len(book["shortId"]) == 10
    assert book["insertedAt"] == book["updatedAt"]
    assert book["insertedAt"].endswith("Z")


def test_add_book_read_page_over_page_count(client, book_payload):
    book_payload["readPage"] = 150
    response = client.post("/books", json=book_payload)
    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": "readPage must not be greater than pageCount"}
    assert client.get("/books").json()["data"]["books"] == []


def test_add_book_without_name(client, book_payload):
    del book_payload["name"]
    response = client.post("/books", json=book_payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide the book name"


def test_add_book_malformed_json(client):
    response = client.post("/books", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": "Request body must be valid JSON"}


def test_add_book_without_body(client):
    response = client.post("/books")
    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": "Please provide the book name"}


def test_list_only_exposes_summary(client, book_payload):
    first = _add(client, book_payload)
    book_payload["name"] = "B"
    second = _add(client, book_payload)

    books = client.get("/books").json()["data"]["books"]
    assert books == [
        {"id": first, "name": "A", "publisher": "p"},
        {"id": second, "name": "B", "publisher": "p"},
    ]


def test_get_unknown_book(client):
    response = client.get("/books/unknown")
    assert response.status_code == 404
    assert response.json() == {"status": "fail", "message": "Book not found"}


def test_update_book(client, book_payload):
    book_id = _add(client, book_payload)
    before = client.get(f"/books/{book_id}").json()["data"]["book"]

    book_payload.update({"name": "Renamed", "readPage": 40, "reading": True})
    response = client.put(f"/books/{book_id}", json=book_payload)
    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Book updated successfully"}

    after = client.get(f"/books/{book_id}").json()["data"]["book"]
    assert after["name"] == "Renamed"
    assert after["readPage"] == 40
    assert after["finished"] is False
    assert after["reading"] is True
    assert after["shortId"] == before["shortId"]
    assert after["insertedAt"] == before["insertedAt"]


def test_update_unknown_book(client, book_payload):
    response = client.put("/books/unknown", json=book_payload)
    assert response.status_code == 404
    assert response.json() == {"status": "fail", "message": "Failed to update book. Id not found"}


def test_update_without_name(client, book_payload):
    book_id = _add(client, book_payload)
    del book_payload["name"]
    response = client.put(f"/books/{book_id}", json=book_payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Failed to update book. Please provide the book name"


def test_update_read_page_over_page_count(client, book_payload):
    book_id = _add(client, book_payload)
    book_payload["readPage"] = 101
    response = client.put(f"/books/{book_id}", json=book_payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Failed to update book. readPage must not be greater than pageCount"


def test_delete_book(client, book_payload):
    book_id = _add(client, book_payload)

    response = client.delete(f"/books/{book_id}")
    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Book deleted successfully"}

    assert client.get(f"/books/{book_id}").status_code == 404


def test_delete_unknown_book(client):
    response = client.delete("/books/unknown")
    assert response.status_code == 404
    assert response.json() == {"status": "fail", "message": "Failed to delete book. Id not found"}


def test_delete_all_books(client, book_payload):
    _add(client, book_payload)
    _add(client, book_payload)

    for _ in range(2):
        response = client.delete("/books")
        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "All books deleted successfully"}
        assert client.get("/books").json()["data"]["books"] == []


def test_health(client, book_payload):
    _add(client, book_payload)
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["total_books"] == 1


def test_unknown_route_uses_fail_envelope(client):
    response = client.get("/shelves")
    assert response.status_code == 404
    assert response.json()["status"] == "fail"


def test_delete_keeps_order_of_remaining(client, book_payload):
    ids = []
    for name in ("A", "B", "C"):
        book_payload["name"] = name
        ids.append(_add(client, book_payload))

    assert client.delete(f"/books/{ids[1]}").status_code == 200

    books = client.get("/books").json()["data"]["books"]
    assert [b["id"] for b in books] == [ids[0], ids[2]]


def test_add_book_non_object_body(client):
    response = client.post("/books", json=["A", "B"])
    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": '"value" must be of type object'}


def test_add_book_null_field(client, book_payload):
    book_payload["name"] = None
    response = client.post("/books", json=book_payload)
    assert response.status_code == 400
    assert response.json()["message"] == '"name" must be a string'


def test_add_book_unknown_field(client, book_payload):
    book_payload["page_count"] = 100
    response = client.post("/books", json=book_payload)
    assert response.status_code == 400
    assert response.json()["message"] == '"page_count" is not allowed'


def test_update_without_body(client, book_payload):
    book_id = _add(client, book_payload)
    response = client.put(f"/books/{book_id}")
    assert response.status_code == 400
    assert response.json()["message"] == "Failed to update book. Please provide the book name"
