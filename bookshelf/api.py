import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshelf.book import BookInput
from bookshelf.config import Settings, settings as default_settings
from bookshelf.store import BookNotFoundError, BookStore, BookValidationError
from bookshelf.validators import NOT_AN_OBJECT

logger = logging.getLogger(__name__)


# --- Models ---
class BookPayloadModel(BaseModel):
    """Request body for POST and PUT /books.

    Fields are left untyped so the ordered rules in ``BookValidator`` decide
    what is reported; unknown keys are kept and rejected there too.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    year: Any = None
    author: Any = None
    summary: Any = None
    publisher: Any = None
    page_count: Any = Field(None, alias="pageCount")
    read_page: Any = Field(None, alias="readPage")
    reading: Any = None

    def to_payload(self) -> dict:
        """Keys the client actually sent, under their wire names."""
        payload = self.model_dump(by_alias=True, include=set(self.model_fields_set))
        payload.update(self.model_extra or {})
        return payload

    def to_input(self) -> BookInput:
        return BookInput(
            name=self.name,
            year=self.year,
            author=self.author,
            summary=self.summary,
            publisher=self.publisher,
            page_count=self.page_count,
            read_page=self.read_page,
            reading=self.reading,
        )


class BookSummaryModel(BaseModel):
    id: str
    name: Any = None
    publisher: Any = None


class BookModel(BaseModel):
    id: str
    shortId: str
    name: Any = None
    year: Any = None
    author: Any = None
    summary: Any = None
    publisher: Any = None
    pageCount: Any = None
    readPage: Any = None
    finished: bool
    reading: Any = None
    insertedAt: str
    updatedAt: str


class BookIdData(BaseModel):
    bookId: str


class BookListData(BaseModel):
    books: List[BookSummaryModel]


class BookDetailData(BaseModel):
    book: BookModel


class MessageResponse(BaseModel):
    status: str = "success"
    message: str


class BookCreatedResponse(MessageResponse):
    data: BookIdData


class BookListResponse(BaseModel):
    status: str = "success"
    data: BookListData


class BookDetailResponse(BaseModel):
    status: str = "success"
    data: BookDetailData


class FailResponse(BaseModel):
    status: str = "fail"
    message: str


class HealthModel(BaseModel):
    status: str
    timestamp: str
    total_books: int


# --- Dependencies ---
def get_store(request: Request) -> BookStore:
    """Store owned by the running application."""
    return request.app.state.store


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "fail", "message": message})


# --- Error handlers ---
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _fail(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning(f"Malformed request to {request.url.path}: {errors}")
    if any(error.get("type") == "json_invalid" for error in errors):
        return _fail(400, "Request body must be valid JSON")
    return _fail(400, NOT_AN_OBJECT)


async def book_validation_handler(request: Request, exc: BookValidationError) -> JSONResponse:
    return _fail(400, str(exc))


async def book_not_found_handler(request: Request, exc: BookNotFoundError) -> JSONResponse:
    return _fail(404, "Book not found")


def configure_logging(config: Settings) -> None:
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(store: Optional[BookStore] = None, config: Optional[Settings] = None) -> FastAPI:
    """Build the HTTP application around a book store.

    A fresh, empty store is created unless one is passed in.
    """
    config = config or default_settings
    configure_logging(config)

    app = FastAPI(title=config.app_name, version=config.app_version)
    app.state.store = store if store is not None else BookStore()

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(BookValidationError, book_validation_handler)
    app.add_exception_handler(BookNotFoundError, book_not_found_handler)

    app.include_router(router)
    return app


# --- API Endpoints ---
router = APIRouter()

FAIL_RESPONSES = {400: {"model": FailResponse}, 404: {"model": FailResponse}}


@router.get("/health", response_model=HealthModel)
def health(store: BookStore = Depends(get_store)):
    """Lightweight health endpoint for process supervisors."""
    now_iso = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return {"status": "healthy", "timestamp": now_iso, "total_books": len(store)}


@router.post("/books", status_code=201, response_model=BookCreatedResponse, responses=FAIL_RESPONSES)
def add_book(payload: Optional[BookPayloadModel] = Body(None), store: BookStore = Depends(get_store)):
    """Add a book. Every field is required and checked in order."""
    book_id = store.create(payload.to_payload() if payload else {})
    return {"status": "success", "message": "Book added successfully", "data": {"bookId": book_id}}


@router.get("/books", response_model=BookListResponse)
def list_books(store: BookStore = Depends(get_store)):
    return {"status": "success", "data": {"books": store.list()}}


@router.get("/books/{book_id}", response_model=BookDetailResponse, responses=FAIL_RESPONSES)
def get_book(book_id: str, store: BookStore = Depends(get_store)):
    book = store.get_by_id(book_id)
    return {"status": "success", "data": {"book": book.to_dict()}}


@router.put("/books/{book_id}", response_model=MessageResponse, responses=FAIL_RESPONSES)
def update_book(book_id: str, payload: Optional[BookPayloadModel] = Body(None),
                store: BookStore = Depends(get_store)):
    """Replace a book's fields. Only the name and the page bound are checked."""
    data = payload.to_input() if payload else BookInput()
    try:
        store.update(book_id, data)
    except BookNotFoundError:
        raise HTTPException(status_code=404, detail="Failed to update book. Id not found")
    except BookValidationError as e:
        raise HTTPException(status_code=400, detail=f"Failed to update book. {e}")
    return {"status": "success", "message": "Book updated successfully"}


@router.delete("/books/{book_id}", response_model=MessageResponse, responses=FAIL_RESPONSES)
def delete_book(book_id: str, store: BookStore = Depends(get_store)):
    try:
        store.delete_by_id(book_id)
    except BookNotFoundError:
        raise HTTPException(status_code=404, detail="Failed to delete book. Id not found")
    return {"status": "success", "message": "Book deleted successfully"}


@router.delete("/books", response_model=MessageResponse)
def delete_all_books(store: BookStore = Depends(get_store)):
    store.delete_all()
    return {"status": "success", "message": "All books deleted successfully"}


app = create_app()
