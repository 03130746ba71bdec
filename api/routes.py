"""
Book endpoints.

Each handler makes one repository call and turns any failure into a fixed
plain-text response. Request bodies are validated against the models in
``api.models`` inside the handler so that invalid input follows the same
error path as a storage failure.
"""

from typing import List

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.database import BookRepository
from api.dependencies import get_book_repository
from api.models import BookCreate, BookResponse, BookUpdate

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Books"])


def _json_body(model) -> dict:
    """OpenAPI request body for handlers that parse the body themselves."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@router.get(
    "/books",
    response_model=List[BookResponse],
    summary="Returns the list of all the books",
    responses={404: {"description": "Books not found"}},
)
async def get_books(repository: BookRepository = Depends(get_book_repository)):
    try:
        books = await repository.list_books()
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=[book.to_json() for book in books]
        )
    except Exception as e:
        logger.error("Failed to list books", error=str(e))
        return PlainTextResponse("Books not found", status_code=status.HTTP_404_NOT_FOUND)


@router.get(
    "/book/{title:path}",
    response_model=BookResponse,
    summary="Get the book by title",
    responses={404: {"description": "Book not found"}},
)
async def get_book(title: str, repository: BookRepository = Depends(get_book_repository)):
    """
    Get the first book whose title matches exactly.

    Responds with `null` when no book has that title.
    """
    try:
        book = await repository.get_book_by_title(title)
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=book.to_json() if book else None
        )
    except Exception as e:
        logger.error("Failed to get book", title=title, error=str(e))
        return PlainTextResponse("Book not found", status_code=status.HTTP_404_NOT_FOUND)


@router.post(
    "/book",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    openapi_extra=_json_body(BookCreate),
    responses={
        400: {"description": "Bad Request - Invalid or missing data"},
        401: {"description": "Unauthorized - Authentication required"},
        403: {"description": "Forbidden - Insufficient permissions"},
        500: {"description": "Book not created"},
    },
)
async def create_book(request: Request, repository: BookRepository = Depends(get_book_repository)):
    try:
        book = BookCreate.model_validate(await request.json())
        created = await repository.create_book(book)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=created.to_json())
    except Exception as e:
        logger.error("Book not created", error=str(e))
        return PlainTextResponse("Book not created", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.patch(
    "/book/{title:path}",
    response_model=BookResponse,
    summary="Update the book by the title",
    openapi_extra=_json_body(BookUpdate),
    responses={
        404: {"description": "Book not found"},
        500: {"description": "Some error happened"},
    },
)
async def update_book(
    title: str,
    request: Request,
    repository: BookRepository = Depends(get_book_repository)
):
    """
    Overwrite the fields given in the body of the first book with this title.

    - **code**: new unique code
    - **title**: new title
    - **author**: new author
    """
    logger.info("Updating book", title=title)
    try:
        update = BookUpdate.model_validate(await request.json())
        book = await repository.update_book_by_title(title, update)
    except Exception as e:
        logger.error("Some error happened", title=title, error=str(e))
        return PlainTextResponse("Some error happened", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if book is None:
        logger.info("Book not found", title=title)
        return PlainTextResponse("Book not found", status_code=status.HTTP_404_NOT_FOUND)

    logger.info("Updated book", book=book.to_json())
    return JSONResponse(status_code=status.HTTP_200_OK, content=book.to_json())


@router.delete(
    "/book/{title:path}",
    response_model=BookResponse,
    summary="Remove the book by title",
    responses={
        200: {"description": "The book was deleted"},
        404: {"description": "The book was not found"},
    },
)
async def delete_book(title: str, repository: BookRepository = Depends(get_book_repository)):
    """Responds with the deleted book, or `null` when no book has that title."""
    try:
        book = await repository.delete_book_by_title(title)
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=book.to_json() if book else None
        )
    except Exception as e:
        logger.error("Failed to delete book", title=title, error=str(e))
        return PlainTextResponse("The book was not found", status_code=status.HTTP_404_NOT_FOUND)
