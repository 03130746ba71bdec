"""
FastAPI dependencies for the Library API.
"""

from fastapi import HTTPException, Request, status

from api.database import BookRepository


def get_book_repository(request: Request) -> BookRepository:
    """
    Get the book repository created during application startup.

    The lifespan handler stores the repository before the app serves any
    request and re-raises if MongoDB is unreachable, so the app never runs
    without one. The 500 below only fires when the app is mounted without
    its lifespan; it is raised before a book handler runs and therefore
    carries a JSON ``detail`` rather than the handler's fixed text.
    """
    repository = getattr(request.app.state, "book_repository", None)
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database service not available"
        )
    return repository
