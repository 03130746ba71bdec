"""
Book record schema for the Library API.

``code`` is unique across all books; uniqueness is enforced by the
MongoDB index created in ``api.database``. ``title`` and ``author`` are
trimmed before they are written.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOOK_EXAMPLE = {
    "code": "d5fE_asz",
    "title": "The New Turing Omnibus",
    "author": "Alexander K. Dewdney",
}


def _require_text(value: Optional[str], field_name: str, trim: bool) -> str:
    if value is None:
        raise ValueError(f"{field_name} is required")
    if trim:
        value = value.strip()
    if not value:
        raise ValueError(f"{field_name} is required")
    return value


class BookCreate(BaseModel):
    """Fields accepted when a book is created. Unknown keys are dropped."""
    code: str = Field(..., description="The unique code of the book")
    title: str = Field(..., description="The book title")
    author: str = Field(..., description="The book author")

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        json_schema_extra={"example": BOOK_EXAMPLE},
    )

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        return _require_text(v, "code", trim=False)

    @field_validator("title", "author")
    @classmethod
    def validate_trimmed(cls, v, info):
        return _require_text(v, info.field_name, trim=True)


class BookUpdate(BaseModel):
    """
    Partial update of a book.

    Only the keys present in the request body are written. Keys that are
    present must carry a non-empty value; unknown keys are dropped.
    """
    code: Optional[str] = Field(None, description="New unique code")
    title: Optional[str] = Field(None, description="New title")
    author: Optional[str] = Field(None, description="New author")

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        json_schema_extra={"example": {"author": "A. K. Dewdney"}},
    )

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        return _require_text(v, "code", trim=False)

    @field_validator("title", "author")
    @classmethod
    def validate_trimmed(cls, v, info):
        return _require_text(v, info.field_name, trim=True)

    def to_update_document(self) -> dict:
        """Return only the fields supplied by the caller."""
        return self.model_dump(exclude_unset=True)


class BookResponse(BaseModel):
    """Book record as stored in MongoDB."""
    id: str = Field(..., alias="_id", description="Generated book identifier")
    code: str = Field(..., description="The unique code of the book")
    title: str = Field(..., description="The book title")
    author: str = Field(..., description="The book author")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"_id": "652f1c0e9b1e8a3d4c2f0a11", **BOOK_EXAMPLE}},
    )

    @classmethod
    def from_document(cls, document: Optional[dict]) -> Optional["BookResponse"]:
        """Build a response from a raw MongoDB document, passing ``None`` through."""
        if document is None:
            return None
        book_doc = dict(document)
        book_doc["_id"] = str(book_doc["_id"])
        return cls(**book_doc)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="API health status")
    timestamp: datetime = Field(..., description="Health check timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
