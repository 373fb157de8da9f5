"""Document schemas for API requests and responses."""

from typing import List, Optional

from pydantic import BaseModel, Field

from signflow.models.document import Document


class DocumentRegisterSchema(BaseModel):
    """Schema for registering a document for already-stored content."""

    content_id: str = Field(min_length=1, description="Content store identifier.")
    required_signers: List[str] = Field(description="Accounts that must sign, in order.")


class DocumentResponseSchema(Document):
    """Schema for document response, inheriting from the Document model."""

    pass


class DocumentListResponseSchema(BaseModel):
    """Schema for a list of documents."""

    documents: List[DocumentResponseSchema]
    total: int


class ErrorResponseSchema(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str
    extra: Optional[dict] = None
