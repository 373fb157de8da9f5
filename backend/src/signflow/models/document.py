"""Document model."""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, computed_field


class DocumentStatus(str, Enum):
    """Position of a document in its signing lifecycle."""

    CREATED = "created"
    PARTIALLY_SIGNED = "partially_signed"
    COMPLETED = "completed"


class Signature(BaseModel):
    """A single signature event."""

    signer: str = Field(description="Account that signed.")
    timestamp: datetime = Field(description="When the signature was recorded (UTC).")


class Document(BaseModel):
    """Document model."""

    id: int = Field(description="Document ID, assigned at creation.")
    content_id: str = Field(description="Content store identifier of the document blob.")
    creator: str = Field(description="Account that created the document.")
    required_signers: List[str] = Field(description="Accounts that must sign, in order.")
    signatures: List[Signature] = Field(default_factory=list, description="Signatures in submission order.")
    created_at: datetime = Field(description="When the document was registered (UTC).")

    @computed_field
    @property
    def is_completed(self) -> bool:
        """True once every required signer has signed."""
        return {s.signer for s in self.signatures} == set(self.required_signers)

    @computed_field
    @property
    def status(self) -> DocumentStatus:
        if self.is_completed:
            return DocumentStatus.COMPLETED
        if self.signatures:
            return DocumentStatus.PARTIALLY_SIGNED
        return DocumentStatus.CREATED

    def has_signed(self, account: str) -> bool:
        return any(s.signer == account for s in self.signatures)
