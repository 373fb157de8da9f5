"""The base class for identity providers."""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from signflow.core.exceptions import AuthenticationError


class OperationDescriptor(BaseModel):
    """A state-changing operation the caller asks to perform."""

    function: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class SignedTransactionHandle(BaseModel):
    """Proof that an account authorized one operation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    account: str
    operation: OperationDescriptor
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IdentityProvider(ABC):
    """Supplies the caller's account and authorizes operations on its behalf."""

    @abstractmethod
    def current_account(self) -> Optional[str]:
        """Return the connected account, or None when nobody is connected."""
        pass

    def authorize(self, operation: OperationDescriptor) -> SignedTransactionHandle:
        """Authorize an operation for the current account.

        Raises
        ------
        AuthenticationError
            If no account is connected.
        """
        account = self.current_account()
        if not account:
            raise AuthenticationError(
                f"An authenticated account is required for {operation.function}"
            )
        return SignedTransactionHandle(account=account, operation=operation)
