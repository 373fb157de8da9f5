"""Identity provider backed by the bearer token on the current request."""

from typing import Optional

from signflow.services.identity.base import IdentityProvider


class BearerTokenIdentityProvider(IdentityProvider):
    """Identity resolved by the auth middleware from a JWT."""

    def __init__(self, account: Optional[str]):
        self._account = account

    def current_account(self) -> Optional[str]:
        return self._account
