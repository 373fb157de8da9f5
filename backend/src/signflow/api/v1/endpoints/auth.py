"""Authentication endpoints for the API."""

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, Field, field_validator

from signflow.core.auth import Token, create_access_token, verify_password

router = APIRouter()


class LoginRequest(BaseModel):
    """Login request model."""

    account: str = Field(min_length=1, description="Account identifier to act as.")
    password: str

    @field_validator("account")
    @classmethod
    def account_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Account must not be blank")
        return value


@router.post("/login", response_model=Token)
async def login(request: LoginRequest) -> Token:
    """Authenticate with the shared password and return a JWT for the account.

    Args:
        request: The login request.

    Returns:
        Token: The JWT token.

    Raises:
        HTTPException: If the password is incorrect.
    """
    if not verify_password(request.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(request.account)
    return Token(access_token=access_token)


@router.post("/verify")
async def verify_token(request: Request) -> dict:
    """Report the account bound to the bearer token, if any.

    Returns:
        dict: The authentication status.
    """
    account = getattr(request.state, "account", None)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {
        "status": "authenticated",
        "account": account,
        "services_initialized": getattr(request.app.state, "services_initialized", False),
    }
