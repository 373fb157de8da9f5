import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from signflow.core.auth import decode_token
from signflow.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that resolves the caller's account from a bearer token."""

    async def dispatch(self, request: Request, call_next):
        """Attach the authenticated account to the request state.

        Requests without an Authorization header pass through anonymously;
        write endpoints reject them later. A malformed or expired token is
        rejected here.

        Args:
            request: The FastAPI request object.
            call_next: The next middleware or endpoint handler.

        Returns:
            Response: The response from the next middleware or endpoint.
        """
        request.state.account = None

        auth_header = request.headers.get("Authorization")
        if not auth_header or request.method == "OPTIONS":
            return await call_next(request)

        if not auth_header.startswith("Bearer "):
            return _unauthenticated("Unsupported authorization scheme")

        payload = decode_token(auth_header.replace("Bearer ", "", 1))
        if payload is None:
            return _unauthenticated("Invalid or expired token")

        request.state.account = payload["sub"]
        return await call_next(request)


def _unauthenticated(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=AuthenticationError.status_code,
        content={"detail": message, "code": AuthenticationError.code},
        headers={"WWW-Authenticate": "Bearer"},
    )
