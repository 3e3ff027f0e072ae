"""Request dependencies for authenticated routes."""

from fastapi import Depends, Header, HTTPException, Request, status

from capture_narrator.containers import AppContainer
from capture_narrator.domain.models import CurrentSession

_BEARER_PREFIX = "bearer "


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    """Extract the bearer token from the Authorization header."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    token = authorization[len(_BEARER_PREFIX) :].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return token


async def require_session(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> CurrentSession:
    """Resolve the signed-in session or reject the request."""
    session = container.user_service.resolve_session(token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return session
