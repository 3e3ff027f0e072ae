"""Authentication and preference endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from capture_narrator.api.dependencies import bearer_token, get_container, require_session
from capture_narrator.api.models import (
    AuthResponse,
    LoginRequest,
    PreferencesPayload,
    PreferencesUpdate,
    SignUpRequest,
)
from capture_narrator.containers import AppContainer
from capture_narrator.domain.models import CurrentSession
from capture_narrator.services.users import AuthenticationError, AuthResult

router = APIRouter(tags=["account"])


@router.post("/auth/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest, container: AppContainer = Depends(get_container)
) -> AuthResponse:
    """Create an account and its profile."""
    try:
        result = container.user_service.sign_up(
            payload.email,
            payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return _auth_response(result)


@router.post("/auth/login")
async def login(
    payload: LoginRequest, container: AppContainer = Depends(get_container)
) -> AuthResponse:
    """Sign in with email and password."""
    try:
        result = container.user_service.sign_in(payload.email, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
    return _auth_response(result)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> None:
    """Revoke the current token."""
    container.user_service.sign_out(token)


@router.get("/preferences")
async def get_preferences(
    session: CurrentSession = Depends(require_session),
) -> PreferencesPayload:
    """Return the signed-in user's preferences."""
    return PreferencesPayload.from_preferences(session.preferences)


@router.patch("/preferences")
async def update_preferences(
    payload: PreferencesUpdate,
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> PreferencesPayload:
    """Update theme and/or voice."""
    updated = container.preferences_service.update(
        session, theme=payload.theme, voice=payload.voice
    )
    return PreferencesPayload.from_preferences(updated)


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user_id=result.user.id,
        email=result.user.email,
        photo_url=result.user.photo_url,
        access_token=result.access_token,
    )
