"""Endpoints para iniciar sesión en la consola."""

from fastapi import APIRouter, Depends, HTTPException, status

from govconsole.domain.entities import Identity
from govconsole.infrastructure.auth_service import AuthenticationError, AuthService
from govconsole.interfaces.api.dependencies import get_api_key, get_current_identity
from govconsole.interfaces.api.schemas import CustomTokenRequest, IdentityRead, SessionToken

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_token(auth: AuthService) -> SessionToken:
    identity = auth.current_identity
    assert identity is not None and auth.session_token is not None
    return SessionToken(
        access_token=auth.session_token,
        user_id=identity.user_id,
        is_anonymous=identity.is_anonymous,
    )


@router.post("/anonymous", response_model=SessionToken)
async def sign_in_anonymously(api_key: str | None = Depends(get_api_key)) -> SessionToken:
    """Crea una identidad anónima y devuelve su token de sesión."""

    auth = AuthService(api_key=api_key)
    try:
        await auth.sign_in_anonymously()
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)
        ) from exc
    return _to_token(auth)


@router.post("/custom-token", response_model=SessionToken)
async def sign_in_with_custom_token(
    payload: CustomTokenRequest,
    api_key: str | None = Depends(get_api_key),
) -> SessionToken:
    """Canjea un token personalizado emitido previamente por un token de sesión."""

    auth = AuthService(api_key=api_key)
    try:
        await auth.sign_in_with_custom_token(payload.token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return _to_token(auth)


@router.get("/me", response_model=IdentityRead)
def read_current_identity(identity: Identity = Depends(get_current_identity)) -> IdentityRead:
    """Devuelve la identidad asociada al token de sesión."""

    return IdentityRead(user_id=identity.user_id, is_anonymous=identity.is_anonymous)
