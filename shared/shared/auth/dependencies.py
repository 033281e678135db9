import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shared.auth.config import AuthSettings
from shared.models.user import Authorizer

http_bearer = HTTPBearer(auto_error=False)


def get_auth_settings() -> AuthSettings:
    return AuthSettings()


def decode_authorizer(token: str, settings: AuthSettings) -> Authorizer:
    """Decode a bearer token into an Authorizer.

    Raises jwt.PyJWTError for bad signatures/claims and ValueError when the
    token carries no account id.
    """
    payload = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    account_id = payload.get("sub")
    if not account_id:
        raise ValueError("Missing sub in token")
    return Authorizer(
        account_id=str(account_id),
        user_id=str(payload.get("uid") or account_id),
        access_token=token,
    )


async def get_authorizer_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: AuthSettings = Depends(get_auth_settings),
) -> Authorizer | None:
    if not credentials or not credentials.credentials:
        return None
    try:
        return decode_authorizer(credentials.credentials, settings)
    except (jwt.PyJWTError, ValueError):
        return None


async def get_authorizer(
    authorizer: Authorizer | None = Depends(get_authorizer_optional),
) -> Authorizer:
    if authorizer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authorizer
