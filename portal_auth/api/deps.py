import threading

import structlog
from fastapi import HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer

from portal_auth.core.auth.credentials import CredentialProvider
from portal_auth.core.auth.idp import IdPProvider
from portal_auth.core.errors import IntrospectionError

logger = structlog.get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=True)

_idp_provider = None
_idp_provider_lock = threading.Lock()

def get_idp_provider() -> IdPProvider:
    global _idp_provider
    provider = _idp_provider
    if provider is not None:
        return provider

    # Resolved in the threadpool, so first requests can race to build it
    with _idp_provider_lock:
        if _idp_provider is None:
            _idp_provider = CredentialProvider()
        return _idp_provider

def close_idp_provider() -> None:
    """
    Close the shared provider if one was created. Never creates one.
    """
    global _idp_provider
    with _idp_provider_lock:
        provider, _idp_provider = _idp_provider, None
    if provider is not None:
        provider.close()

def verify_token(
    token: str = Depends(oauth2_scheme),
    idp: IdPProvider = Depends(get_idp_provider)
) -> str:
    # Sync dependency: FastAPI runs it in the threadpool since introspection blocks
    try:
        valid = idp.validate_token(token)
    except IntrospectionError as e:
        logger.error("auth.token_validation_unavailable", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to validate token with the Identity Provider",
        )

    if not valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token
