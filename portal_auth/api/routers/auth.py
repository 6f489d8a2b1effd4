import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from portal_auth.api.deps import get_idp_provider, verify_token
from portal_auth.config import settings
from portal_auth.core.auth.idp import IdPProvider
from portal_auth.core.errors import CredentialAcquisitionError
from portal_auth.schemas.auth import ClientIdResponse, TokenValidity

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.get("/client-id", response_model=ClientIdResponse)
def get_client_id(idp: IdPProvider = Depends(get_idp_provider)):
    """
    Client id the portal UI needs to build its authorize redirect.
    """
    try:
        client_id = idp.get_client_id()
    except CredentialAcquisitionError as e:
        logger.warning(
            "auth.client_credentials_unavailable",
            error=str(e),
            detail="Fetching client credentials failed, will be re-attempted on the next request",
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity Provider is unavailable",
        )

    return ClientIdResponse(client_id=client_id, callback_url=settings.CALLBACK_URL)

@router.get("/validate", response_model=TokenValidity, dependencies=[Depends(verify_token)])
def validate():
    return TokenValidity(valid=True)
