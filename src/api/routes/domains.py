"""Domain API routes.

Endpoints for managing the counters of registered domains.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from src.api.dependencies import get_auth_session, get_sync_orchestrator
from src.api.models import ErrorResponse, SyncRequest, SyncResponse
from src.application.sync_service import SyncOrchestrator
from src.domain.exceptions import (
    DomainNotFoundError,
    InternalSyncError,
    InvalidRequestError,
    SyncRequestError,
    UnauthorizedError,
)
from src.domain.models import AuthSession
from src.shared.result import Err, Ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/domains", tags=["Domains"])

_STATUS_BY_ERROR: dict[type[SyncRequestError], int] = {
    UnauthorizedError: 401,
    InvalidRequestError: 400,
    DomainNotFoundError: 404,
    InternalSyncError: 500,
}


def _status_for(error: SyncRequestError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status_code
    return 500


async def _read_domain_name(request: Request) -> str | None:
    # The body is parsed by hand so an anonymous caller always gets a 401,
    # whatever the body contains.
    body = await request.body()
    try:
        return SyncRequest.model_validate_json(body).domain_name
    except ValidationError:
        return None


@router.post(
    "/sync-busuanzi",
    response_model=SyncResponse,
    status_code=200,
    summary="Force a re-sync of domain counters from Busuanzi",
    description="""
    Pull the site-wide unique-visitor (`siteUv`) and page-view (`sitePv`) counters of a
    domain from Busuanzi and overwrite the stored values.

    Useful when the initial sync failed because Busuanzi was unavailable. The request is
    idempotent: repeating it simply re-attempts the refresh.

    ## Requirements

    - An authenticated session (bearer token or session cookie)
    - The domain must belong to the caller
    - The domain must be verified

    ## Outcomes

    - **200, `synced: true`**: every counter was refreshed; `counters` holds the stored state
    - **200, `synced: false`**: Busuanzi answered incompletely; `details` shows which counters
      were obtained and `message` explains why. Retry later.
    - **400**: missing `domainName` or unverified domain
    - **401**: no valid session
    - **404**: domain missing or owned by someone else
    - **500**: unexpected error
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request or unverified domain"},
        401: {"model": ErrorResponse, "description": "No valid session"},
        404: {"model": ErrorResponse, "description": "Domain not found or not owned by caller"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SyncRequest.model_json_schema()}},
        }
    },
)
async def sync_busuanzi(
    request: Request,
    session: AuthSession | None = Depends(get_auth_session),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
) -> SyncResponse:
    """Force a Busuanzi sync for a domain owned by the caller.

    Args:
        request: Incoming request carrying `{"domainName": ...}`
        session: Session of the caller (None if anonymous)
        orchestrator: Injected SyncOrchestrator

    Returns:
        SyncResponse for full and partial syncs

    Raises:
        HTTPException: 400, 401, 404 for rejected requests, 500 for unexpected errors
    """
    caller_id = session.user.id if session is not None else None

    try:
        domain_name = await _read_domain_name(request)
        result = await orchestrator.request_sync(caller_id, domain_name)

        match result:
            case Ok(outcome):
                return SyncResponse.from_domain(outcome)

            case Err(error):
                status_code = _status_for(error)
                if status_code >= 500:
                    logger.error(f"Sync failed for domain {domain_name!r}: {error}")
                else:
                    logger.info(f"Sync rejected ({status_code}) for domain {domain_name!r}: {error}")
                raise HTTPException(status_code=status_code, detail=error.message)

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Error in POST /api/domains/sync-busuanzi: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
