"""Dependency injection for FastAPI.

Provides singleton instances of infrastructure components and per-request services.
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.sync_service import SyncOrchestrator
from src.domain.exceptions import StorageError
from src.domain.models import AuthSession
from src.infrastructure.auth.session import SessionAuthenticator
from src.infrastructure.busuanzi.client import BusuanziClient
from src.infrastructure.busuanzi.counter_sync import BusuanziCounterSync
from src.infrastructure.storage.json_store import JsonFileStore
from src.shared.config import Settings

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must reach the route as an anonymous caller
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_settings() -> Settings:
    """Get application settings (singleton).

    Returns:
        Application settings
    """
    return Settings()


@lru_cache
def get_store() -> JsonFileStore:
    """Get the JSON document store (singleton).

    Cached so every request shares one write lock.

    Returns:
        JSON file store
    """
    return JsonFileStore(get_settings().data_file)


@lru_cache
def get_busuanzi_client() -> BusuanziClient:
    """Get Busuanzi client (singleton).

    Cached for connection pooling and client reuse.

    Returns:
        Busuanzi client
    """
    settings = get_settings()
    return BusuanziClient(
        base_url=settings.busuanzi_base_url,
        timeout=settings.busuanzi_timeout,
        max_retries=settings.busuanzi_max_retries,
        initial_delay=settings.busuanzi_retry_initial_delay,
        user_agent=settings.busuanzi_user_agent,
    )


async def close_busuanzi_client() -> None:
    """Close the Busuanzi client if one was created, then drop the cached instance."""
    if get_busuanzi_client.cache_info().currsize:
        await get_busuanzi_client().aclose()
    get_busuanzi_client.cache_clear()


def get_authenticator() -> SessionAuthenticator:
    return SessionAuthenticator(session_store=get_store())


async def get_auth_session(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
) -> AuthSession | None:
    """Resolve the session of the current request.

    The bearer token wins over the session cookie when both are present.

    Returns:
        The session, or None for anonymous requests
    """
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(get_settings().session_cookie_name)

    try:
        return await authenticator.current(token)
    except StorageError as e:
        logger.error(f"Session lookup failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


def get_sync_orchestrator() -> SyncOrchestrator:
    """Get sync orchestrator (per-request).

    NOT cached: the orchestrator is stateless and cheap, and building it per
    request keeps dependency overrides simple in tests.

    Returns:
        Sync orchestrator instance
    """
    store = get_store()
    return SyncOrchestrator(
        domain_store=store,
        counter_store=store,
        counter_sync=BusuanziCounterSync(client=get_busuanzi_client(), counter_store=store),
    )
