"""Authentication infrastructure."""

from src.infrastructure.auth.session import SessionAuthenticator

__all__ = ["SessionAuthenticator"]
