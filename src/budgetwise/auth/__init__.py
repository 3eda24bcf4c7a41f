"""Authentication client module."""
from .provider import AuthSession, AuthProvider, HttpAuthProvider

__all__ = ["AuthSession", "AuthProvider", "HttpAuthProvider"]
