"""Authentication client. Tokens are carried opaquely, never decoded."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
from dateutil.parser import isoparse

from budgetwise.utils.logger import get_logger
from budgetwise.utils.exceptions import AuthError

logger = get_logger()


@dataclass
class AuthSession:
    """Bearer token plus the identity and expiry reported by the server."""
    token: str
    subject: str
    expires_at: datetime
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    @classmethod
    def from_response(cls, data: dict, now: Optional[datetime] = None) -> "AuthSession":
        """Build a session from a login/register response body."""
        if not isinstance(data, dict) or not isinstance(data.get("token"), str) or not data["token"]:
            raise AuthError("Authentication response carries no token")

        user = data.get("user") or {}
        if not isinstance(user, dict):
            raise AuthError(f"Authentication response has an invalid user: {user!r}")
        subject = user.get("id")
        if subject is None:
            raise AuthError("Authentication response carries no user id")

        now = now or datetime.now(timezone.utc)
        if data.get("expires"):
            if not isinstance(data["expires"], str):
                raise AuthError(f"Invalid expiry timestamp: {data['expires']!r}")
            try:
                expires_at = isoparse(data["expires"])
            except (ValueError, OverflowError) as e:
                raise AuthError(f"Invalid expiry timestamp: {data['expires']!r}") from e
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
        elif isinstance(data.get("expiresIn"), (int, float)) and not isinstance(data["expiresIn"], bool):
            try:
                expires_at = now + timedelta(seconds=data["expiresIn"])
            except (ValueError, OverflowError) as e:
                raise AuthError(f"Invalid expiry interval: {data['expiresIn']!r}") from e
        else:
            raise AuthError("Authentication response carries no expiry")

        return cls(
            token=data["token"],
            subject=str(subject),
            expires_at=expires_at,
            email=user.get("email"),
            first_name=user.get("firstName"),
            last_name=user.get("lastName")
        )


class AuthProvider(ABC):
    """Issues sessions for user credentials."""

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    async def register(self, first_name: str, last_name: str, email: str, password: str) -> AuthSession:
        ...


class HttpAuthProvider(AuthProvider):
    """Talks to the backend `/auth` endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http_transport = http_transport

    async def login(self, email: str, password: str) -> AuthSession:
        response = await self._post("login", {"email": email, "password": password})
        if response.status_code == 401:
            raise AuthError("Invalid email or password")
        return self._session(response, "Login")

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> AuthSession:
        response = await self._post("register", {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })
        if response.status_code == 409:
            raise AuthError("User with this email already exists")
        return self._session(response, "Registration")

    async def _post(self, action: str, payload: dict) -> httpx.Response:
        url = f"{self.base_url}/auth/{action}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.http_transport) as client:
                return await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise AuthError(f"Auth request to {url} failed: {e}") from e

    @staticmethod
    def _session(response: httpx.Response, action: str) -> AuthSession:
        if not response.is_success:
            raise AuthError(f"{action} failed with HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(f"{action} response is not valid JSON: {e}") from e

        session = AuthSession.from_response(data)
        logger.info(f"{action} succeeded for user {session.subject}")
        return session
