"""Model invocation through an ordered chain of fallback transports."""
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from budgetwise.utils.logger import get_logger
from budgetwise.utils.exceptions import (
    ChainExhaustedError,
    LLMError,
    RoutingError,
    TransportError,
)

logger = get_logger()

T = TypeVar("T")

NOT_FOUND = 404


@dataclass(frozen=True)
class Transport:
    """One endpoint + model pairing."""
    name: str
    url: str
    model: str


class ModelInvoker:
    """Sends a prompt through primary, relay and fallback transports in turn.

    Order: primary model, then fallback model, both on the primary
    endpoint. A routing failure (404 or unreachable host) inserts the relay
    ahead of the remaining transports, once per invocation. Attempts are
    sequential and every transport is tried at most once.
    """

    def __init__(
        self,
        endpoint_url: str,
        primary_model: str,
        fallback_model: str,
        relay_url: Optional[str] = None,
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        auth_token: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.endpoint_url = endpoint_url
        self.primary_model = primary_model
        self.fallback_model = fallback_model
        self.relay_url = relay_url
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.http_transport = http_transport
        self.headers = {"Content-Type": "application/json"}
        if auth_token:
            self.headers["Authorization"] = f"Bearer {auth_token}"

    @classmethod
    def from_settings(
        cls,
        settings,
        auth_token: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ModelInvoker":
        return cls(
            endpoint_url=settings.llm_endpoint_url,
            primary_model=settings.llm_primary_model,
            fallback_model=settings.llm_fallback_model,
            relay_url=settings.llm_relay_url,
            timeout=settings.llm_timeout_seconds,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            auth_token=auth_token,
            http_transport=http_transport
        )

    def transports(self) -> List[Transport]:
        """Initial transport list, before any relay insertion."""
        return [
            Transport("primary", self.endpoint_url, self.primary_model),
            Transport("fallback", self.endpoint_url, self.fallback_model),
        ]

    def build_request(self, model: str, prompt: str) -> Dict[str, Any]:
        return {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.temperature, "max_tokens": self.max_tokens},
        }

    async def invoke(self, prompt: str, validate: Callable[[Any], T]) -> T:
        """
        Run the prompt through the transport chain.

        Args:
            prompt: Prompt text
            validate: Turns a decoded response body into a result; raises
                LLMError subclasses to reject the answer

        Returns:
            The first result accepted by validate

        Raises:
            ChainExhaustedError: if every transport failed
        """
        pending = deque(self.transports())
        relay_inserted = False
        errors: List[LLMError] = []

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.http_transport) as client:
            while pending:
                transport = pending.popleft()
                try:
                    body = await self._send(client, transport, prompt)
                    result = validate(body)
                    logger.info(f"Model analysis accepted from {transport.name} transport ({transport.model})")
                    return result
                except RoutingError as e:
                    errors.append(e)
                    logger.warning(f"{transport.name} transport unreachable: {e}")
                    if self.relay_url and not relay_inserted:
                        relay_inserted = True
                        pending.appendleft(Transport("relay", self.relay_url, transport.model))
                        logger.info(f"Trying relay at {self.relay_url}")
                except LLMError as e:
                    errors.append(e)
                    logger.warning(f"{transport.name} transport failed: {e}")

        raise ChainExhaustedError(
            f"All model transports failed ({len(errors)} attempts): "
            + "; ".join(str(e) for e in errors),
            errors
        )

    async def _send(self, client: httpx.AsyncClient, transport: Transport, prompt: str):
        """POST the request to one transport and decode the JSON body."""
        payload = self.build_request(transport.model, prompt)
        try:
            response = await client.post(transport.url, json=payload, headers=self.headers)
        except httpx.ConnectError as e:
            raise RoutingError(f"Cannot reach {transport.url}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {transport.url} failed: {e}") from e

        if response.status_code == NOT_FOUND:
            raise RoutingError(f"{transport.url} returned HTTP {NOT_FOUND}")
        if not response.is_success:
            raise TransportError(f"{transport.url} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{transport.url} returned a non-JSON body: {e}") from e
