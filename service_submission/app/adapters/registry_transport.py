"""
HTTP transport for the document registry.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import httpx

from shared.logging import get_logger
from shared.errors import TransportError


@dataclass(frozen=True)
class SubmissionRequest:
    """A fully built registry request, owned by a single submission."""
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    method: str = "POST"


@dataclass(frozen=True)
class TransportResponse:
    """Status and body returned by the registry."""
    status_code: int
    text: str


class Transport(Protocol):
    async def send(self, request: SubmissionRequest) -> TransportResponse:
        ...


class HttpxTransport:
    """Send submission requests with httpx."""

    def __init__(self,
                 connect_timeout: float = 30.0,
                 read_timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._transport = transport
        self.logger = get_logger("submission.registry_transport")

    async def send(self, request: SubmissionRequest) -> TransportResponse:
        """Deliver a request; network failures surface as TransportError."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body
                )
        except httpx.HTTPError as e:
            self.logger.error("Registry transport error", url=request.url, error=str(e))
            raise TransportError(
                f"Registry unreachable: {e}",
                details={"url": request.url, "cause": type(e).__name__}
            ) from e

        return TransportResponse(status_code=response.status_code, text=response.text)
