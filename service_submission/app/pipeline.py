"""
Rate-limited document submission pipeline.

A submission takes a concurrency slot, waits for the rate gate, encodes the
document, sends it through the transport and interprets the status. The slot
is released on every exit path, including cancellation.
"""

import asyncio
import time
from typing import Callable, List, Optional, Sequence, Union

import httpx
from pydantic import BaseModel

from shared.config import SubmissionConfig
from shared.errors import ApiError, ConfigurationError, ErrorResponse, SubmissionClientException, TransportError
from shared.logging import (
    configure_logging,
    get_logger,
    reset_submission_context,
    set_request_id,
    set_submission_context,
)
from shared.metrics import MetricsCollector, get_metrics_collector

from .adapters.registry_transport import HttpxTransport, SubmissionRequest, Transport, TransportResponse
from .domain.documents import Document
from .domain.encoding import build_request_body, encode_product_document
from .ratelimit.concurrency import ConcurrencyCap
from .ratelimit.sliding_window import RateGate


class SubmissionResult(BaseModel):
    """Outcome of one submission."""

    success: bool
    product_group: str
    status_code: Optional[int] = None
    body: Optional[str] = None
    admitted_at: Optional[float] = None
    duration_seconds: float = 0.0
    error: Optional[ErrorResponse] = None


class SubmissionPipeline:
    """Submit documents to the registry without exceeding the configured rate."""

    def __init__(self,
                 transport: Transport,
                 *,
                 base_url: str,
                 token_provider: Union[str, Callable[[], str]],
                 rate_gate: RateGate,
                 concurrency_cap: Optional[ConcurrencyCap] = None,
                 metrics: Optional[MetricsCollector] = None):
        if not base_url:
            raise ConfigurationError("Registry base URL is required")
        if isinstance(token_provider, str):
            if not token_provider:
                raise ConfigurationError("Registry auth token is required")
            token = token_provider
            token_provider = lambda: token  # noqa: E731

        self.transport = transport
        self.base_url = base_url
        self._token_provider = token_provider
        self.rate_gate = rate_gate
        self.concurrency_cap = concurrency_cap or ConcurrencyCap(rate_gate.limit)
        self.metrics = metrics or get_metrics_collector("submission")
        self.logger = get_logger("submission.pipeline")

    @classmethod
    def from_config(cls,
                    config: SubmissionConfig,
                    transport: Optional[Transport] = None,
                    metrics: Optional[MetricsCollector] = None) -> "SubmissionPipeline":
        """Build a pipeline, its gates and an httpx transport from settings."""
        configure_logging("submission", config.log_level)
        rate_gate = RateGate(config.request_limit, config.window_seconds)
        if transport is None:
            transport = HttpxTransport(
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout
            )
        return cls(
            transport,
            base_url=config.base_url,
            token_provider=config.auth_token,
            rate_gate=rate_gate,
            metrics=metrics
        )

    def build_request(self, document: Document, signature: Optional[str] = None) -> SubmissionRequest:
        """Build the registry request for a document."""
        url = httpx.URL(self.base_url).copy_merge_params({"pg": document.product_group})
        body = build_request_body(
            product_document=encode_product_document(document.product_document),
            document_format=document.document_format,
            doc_type=document.type,
            signature=signature if signature is not None else document.signature
        )
        return SubmissionRequest(
            url=str(url),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._token_provider()}",
            },
            body=body
        )

    async def submit(self, document: Document, signature: Optional[str] = None) -> SubmissionResult:
        """Submit one document.

        Raises:
            ApiError: the registry answered with a non-200 status.
            TransportError: the request could not be delivered.
            asyncio.CancelledError: the caller was cancelled while waiting or sending.
        """
        set_request_id()
        context_token = set_submission_context(document.product_group)
        started = time.monotonic()
        outcome = "error"

        try:
            async with self.concurrency_cap.slot():
                self.metrics.set_in_flight(self.concurrency_cap.in_flight)

                wait_started = time.monotonic()
                admitted_at = await self.rate_gate.acquire()
                self.metrics.record_rate_limit_wait(time.monotonic() - wait_started)

                request = self.build_request(document, signature)
                response = await self._send(request)

            if response.status_code != 200:
                self.logger.error(
                    "Registry rejected document",
                    status_code=response.status_code,
                    response=response.text
                )
                raise ApiError(response.status_code, response.text)

            outcome = "success"
            self.logger.info("Document submitted", status_code=response.status_code)
            return SubmissionResult(
                success=True,
                product_group=document.product_group,
                status_code=response.status_code,
                body=response.text,
                admitted_at=admitted_at,
                duration_seconds=time.monotonic() - started
            )

        except ApiError:
            outcome = "api_error"
            self.metrics.record_error(outcome)
            raise
        except TransportError:
            outcome = "transport_error"
            self.metrics.record_error(outcome)
            raise
        except asyncio.CancelledError:
            outcome = "cancelled"
            self.logger.warning("Submission cancelled")
            raise
        finally:
            self.metrics.set_in_flight(self.concurrency_cap.in_flight)
            self.metrics.record_submission(outcome, time.monotonic() - started)
            reset_submission_context(context_token)

    async def _send(self, request: SubmissionRequest) -> TransportResponse:
        try:
            return await self.transport.send(request)
        except TransportError:
            raise
        except (httpx.HTTPError, OSError, asyncio.TimeoutError) as e:
            self.logger.error("Registry transport error", url=request.url, error=str(e))
            raise TransportError(
                f"Registry unreachable: {e}",
                details={"url": request.url, "cause": type(e).__name__}
            ) from e

    async def submit_many(self, documents: Sequence[Document]) -> List[SubmissionResult]:
        """Submit documents concurrently, reporting API and transport failures as results.

        Any other failure cancels the rest of the batch; ``submit_many`` only
        raises once no submission of the batch is still running.
        """
        tasks = [asyncio.ensure_future(self._submit_collecting(d)) for d in documents]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _submit_collecting(self, document: Document) -> SubmissionResult:
        try:
            return await self.submit(document)
        except SubmissionClientException as e:
            return SubmissionResult(
                success=False,
                product_group=document.product_group,
                status_code=getattr(e, "status_code", None),
                body=getattr(e, "body", None),
                error=e.to_response()
            )
