"""
Integration tests for the end-to-end submission flow over httpx.
"""

import asyncio
import base64
import json
import time

import httpx
import pytest

from service_submission.app.adapters.registry_transport import HttpxTransport
from service_submission.app.domain.encoding import canonical_json
from service_submission.app.pipeline import SubmissionPipeline
from shared.config import SubmissionConfig
from shared.errors import ApiError, TransportError
from shared.test_helpers import DocumentFactory


class FakeRegistry:
    """In-process registry endpoint recording arrival times."""

    def __init__(self):
        self.arrivals = []
        self.requests = []
        self.fail_next_with = None
        self.reject_next_with = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.arrivals.append(time.monotonic())
        self.requests.append(request)

        if self.fail_next_with is not None:
            error, self.fail_next_with = self.fail_next_with, None
            raise error("connection reset", request=request)

        if self.reject_next_with is not None:
            status, body = self.reject_next_with
            self.reject_next_with = None
            return httpx.Response(status, text=body)

        return httpx.Response(200, json={"value": "accepted"})


class TestSubmissionFlow:
    """End-to-end tests through HttpxTransport."""

    @pytest.fixture
    def registry(self):
        """Create a fake registry."""
        return FakeRegistry()

    @pytest.fixture
    def config(self):
        """Create client settings with a short window."""
        return SubmissionConfig(
            base_url="https://registry.test/api/v3/lk/documents/create",
            auth_token="integration-token",
            request_limit=2,
            window_seconds=0.3
        )

    @pytest.fixture
    def pipeline(self, config, registry):
        """Create a pipeline talking to the fake registry."""
        transport = HttpxTransport(transport=httpx.MockTransport(registry.handler))
        return SubmissionPipeline.from_config(config, transport=transport)

    @pytest.mark.asyncio
    async def test_registry_receives_expected_request(self, pipeline, registry):
        """Test the registry sees the documented wire shape."""
        document = DocumentFactory.create_document("milk")

        result = await pipeline.submit(document)

        assert result.success is True
        request = registry.requests[0]
        assert request.method == "POST"
        assert request.url.params["pg"] == "milk"
        assert request.headers["authorization"] == "Bearer integration-token"
        body = json.loads(request.content)
        assert set(body) == {"product_document", "document_format", "type", "signature"}
        assert base64.b64decode(body["product_document"]).decode("utf-8") == canonical_json(
            document.product_document
        )

    @pytest.mark.asyncio
    async def test_concurrent_callers_respect_window(self, pipeline, registry, config):
        """Test 5 concurrent submissions reach the registry 2, 2, then 1 per window."""
        window = config.window_seconds
        start = time.monotonic()

        results = await asyncio.gather(
            *(pipeline.submit(DocumentFactory.create_document()) for _ in range(5))
        )

        assert all(r.success for r in results)
        offsets = sorted(t - start for t in registry.arrivals)
        expected = [0.0, 0.0, window, window, 2 * window]
        for offset, target in zip(offsets, expected):
            assert offset == pytest.approx(target, abs=0.15)
        assert pipeline.concurrency_cap.in_flight == 0

    @pytest.mark.asyncio
    async def test_api_rejection(self, pipeline, registry):
        """Test a 500 surfaces as ApiError with the response body."""
        registry.reject_next_with = (500, "bad signature")

        with pytest.raises(ApiError) as exc_info:
            await pipeline.submit(DocumentFactory.create_document())

        assert exc_info.value.body == "bad signature"
        assert pipeline.concurrency_cap.in_flight == 0

    @pytest.mark.asyncio
    async def test_connectivity_failure_then_recovery(self, pipeline, registry):
        """Test a transport failure leaks nothing and later calls stay rate limited."""
        registry.fail_next_with = httpx.ConnectError

        with pytest.raises(TransportError):
            await pipeline.submit(DocumentFactory.create_document())

        assert pipeline.concurrency_cap.in_flight == 0
        assert pipeline.rate_gate.in_window() == 1

        await pipeline.submit(DocumentFactory.create_document())
        assert pipeline.rate_gate.in_window() == 2
        assert pipeline.rate_gate.try_acquire() > 0
