"""
Registry submission client.

Submits goods introduction documents to the registry while keeping outbound
traffic within N requests per rolling window.
"""

from .pipeline import SubmissionPipeline, SubmissionResult
from .ratelimit import ConcurrencyCap, RateGate
from .adapters import HttpxTransport, SubmissionRequest, Transport, TransportResponse
from .domain import Description, Document, Product, ProductDocument, encode_signature

__all__ = [
    "SubmissionPipeline",
    "SubmissionResult",
    "ConcurrencyCap",
    "RateGate",
    "HttpxTransport",
    "SubmissionRequest",
    "Transport",
    "TransportResponse",
    "Description",
    "Document",
    "Product",
    "ProductDocument",
    "encode_signature",
]
