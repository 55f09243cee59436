"""
Adapters package for the submission client.

Contains the HTTP transport used to reach the document registry. Adapters
stay thin: they deliver a built request and map network failures to shared
errors. Status interpretation belongs to the pipeline.
"""

from .registry_transport import HttpxTransport, SubmissionRequest, Transport, TransportResponse

__all__ = [
    "HttpxTransport",
    "SubmissionRequest",
    "Transport",
    "TransportResponse",
]
