"""
Rate limiting package for the submission client.

Holds the sliding-window rate gate and the concurrency cap that together
bound outbound registry requests.
"""

from .sliding_window import RateGate
from .concurrency import ConcurrencyCap

__all__ = [
    "RateGate",
    "ConcurrencyCap",
]
