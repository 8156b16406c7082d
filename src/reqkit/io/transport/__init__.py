"""Transport layer: the single-exchange primitive the executor drives."""

from .base import ProxyDescriptor, ProxyProtocol, RawResponse, Transport, TransportRequest
from .httpx_transport import HttpxTransport

__all__ = [
    "HttpxTransport",
    "ProxyDescriptor",
    "ProxyProtocol",
    "RawResponse",
    "Transport",
    "TransportRequest",
]
