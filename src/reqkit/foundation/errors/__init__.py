"""Unified error handling for reqkit.

- ErrorCode/ErrorKind: Failure codes and transport error kinds
- RequestException and subclasses: Constructed failure causes
- Result/Ok/Err: Monadic success/failure container
- classify/ClassifiedError: Transport error classification
"""

from .classify import ClassifiedError, classify
from .errors import (
    RETRYABLE_CODES,
    ConnectivityError,
    ErrorCode,
    ErrorKind,
    HttpStatusError,
    NetworkError,
    RequestException,
    RequestTimeoutError,
    SerializationError,
    UrlBuildError,
)
from .result import Err, Ok, Result, sequence, try_fn

__all__ = [
    # Codes
    "ErrorCode", "ErrorKind", "RETRYABLE_CODES",
    # Exceptions
    "RequestException", "NetworkError", "RequestTimeoutError", "HttpStatusError",
    "SerializationError", "UrlBuildError", "ConnectivityError",
    # Result monad
    "Result", "Ok", "Err", "try_fn", "sequence",
    # Classification
    "ClassifiedError", "classify",
]
