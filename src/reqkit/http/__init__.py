"""HTTP request execution: descriptors, responses, and the executor.

- RequestDescriptor/NormalizedResponse/RequestOutcome: Value types
- RequestExecutor/ExecutorConfig: Resolve, send, retry, validate, parse
- resolve_url: Base URL + path + query joining
- Auth strategies and status/content helpers
"""

from .auth import ApiKeyAuth, AuthStrategy, BasicAuth, BearerAuth, basic_auth, bearer_auth
from .executor import DEFAULT_PROBE_URL, ExecutorConfig, RequestExecutor, generate_request_id
from .functions import (
    extract_filename,
    is_client_error,
    is_json_content,
    is_redirect,
    is_server_error,
    is_success_status,
    parse_json,
    status_category,
)
from .models import ALL_METHODS, HttpMethod, NormalizedResponse, RequestDescriptor, RequestOutcome, header_value
from .normalize import normalize_raw, normalize_response
from .urls import is_absolute_url, resolve_url

__all__ = [
    # Models
    "HttpMethod", "ALL_METHODS", "RequestDescriptor", "NormalizedResponse", "RequestOutcome", "header_value",
    # Executor
    "RequestExecutor", "ExecutorConfig", "generate_request_id", "DEFAULT_PROBE_URL",
    # URLs / normalization
    "resolve_url", "is_absolute_url", "normalize_response", "normalize_raw",
    # Auth
    "AuthStrategy", "BearerAuth", "BasicAuth", "ApiKeyAuth", "bearer_auth", "basic_auth",
    # Functions
    "is_success_status", "is_redirect", "is_client_error", "is_server_error", "status_category",
    "is_json_content", "parse_json", "extract_filename",
]
