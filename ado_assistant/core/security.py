"""
Authentication and request-identity utilities.
"""

import secrets
from typing import Optional

from ado_assistant.core.exceptions import AuthenticationError

BEARER_PREFIX = "Bearer "


def generate_request_id() -> str:
    """
    Generate a unique request ID for tracing.

    Returns:
        A random 8-byte hex string prefixed with 'req_'
    """
    return f"req_{secrets.token_hex(8)}"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the caller's token out of an Authorization header.

    Only presence and the ``Bearer`` prefix are checked; the token itself is
    relayed to Azure DevOps, which is the party that validates it.

    Args:
        authorization: Raw Authorization header value

    Returns:
        The token without its prefix

    Raises:
        AuthenticationError: If the header is missing or not a bearer token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError()
    return token
