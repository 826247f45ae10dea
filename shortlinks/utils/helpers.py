"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get string representation of short URL for a given shortcode
    get_header() -> str | None
        Read a request header case-insensitively
    caller_scope() -> str | None
        Extract the caller's scope (Cognito user id) from API Gateway event
    click_context() -> ClickContext
        Derive click context (referrer, country, device, user agent) from request headers
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler errors into 500 (or 503) responses

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlinks.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import functools
import logging
from typing import Any
from collections.abc import Callable
from urllib.parse import urlparse

from shortlinks.constants import DATA_STORE_UNAVAILABLE, UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.models import ClickContext
from shortlinks.utils.responses import response_500, response_503
from shortlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

# CloudFront device detection headers, checked in order
DEVICE_HEADERS = (
    ('cloudfront-is-mobile-viewer', 'Mobile'),
    ('cloudfront-is-tablet-viewer', 'Tablet'),
    ('cloudfront-is-desktop-viewer', 'Desktop'),
)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Return the public base URL for the current Lambda invocation.

    Works seamlessly with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(shortcode: str, event: dict[str, Any]) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation
    """
    return f'{base_url(event).rstrip("/")}/{shortcode}'


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Read a request header, ignoring header name case

    Example:
        >>> get_header({'headers': {'User-Agent': 'curl/8.5'}}, 'user-agent')
        'curl/8.5'
    """
    headers = event.get('headers') or {}
    name = name.lower()
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def caller_scope(event: dict[str, Any]) -> str | None:
    """Return the Cognito user id ('sub' claim) of the caller, or None if unauthenticated."""
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub')


def click_context(event: dict[str, Any]) -> ClickContext:
    """Derive the click context of a redirect request from its headers

    - source: host of the Referer header (without 'www.'), or 'direct'
    - country: CloudFront-Viewer-Country header, or 'unknown'
    - device: first CloudFront-Is-*-Viewer header set to 'true', or 'Unknown'
    - user_agent: User-Agent header, or ''

    Example:
        >>> click_context({'headers': {'Referer': 'https://www.google.com/search?q=x'}}).source
        'google.com'
    """
    source = 'direct'
    referer = get_header(event, 'referer')
    if referer:
        hostname = urlparse(referer).hostname
        if hostname:
            source = hostname.removeprefix('www.')

    device = 'Unknown'
    for header, device_class in DEVICE_HEADERS:
        if (get_header(event, header) or '').lower() == 'true':
            device = device_class
            break

    return ClickContext(
        source=source,
        country=get_header(event, 'cloudfront-viewer-country') or 'unknown',
        device=device,
        user_agent=get_header(event, 'user-agent') or '',
    )


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: never let a lambda handler crash without an HTTP response

    - DataStoreError -> 503 (the store is unreachable; the client may retry)
    - any other exception -> 500, or re-raised when running locally to ease debugging

    Example:
        >>> @guarantee_500_response
        ... def lambda_handler(event, context):
        ...     raise RuntimeError('boom')
        >>> lambda_handler({}, None)['statusCode']
        500
    """

    @functools.wraps(handler)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return handler(event, context)
        except DataStoreError as e:
            logger.exception(
                'Link store unavailable. Responding with 503.',
                extra={'event': DATA_STORE_UNAVAILABLE, 'operation': e.operation, 'key': e.key},
            )
            return response_503(message='link store unavailable', error_code=DATA_STORE_UNAVAILABLE)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled error in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return response_500(error_code=UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
