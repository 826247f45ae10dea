import logging
from typing import Any

from shortlinks.dao import store_from_config
from shortlinks.engine import LinkEngine
from shortlinks.exceptions import ConfigurationError, LinkNotFoundError
from shortlinks.utils import load_config, get_short_url, app_prefix, click_context, guarantee_500_response
from shortlinks.utils.responses import response_302, response_400, response_404, response_500
from shortlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Derive the click context from request headers
    - Step 3: Resolve the shortcode, recording the click
    - Step 4: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Not found
            message: short URL doesn't exist or has expired
        500: Internal server error
        503: Link store unavailable

    Args:
        event (dict):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config('redirect_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for redirect URL function. Responding with 500.')
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Derive click context from request headers
    click = click_context(event)

    # 3- Resolve shortcode and record the click
    with store_from_config(app_config) as store:
        engine = LinkEngine.from_config(store, app_config, prefix=app_prefix())
        try:
            target_url = engine.resolve(shortcode, click)
        except LinkNotFoundError:
            logger.info(
                'Short URL not found or expired. Responding with 404.',
                extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
            )
            return response_404(
                message=f"short url {get_short_url(shortcode, event)} doesn't exist or has expired",
                error_code=SHORT_URL_NOT_FOUND,
            )

    # 4- Redirect client to target URL
    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS, 'source': click.source, 'device': click.device},
    )
    return response_302(location=target_url)
