import json
import logging
from typing import Any

from shortlinks.dao import store_from_config
from shortlinks.engine import LinkEngine
from shortlinks.exceptions import (
    CodeSpaceExhaustedError,
    CodeTakenError,
    CodeValidationError,
    ConfigurationError,
    InvalidExpirationError,
    InvalidUrlError,
)
from shortlinks.utils import load_config, get_short_url, app_prefix, caller_scope, guarantee_500_response
from shortlinks.utils.responses import response_201, response_400, response_401, response_409, response_500, response_503
from shortlinks.lambdas.shorten_url.constants import (
    UNAUTHORIZED,
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    INVALID_URL,
    INVALID_CUSTOM_CODE,
    INVALID_EXPIRATION,
    SHORTCODE_TAKEN,
    CODE_SPACE_EXHAUSTED,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Extract target URL, custom code and expiration from request body
    - Step 3: Create the short link (validate, reserve or generate a code, store)
    - Step 4: Respond to user with 201 success

    HTTP responses:
        201: Successful URL shortening
            message: success message
            <link record fields>: id, original_url, short_code, custom, created_at, ...
            short_url: newly generated short url
        400: Bad client request
            errorCode: INVALID_JSON_BODY | MISSING_TARGET_URL | INVALID_URL
                       | INVALID_CUSTOM_CODE | INVALID_EXPIRATION
        401: Unauthorized
            message: indicate missing Cognito user id
        409: Conflict
            errorCode: SHORTCODE_TAKEN (custom code was used before)
        503: Service unavailable
            errorCode: CODE_SPACE_EXHAUSTED | DATA_STORE_UNAVAILABLE
        500: Internal server error

    Args:
        event (dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        dict[str, Any]:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {
        ...     'body': '{"target_url": "https://example.com", "custom_code": "promo"}',
        ...     'requestContext': {'authorizer': {'claims': {'sub': 'user-1'}}},
        ... }
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['short_url']
        'http://localhost:3000/promo'
    """
    # 0- Get application's config
    try:
        app_config = load_config('shorten_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for shorten URL function. Responding with 500.')
        return response_500()

    # 1- Extract user id from Cognito
    scope = caller_scope(event)
    if scope is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': UNAUTHORIZED})
        return response_401(message="missing 'sub' in JWT claims")

    # 2- Extract link parameters from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    target_url = request_body.get('target_url')
    if not target_url:
        logger.info("Missing 'target_url' in body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)
    if not isinstance(target_url, str):
        return response_400(message="'target_url' must be a string", error_code=INVALID_URL)

    custom_code = request_body.get('custom_code') or None
    if custom_code is not None and not isinstance(custom_code, str):
        return response_400(message="'custom_code' must be a string", error_code=INVALID_CUSTOM_CODE)

    expiration_days = request_body.get('expiration_days')
    if expiration_days is not None and (isinstance(expiration_days, bool) or not isinstance(expiration_days, int)):
        logger.info('Invalid expiration. Responding with 400.', extra={'event': INVALID_EXPIRATION})
        return response_400(message="'expiration_days' must be an integer", error_code=INVALID_EXPIRATION)

    # 3- Create the short link
    with store_from_config(app_config) as store:
        engine = LinkEngine.from_config(store, app_config, prefix=app_prefix())
        try:
            link = engine.registry.create(target_url, custom_code=custom_code, expiration_days=expiration_days, scope=scope)
        except InvalidUrlError:
            logger.info('Invalid target URL. Responding with 400.', extra={'event': INVALID_URL})
            return response_400(message=f'invalid URL {target_url!r}', error_code=INVALID_URL)
        except CodeValidationError as e:
            logger.info('Invalid custom code. Responding with 400.', extra={'event': INVALID_CUSTOM_CODE, 'shortcode': custom_code})
            return response_400(message=str(e), error_code=INVALID_CUSTOM_CODE)
        except InvalidExpirationError as e:
            logger.info('Expiration out of range. Responding with 400.', extra={'event': INVALID_EXPIRATION})
            return response_400(message=str(e), error_code=INVALID_EXPIRATION)
        except CodeTakenError:
            logger.info('Custom code already taken. Responding with 409.', extra={'event': SHORTCODE_TAKEN, 'shortcode': custom_code})
            return response_409(message=f"short code '{custom_code}' is already taken", error_code=SHORTCODE_TAKEN)
        except CodeSpaceExhaustedError:
            logger.warning('Could not generate an unused short code. Responding with 503.', extra={'event': CODE_SPACE_EXHAUSTED})
            return response_503(message='could not generate a short code, try again', error_code=CODE_SPACE_EXHAUSTED)

    # 4- Return successful response to user
    short_url = get_short_url(link.short_code, event)
    logger.info(
        'Shortened URL. Responding with 201.',
        extra={'event': SHORTEN_SUCCESS, 'shortcode': link.short_code, 'linkId': link.id},
    )
    return response_201(
        {
            'message': f'Successfully shortened {target_url} to {short_url}',
            **link.to_record(),
            'short_url': short_url,
        }
    )
