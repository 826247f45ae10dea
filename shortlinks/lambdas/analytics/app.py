import logging
from typing import Any

from shortlinks.constants import Defaults
from shortlinks.dao import store_from_config
from shortlinks.engine import LinkEngine
from shortlinks.exceptions import ConfigurationError
from shortlinks.utils import load_config, app_prefix, caller_scope, guarantee_500_response
from shortlinks.utils.responses import response_200, response_400, response_401, response_405, response_500
from shortlinks.lambdas.analytics.constants import (
    UNAUTHORIZED,
    INVALID_QUERY_PARAMETER,
    ANALYTICS_SUCCESS,
    METHOD_NOT_ALLOWED,
)


logger = logging.getLogger(__name__)

# Query parameter -> (report() keyword, minimum accepted value, maximum accepted value)
QUERY_PARAMETERS = {
    'top': ('n', 0, None),
    'recent': ('recent', 0, None),
    'window_days': ('window_days', 1, Defaults.MAX_HISTORY_WINDOW_DAYS),
}


def parse_report_options(event: dict, defaults: dict[str, int]) -> dict[str, int]:
    """Read report options from the query string, falling back to engine settings

    Raises:
        ValueError: If a parameter isn't an integer or is outside its accepted range.

    Example:
        >>> parse_report_options({'queryStringParameters': {'top': '3'}}, {'n': 10, 'recent': 5, 'window_days': 30})
        {'n': 3, 'recent': 5, 'window_days': 30}
    """
    options = dict(defaults)
    query = event.get('queryStringParameters') or {}
    for name, (keyword, minimum, maximum) in QUERY_PARAMETERS.items():
        if query.get(name) is None:
            continue
        value = int(query[name])
        if value < minimum:
            raise ValueError(f"'{name}' must be at least {minimum} (given value: {value})")
        if maximum is not None and value > maximum:
            raise ValueError(f"'{name}' must be at most {maximum} (given value: {value})")
        options[keyword] = value
    return options


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle API Gateway requests for the caller's usage analytics

    GET /analytics[?top=N&recent=M&window_days=D]

    HTTP responses:
        200: Analytics report
            total_urls, total_clicks, active_urls,
            top_links, click_history, breakdowns
        400: invalid query parameter (INVALID_QUERY_PARAMETER)
        401: missing Cognito user id
        405: unsupported HTTP method
        500/503: internal error / link store unavailable
    """
    # 0- Get application's config
    try:
        app_config = load_config('analytics')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for analytics function. Responding with 500.')
        return response_500()

    # 1- Extract user id from Cognito
    scope = caller_scope(event)
    if scope is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': UNAUTHORIZED})
        return response_401(message="missing 'sub' in JWT claims")

    method = (event.get('httpMethod') or 'GET').upper()
    if method != 'GET':
        logger.info('Unsupported method. Responding with 405.', extra={'event': METHOD_NOT_ALLOWED, 'method': method})
        return response_405(method)

    with store_from_config(app_config) as store:
        engine = LinkEngine.from_config(store, app_config, prefix=app_prefix())

        # 2- Read report options
        defaults = {
            'n': engine.settings.top_links,
            'recent': engine.settings.recent_clicks,
            'window_days': engine.settings.history_window_days,
        }
        try:
            options = parse_report_options(event, defaults)
        except ValueError as e:
            logger.info('Invalid query parameter. Responding with 400.', extra={'event': INVALID_QUERY_PARAMETER})
            return response_400(message=str(e), error_code=INVALID_QUERY_PARAMETER)

        # 3- Compute the report
        report = engine.analytics.report(scope, **options)

    logger.info(
        'Computed analytics report. Responding with 200.',
        extra={'event': ANALYTICS_SUCCESS, 'totalUrls': report.summary.total_urls, 'totalClicks': report.summary.total_clicks},
    )
    return response_200(report.to_dict())
