import logging
from typing import Any

from shortlinks.dao import store_from_config
from shortlinks.engine import LinkEngine
from shortlinks.exceptions import ConfigurationError, LinkNotFoundError
from shortlinks.utils import load_config, get_short_url, app_prefix, caller_scope, guarantee_500_response
from shortlinks.utils.responses import response_200, response_204, response_400, response_401, response_404, response_405, response_500
from shortlinks.lambdas.manage_links.constants import (
    UNAUTHORIZED,
    MISSING_LINK_ID,
    LINK_NOT_FOUND,
    LINK_DELETED,
    LINKS_LISTED,
    METHOD_NOT_ALLOWED,
)


logger = logging.getLogger(__name__)


def list_links(engine: LinkEngine, scope: str, event: dict) -> dict:
    links = engine.registry.list_links(scope)
    logger.info('Listed links. Responding with 200.', extra={'event': LINKS_LISTED, 'count': len(links)})
    return response_200({'links': [{**link.to_record(), 'short_url': get_short_url(link.short_code, event)} for link in links]})


def delete_link(engine: LinkEngine, scope: str, event: dict) -> dict:
    link_id = (event.get('pathParameters') or {}).get('link_id')
    if not link_id:
        logger.info('Missing "link_id" in path. Responding with 400.', extra={'event': MISSING_LINK_ID})
        return response_400(message="missing 'link_id' in path", error_code=MISSING_LINK_ID)

    try:
        link = engine.registry.get(link_id)
        # Links of other users are reported as missing
        if link.scope != scope:
            raise LinkNotFoundError(f"Short link with id '{link_id}' not found.")
        engine.registry.remove(link_id)
    except LinkNotFoundError:
        logger.info('Link not found. Responding with 404.', extra={'event': LINK_NOT_FOUND, 'linkId': link_id})
        return response_404(message=f"link '{link_id}' doesn't exist", error_code=LINK_NOT_FOUND)

    logger.info('Deleted link. Responding with 204.', extra={'event': LINK_DELETED, 'linkId': link_id, 'shortcode': link.short_code})
    return response_204()


ROUTES = {
    'GET': list_links,
    'DELETE': delete_link,
}


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle API Gateway requests to list and delete the caller's short links

    Routes:
        GET    /links            -> 200 {'links': [<link record> + short_url, ...]} (newest first)
        DELETE /links/{link_id}  -> 204, or 404 if the link doesn't exist or belongs to someone else

    HTTP responses:
        400: missing link id on DELETE
        401: missing Cognito user id
        405: unsupported HTTP method
        500/503: internal error / link store unavailable
    """
    # 0- Get application's config
    try:
        app_config = load_config('manage_links')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for manage links function. Responding with 500.')
        return response_500()

    # 1- Extract user id from Cognito
    scope = caller_scope(event)
    if scope is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': UNAUTHORIZED})
        return response_401(message="missing 'sub' in JWT claims")

    # 2- Route by HTTP method
    method = (event.get('httpMethod') or '').upper()
    route = ROUTES.get(method)
    if route is None:
        logger.info('Unsupported method. Responding with 405.', extra={'event': METHOD_NOT_ALLOWED, 'method': method})
        return response_405(method)

    with store_from_config(app_config) as store:
        engine = LinkEngine.from_config(store, app_config, prefix=app_prefix())
        return route(engine, scope, event)
