import logging
from typing import Any

from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.memory import MemoryLinkStoreDAO
from shortlinks.dao.redis import RedisLinkStoreDAO
from shortlinks.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


def store_from_config(app_config: dict[str, Any]) -> LinkStoreBaseDAO:
    """Build the link store selected by a lambda's configuration

    Args:
        app_config (dict):
            Output of load_config(), e.g. {'redis': {'host': ..., 'port': ...}, 'engine': {...}}.

    Returns:
        LinkStoreBaseDAO: an unopened store.

    Raises:
        BadConfigurationError:
            If no supported backend section is present.

    Example:
        >>> store = store_from_config({'redis': {'host': 'localhost', 'port': 6379, 'db': 0}})
        >>> type(store).__name__
        'RedisLinkStoreDAO'
    """
    if 'redis' in app_config:
        logger.debug('Using Redis as the link store backend.')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        return RedisLinkStoreDAO(**redis_config)

    if 'memory' in app_config:
        logger.debug('Using in-process memory as the link store backend.')
        return MemoryLinkStoreDAO()

    raise BadConfigurationError(f'No supported link store backend in configuration (sections: {sorted(app_config)}).')
