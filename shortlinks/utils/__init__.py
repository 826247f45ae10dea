from shortlinks.utils.config import app_env, app_name, project_root, app_prefix, load_config
from shortlinks.utils.helpers import (
    base_url,
    get_short_url,
    get_header,
    caller_scope,
    click_context,
    require_environment,
    guarantee_500_response,
)
from shortlinks.utils.shortener import generate_shortcode, is_valid_custom_code
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'is_valid_custom_code',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'get_header',
    'caller_scope',
    'click_context',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
