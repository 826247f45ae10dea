import string
from enum import StrEnum


# Base62 alphabet used for generated short codes
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class Defaults:
    """Default engine settings."""

    CODE_LENGTH = 6  # Length of generated short codes
    MAX_GENERATION_ATTEMPTS = 10  # Collisions tolerated before giving up on code generation
    MAX_CAS_RETRIES = 100  # Compare-and-swap attempts before reporting contention
    TOP_LINKS = 10  # Number of links in the "top links" view
    RECENT_CLICKS = 5  # Click events attached to each top link for drill-down
    HISTORY_WINDOW_DAYS = 30  # Trailing window of the click history view
    MAX_HISTORY_WINDOW_DAYS = 3650  # Longest click history window served
    MIN_CUSTOM_CODE_LENGTH = 3


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        AWS_LAMBDA_FUNCTION_NAME = 'AWS_LAMBDA_FUNCTION_NAME'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
