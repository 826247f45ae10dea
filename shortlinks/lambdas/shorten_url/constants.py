# Event/error codes reported by the shorten URL function
UNAUTHORIZED = 'UNAUTHORIZED'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_URL = 'INVALID_URL'
INVALID_CUSTOM_CODE = 'INVALID_CUSTOM_CODE'
INVALID_EXPIRATION = 'INVALID_EXPIRATION'
SHORTCODE_TAKEN = 'SHORTCODE_TAKEN'
CODE_SPACE_EXHAUSTED = 'CODE_SPACE_EXHAUSTED'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
