# Event/error codes reported by the analytics function
UNAUTHORIZED = 'UNAUTHORIZED'
INVALID_QUERY_PARAMETER = 'INVALID_QUERY_PARAMETER'
ANALYTICS_SUCCESS = 'ANALYTICS_SUCCESS'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
