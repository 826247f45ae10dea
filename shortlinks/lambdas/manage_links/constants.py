# Event/error codes reported by the manage links function
UNAUTHORIZED = 'UNAUTHORIZED'
MISSING_LINK_ID = 'MISSING_LINK_ID'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_DELETED = 'LINK_DELETED'
LINKS_LISTED = 'LINKS_LISTED'
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
