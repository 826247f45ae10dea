class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlinks_error'


class ConfigurationError(ShortLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class LinkError(ShortLinksError):
    """Base exception for short link lifecycle errors."""

    error_code = 'link:link_error'


class InvalidUrlError(LinkError):
    """Raised when a target address is not a well-formed absolute URL."""

    error_code = 'link:invalid_url'


class CodeValidationError(LinkError):
    """Raised when a custom short code is malformed."""

    error_code = 'link:invalid_custom_code'


class CodeTakenError(LinkError):
    """Raised when a short code has already been used (active or retired)."""

    error_code = 'link:code_taken'


class CodeSpaceExhaustedError(LinkError):
    """Raised when code generation runs out of attempts."""

    error_code = 'link:code_space_exhausted'


class LinkNotFoundError(LinkError):
    """Raised when a short code or link id does not resolve to an active link.

    Unknown and expired codes share this exception.
    """

    error_code = 'link:not_found'


class InvalidExpirationError(LinkError):
    """Raised when an expiration puts the link's expiry outside the representable date range."""

    error_code = 'link:invalid_expiration'
