class AuthenticationError(Exception):
    """Raised when a user session or API credential is missing or invalid."""


class ConfigurationError(Exception):
    """Raised when a required service (Gemini, Supabase) is not configured."""


class InvalidRequestError(Exception):
    """Raised when a request is missing the media, URL or fields it needs."""


class IntegrationError(Exception):
    """Raised when an external API call fails."""


class RateLimitError(Exception):
    """Raised when an external API rate limit is hit."""


class WebpageUnavailableError(Exception):
    """Raised when a URL can be neither fetched nor analyzed from its address alone."""


class ContentFetchError(Exception):
    """Raised when a webpage cannot be downloaded."""
