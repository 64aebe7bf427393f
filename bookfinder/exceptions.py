class UpstreamError(Exception):
    """The recommendation service failed, timed out or returned unusable content."""


class ParseError(UpstreamError):
    """The model reply could not be parsed into a recommendation."""


class MissingCredentialsError(UpstreamError):
    """A required API key is not configured."""
