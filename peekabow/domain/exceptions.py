from typing import Optional


class PeekabowException(Exception):
    """Base exception for all peekabow errors."""
    pass

class ConfigurationException(PeekabowException):
    """Raised when the credentials file is missing, malformed or incomplete."""
    def __init__(self, path: str, message: str = "Token settings are incomplete."):
        self.path = path
        super().__init__(f"{message} ({path})")

class UpstreamException(PeekabowException):
    """
    Base class for failures talking to GitHub or ZenHub.
    These are fatal for the run: no partial summary is meaningful without them.
    """
    kind = "upstream error"

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")

class AuthenticationException(UpstreamException):
    """Raised when a token is rejected (HTTP 401/403)."""
    kind = "authentication"

class NotFoundException(UpstreamException):
    """Raised when the repository is unknown to GitHub or not connected to ZenHub."""
    kind = "not found"

class ServiceUnavailableException(UpstreamException):
    """Raised on transport failures and non-success HTTP statuses."""
    kind = "service unavailable"

    def __init__(self, service: str, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(service, message)

class UnexpectedResponseException(UpstreamException):
    """Raised when a response body cannot be decoded into the expected shape."""
    kind = "unexpected response"

class QueryRejectedException(UpstreamException):
    """Raised when the GraphQL API answers with errors."""
    kind = "query rejected"
