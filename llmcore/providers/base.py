# error types shared by every provider module
# callers can tell auth / rate-limit / transport / malformed-response failures apart and pick a retry policy

from typing import Optional


class ProviderError(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ProviderError):
    pass


class RateLimitError(ProviderError):
    pass


# connection refused, dropped socket, timeouts
class TransportError(ProviderError):
    pass


# also a ValueError so callers catching bad JSON the usual way still see it
class MalformedResponseError(ProviderError, ValueError):
    pass


def error_for_status(status_code: int, body: str = "") -> ProviderError:
    """Map a non-2xx HTTP status to the matching ProviderError subclass."""
    detail = f"Provider HTTP error {status_code}"
    if body:
        detail = f"{detail}: {body}"
    if status_code in (401, 403):
        return AuthError(detail, status_code=status_code)
    if status_code == 429:
        return RateLimitError(detail, status_code=status_code)
    return ProviderError(detail, status_code=status_code)
