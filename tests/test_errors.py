# tests/test_errors.py
import pytest

from llmcore.providers.base import (
    AuthError,
    MalformedResponseError,
    ProviderError,
    RateLimitError,
    TransportError,
    error_for_status,
)


@pytest.mark.parametrize(
    "status, exc_type",
    [(401, AuthError), (403, AuthError), (429, RateLimitError), (400, ProviderError), (503, ProviderError)],
)
def test_error_for_status(status, exc_type):
    err = error_for_status(status, "details")
    assert type(err) is exc_type
    assert err.status_code == status
    assert str(err) == f"Provider HTTP error {status}: details"


def test_error_for_status_without_body():
    assert str(error_for_status(502)) == "Provider HTTP error 502"


def test_hierarchy():
    # everything a provider raises can be caught as ProviderError
    for cls in (AuthError, RateLimitError, TransportError, MalformedResponseError):
        assert issubclass(cls, ProviderError)
    assert issubclass(MalformedResponseError, ValueError)
    assert ProviderError("x").status_code is None
