import pytest

from wetask.core.exceptions import (
    ApiError,
    AuthenticationError,
    EmailTakenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    SessionExpiredError,
    UserAlreadyExistsError,
    WetaskError,
)


@pytest.mark.parametrize(
    "error, base",
    [
        (InvalidCredentialsError(), AuthenticationError),
        (InvalidTokenError(), AuthenticationError),
        (InvalidRefreshTokenError(), AuthenticationError),
        (SessionExpiredError(), AuthenticationError),
        (EmailTakenError(), UserAlreadyExistsError),
        (ApiError(404), WetaskError),
    ],
)
def test_hierarchy(error, base):
    assert isinstance(error, base)
    assert isinstance(error, WetaskError)


def test_error_carries_message_and_code():
    error = SessionExpiredError()

    assert str(error) == "Session expired. Please sign in again."
    assert error.code == "session_expired"


def test_api_error_keeps_status_and_falls_back_to_generic_message():
    error = ApiError(503)

    assert error.status_code == 503
    assert error.message == "Request failed"
