from http import HTTPStatus

import pytest

from pathagar.errors import (
    AlreadyExistsError,
    BookAlreadyBorrowedError,
    BookNotAvailableError,
    EmailExistsError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidTokenError,
    LibraryError,
    NotFoundError,
    TokenExpiredError,
    UserNotFoundError,
    UsernameExistsError,
    http_status,
)


@pytest.mark.parametrize(
    "error, expected",
    [
        (NotFoundError(), HTTPStatus.NOT_FOUND),
        (UserNotFoundError(), HTTPStatus.NOT_FOUND),
        (InvalidCredentialsError(), HTTPStatus.UNAUTHORIZED),
        (InvalidTokenError(), HTTPStatus.UNAUTHORIZED),
        (TokenExpiredError(), HTTPStatus.UNAUTHORIZED),
        (EmailExistsError(), HTTPStatus.CONFLICT),
        (UsernameExistsError(), HTTPStatus.CONFLICT),
        (AlreadyExistsError(), HTTPStatus.CONFLICT),
        (InvalidInputError(), HTTPStatus.BAD_REQUEST),
        (ForbiddenError(), HTTPStatus.FORBIDDEN),
        (BookNotAvailableError(), HTTPStatus.BAD_REQUEST),
        (BookAlreadyBorrowedError(), HTTPStatus.BAD_REQUEST),
    ],
)
def test_domain_errors_map_to_status(error, expected):
    assert http_status(error) == expected


def test_unknown_error_is_server_error():
    assert http_status(RuntimeError("boom")) == HTTPStatus.INTERNAL_SERVER_ERROR
    assert http_status(LibraryError()) == HTTPStatus.INTERNAL_SERVER_ERROR


def test_detail_is_appended_to_message():
    error = AlreadyExistsError("Key (isbn)=(123) already exists.")
    assert str(error).startswith(AlreadyExistsError.default_message)
    assert str(error).endswith("Key (isbn)=(123) already exists.")
    assert error.detail == "Key (isbn)=(123) already exists."


def test_message_without_detail_is_default():
    assert str(NotFoundError()) == NotFoundError.default_message


def test_domain_errors_are_library_errors():
    with pytest.raises(LibraryError) as excinfo:
        raise ForbiddenError()
    assert http_status(excinfo.value) == HTTPStatus.FORBIDDEN
    assert str(excinfo.value) == ForbiddenError.default_message