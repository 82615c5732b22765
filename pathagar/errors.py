"""Domain errors and the HTTP status each one maps to."""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional


class LibraryError(Exception):
    """Base class of the library's domain errors."""

    default_message = "internal server error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        message = self.default_message if not detail else f"{self.default_message}: {detail}"
        super().__init__(message)


class NotFoundError(LibraryError):
    default_message = "resource not found"
    status_code = HTTPStatus.NOT_FOUND


class UserNotFoundError(LibraryError):
    default_message = "user not found"
    status_code = HTTPStatus.NOT_FOUND


class InvalidCredentialsError(LibraryError):
    default_message = "invalid credentials"
    status_code = HTTPStatus.UNAUTHORIZED


class InvalidTokenError(LibraryError):
    default_message = "invalid token"
    status_code = HTTPStatus.UNAUTHORIZED


class TokenExpiredError(LibraryError):
    default_message = "token expired"
    status_code = HTTPStatus.UNAUTHORIZED


class EmailExistsError(LibraryError):
    default_message = "email already exists"
    status_code = HTTPStatus.CONFLICT


class UsernameExistsError(LibraryError):
    default_message = "username already exists"
    status_code = HTTPStatus.CONFLICT


class AlreadyExistsError(LibraryError):
    default_message = "resource already exists"
    status_code = HTTPStatus.CONFLICT


class InvalidInputError(LibraryError):
    default_message = "invalid input"
    status_code = HTTPStatus.BAD_REQUEST


class ForbiddenError(LibraryError):
    default_message = "forbidden"
    status_code = HTTPStatus.FORBIDDEN


class BookNotAvailableError(LibraryError):
    default_message = "book is not available"
    status_code = HTTPStatus.BAD_REQUEST


class BookAlreadyBorrowedError(LibraryError):
    default_message = "book is already borrowed"
    status_code = HTTPStatus.BAD_REQUEST


def http_status(error: BaseException) -> HTTPStatus:
    """HTTP status for an error; anything unknown is a server error."""
    if isinstance(error, LibraryError):
        return error.status_code
    return HTTPStatus.INTERNAL_SERVER_ERROR