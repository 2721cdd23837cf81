##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Module of all Firelite-specific exception types.
"""

from typing import Iterable, Optional


__all__ = (
    "FireliteError",
    "StorageUnavailableError",
    "InvalidFilterError",
    "InvalidIdentifierError",
    "OperationError",
    "WriteFailedError",
    "UnknownFieldError",
    "QueryFailedError",
    "DocumentNotFoundError",
    "AuthenticationError",
    "UserNotFoundError",
    "InvalidPasswordError",
    "EmailAlreadyInUseError",
    "BlobNotFoundError",
)


class FireliteError(Exception):
    """
    Base class for every error raised by Firelite.
    """


class StorageUnavailableError(FireliteError):
    """
    Exception to signal that the database file could not be created,
    opened, or that no connection is currently open.
    """


class InvalidFilterError(FireliteError):
    """
    Exception to signal an unsupported filter operator or a malformed
    filter (bad field name, empty `IN` set, list given to a scalar operator).
    """


class InvalidIdentifierError(FireliteError, ValueError):
    """
    Exception to signal that a collection or field name can't be used
    as a SQL identifier.
    """


class OperationError(FireliteError):
    """
    Base class for errors raised by a document operation.

    Attributes:
        operation: The name of the operation that failed (e.g. "add_doc").
        collection: The collection the operation targeted.
    """

    def __init__(self, message: str, operation: Optional[str] = None, collection: Optional[str] = None):
        self.operation = operation
        self.collection = collection
        prefix = ""
        if operation and collection:
            prefix = f"{operation} on '{collection}': "
        elif operation:
            prefix = f"{operation}: "
        super().__init__(f"{prefix}{message}")


class WriteFailedError(OperationError):
    """
    Exception to signal that an insert, update or delete was rejected.
    """


class UnknownFieldError(WriteFailedError):
    """
    Exception to signal that a write referenced fields that don't exist
    as columns in the collection's table.

    Attributes:
        fields: The field names that aren't columns of the table.
    """

    def __init__(
        self,
        fields: Iterable[str],
        operation: Optional[str] = None,
        collection: Optional[str] = None,
    ):
        self.fields = sorted(fields)
        super().__init__(f"unknown field(s) {self.fields}", operation=operation, collection=collection)


class QueryFailedError(OperationError):
    """
    Exception to signal that a read was rejected (e.g. the collection does not exist).
    """


class DocumentNotFoundError(OperationError):
    """
    Exception to signal that an update or delete targeted zero documents.
    """


class AuthenticationError(FireliteError):
    """
    Base class for sign-up and sign-in failures.
    """


class UserNotFoundError(AuthenticationError):
    """
    Exception to signal that no user is registered with the given email.
    """


class InvalidPasswordError(AuthenticationError):
    """
    Exception to signal that a password did not match the stored hash.
    """


class EmailAlreadyInUseError(AuthenticationError):
    """
    Exception to signal that a user with this email already exists.
    """


class BlobNotFoundError(FireliteError):
    """
    Exception to signal that a stored file does not exist.
    """
