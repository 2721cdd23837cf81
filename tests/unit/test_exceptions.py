##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `exceptions` package.
"""

import pytest

from firelite.exceptions import (
    AuthenticationError,
    BlobNotFoundError,
    DocumentNotFoundError,
    EmailAlreadyInUseError,
    FireliteError,
    InvalidFilterError,
    InvalidIdentifierError,
    InvalidPasswordError,
    OperationError,
    QueryFailedError,
    StorageUnavailableError,
    UnknownFieldError,
    UserNotFoundError,
    WriteFailedError,
)


@pytest.mark.parametrize(
    "error_class, parent",
    [
        (StorageUnavailableError, FireliteError),
        (InvalidFilterError, FireliteError),
        (InvalidIdentifierError, ValueError),
        (OperationError, FireliteError),
        (WriteFailedError, OperationError),
        (UnknownFieldError, WriteFailedError),
        (QueryFailedError, OperationError),
        (DocumentNotFoundError, OperationError),
        (UserNotFoundError, AuthenticationError),
        (InvalidPasswordError, AuthenticationError),
        (EmailAlreadyInUseError, AuthenticationError),
        (AuthenticationError, FireliteError),
        (BlobNotFoundError, FireliteError),
    ],
)
def test_hierarchy(error_class: type, parent: type):
    """
    Test the place of each error in the hierarchy.

    Args:
        error_class: The error to check.
        parent: A class it must derive from.
    """
    assert issubclass(error_class, parent)


@pytest.mark.parametrize(
    "operation, collection, expected",
    [
        ("get_docs", "users", "get_docs on 'users': boom"),
        ("get_docs", None, "get_docs: boom"),
        (None, None, "boom"),
    ],
)
def test_operation_error_message(operation, collection, expected: str):
    """
    Test that the operation and collection prefix the message when known.

    Args:
        operation: The failing operation.
        collection: The collection involved.
        expected: The expected message.
    """
    error = QueryFailedError("boom", operation=operation, collection=collection)
    assert str(error) == expected
    assert error.operation == operation
    assert error.collection == collection


def test_unknown_field_error_sorts_fields():
    """Test that unknown fields are reported in sorted order."""
    error = UnknownFieldError(["zip", "age"], operation="add_doc", collection="users")
    assert error.fields == ["age", "zip"]
    assert str(error) == "add_doc on 'users': unknown field(s) ['age', 'zip']"
