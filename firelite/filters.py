##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Filter expressions for document queries.

A `Filter` is a `(field, operator, value)` triple built with `where()`. Filters
are validated as soon as they are built, so an unsupported operator or a
malformed value is reported before any statement reaches the database.
Translation to SQL lives with the SQLite backend.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union

from firelite.exceptions import InvalidFilterError


IDENTIFIER_PATTERN = re.compile(r"\A[A-Za-z_][A-Za-z0-9_]*\Z")


class Operator(Enum):
    """
    Comparison operators supported in a filter. The value of each member is
    the SQL operator it translates to.
    """

    EQ = "="
    NEQ = "!="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    LIKE = "LIKE"
    IN = "IN"


OPERATOR_ALIASES = {
    "==": Operator.EQ,
    "=": Operator.EQ,
    "!=": Operator.NEQ,
    "<>": Operator.NEQ,
    ">": Operator.GT,
    "<": Operator.LT,
    ">=": Operator.GTE,
    "<=": Operator.LTE,
    "like": Operator.LIKE,
    "in": Operator.IN,
}


def parse_operator(operator: Union[str, Operator]) -> Operator:
    """
    Resolve an operator given as an `Operator`, a symbol (`==`, `>=`, ...),
    a keyword (`like`, `in`) or a member name (`EQ`, `GTE`, ...).

    Args:
        operator: The operator to resolve.

    Returns:
        The matching `Operator`.

    Raises:
        InvalidFilterError: If the operator isn't supported.
    """
    if isinstance(operator, Operator):
        return operator
    if isinstance(operator, str):
        key = operator.strip()
        if key.lower() in OPERATOR_ALIASES:
            return OPERATOR_ALIASES[key.lower()]
        if key.upper() in Operator.__members__:
            return Operator[key.upper()]
    raise InvalidFilterError(f"Unsupported filter operator: {operator!r}")


def _is_collection_value(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


@dataclass(frozen=True)
class Filter:
    """
    A single-field predicate.

    Attributes:
        field: The field (column) to compare.
        operator: The comparison to apply.
        value: A scalar, or a non-empty tuple of scalars for `Operator.IN`.
    """

    field: str
    operator: Operator
    value: Any

    def validate(self):
        """
        Check that the filter can be translated.

        Raises:
            InvalidFilterError: If the field isn't a valid identifier, the operator
                isn't an `Operator`, or the value doesn't match the operator's arity.
        """
        if not isinstance(self.field, str) or not IDENTIFIER_PATTERN.match(self.field):
            raise InvalidFilterError(f"Invalid filter field: {self.field!r}")
        if not isinstance(self.operator, Operator):
            raise InvalidFilterError(f"Unsupported filter operator: {self.operator!r}")
        if self.operator is Operator.IN:
            if not _is_collection_value(self.value):
                raise InvalidFilterError(f"'IN' filter on '{self.field}' needs a list, tuple or set of values")
            if len(self.value) == 0:
                raise InvalidFilterError(f"'IN' filter on '{self.field}' needs at least one value")
        elif _is_collection_value(self.value):
            raise InvalidFilterError(
                f"'{self.operator.name}' filter on '{self.field}' takes a single value, got {type(self.value).__name__}"
            )

    @property
    def values(self) -> Tuple[Any, ...]:
        """The values to bind as parameters, in order."""
        if self.operator is Operator.IN:
            return tuple(self.value)
        return (self.value,)


def where(field: str, operator: Union[str, Operator], value: Any) -> Filter:
    """
    Build and validate a filter.

    Args:
        field: The field to compare.
        operator: The comparison (see `parse_operator`).
        value: The value to compare against; an iterable of values for `in`.

    Returns:
        A validated `Filter`.

    Raises:
        InvalidFilterError: If any part of the filter is invalid.
    """
    op = parse_operator(operator)
    if op is Operator.IN and _is_collection_value(value):
        # Freeze the iteration order the caller gave us
        value = tuple(value)
    built = Filter(field, op, value)
    built.validate()
    return built
