##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Translate `Filter` objects into parameterized SQLite WHERE fragments.

Values are always bound as parameters. The field name is the only part of a
filter that ends up in SQL text, and only after it has been validated and quoted.
"""

import logging
from typing import Any, List, Optional, Tuple

from firelite.backends.sqlite.sqlite_schema import quote_identifier
from firelite.exceptions import InvalidFilterError
from firelite.filters import Filter, Operator


LOG = logging.getLogger(__name__)


def translate_filter(query_filter: Filter) -> Tuple[str, List[Any]]:
    """
    Build the SQL fragment and parameter list for a single filter.

    Args:
        query_filter: The filter to translate.

    Returns:
        A tuple of (fragment, params), e.g. `('"age" >= ?', [21])` or
        `('"role" IN (?, ?)', ["admin", "owner"])`.

    Raises:
        InvalidFilterError: If the filter is malformed. Nothing is executed.
    """
    if not isinstance(query_filter, Filter):
        raise InvalidFilterError(f"Expected a Filter built with where(), got {type(query_filter).__name__}")
    query_filter.validate()
    column = quote_identifier(query_filter.field)
    params = list(query_filter.values)

    if query_filter.operator is Operator.IN:
        placeholders = ", ".join("?" for _ in params)
        fragment = f"{column} IN ({placeholders})"
    else:
        fragment = f"{column} {query_filter.operator.value} ?"

    return fragment, params


def build_where_clause_and_params(query_filter: Optional[Filter]) -> Tuple[str, List[Any]]:
    """
    Build the full WHERE clause for an optional filter.

    Args:
        query_filter: The filter to apply, or None for no filtering.

    Returns:
        A tuple of (where_clause, params). Both are empty when there's no filter.
    """
    if query_filter is None:
        return "", []

    fragment, params = translate_filter(query_filter)
    return f" WHERE {fragment}", params
