##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Utility functions to support Firelite CLI command handlers.

These helpers turn command-line tokens into filters and document fields,
render documents as tables, and run a coroutine against an opened app.
"""

import asyncio
import logging
from argparse import Namespace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from tabulate import tabulate

from firelite.app import FireliteApp
from firelite.data_models import Document
from firelite.filters import Filter, Operator, parse_operator, where
from firelite.utils import parse_scalar


LOG = logging.getLogger(__name__)

T = TypeVar("T")


def parse_assignments(assignments: Sequence[str]) -> Dict[str, Any]:
    """
    Parse `KEY=VALUE` tokens into document fields.

    Values are read as YAML scalars, so `age=30` stores the integer 30 and
    `active=true` stores True. Everything after the first `=` is the value.

    Args:
        assignments: Tokens such as `["name=Ann", "age=30"]`.

    Returns:
        The fields, in the order given.

    Raises:
        ValueError: If a token has no `=` or an empty key.
    """
    fields: Dict[str, Any] = {}
    for token in assignments:
        key, sep, raw = token.partition("=")
        if not sep:
            raise ValueError(f"Expected KEY=VALUE, got '{token}'.")
        if not key:
            raise ValueError(f"Missing field name in '{token}'.")
        fields[key] = parse_scalar(raw)
    LOG.debug(f"Parsed fields from the command line: {fields}")
    return fields


def parse_where(tokens: Optional[Sequence[str]]) -> Optional[Filter]:
    """
    Turn a `--where FIELD OP VALUE` triple into a filter.

    For the `in` operator the value is split on commas and each part parsed
    as a scalar.

    Args:
        tokens: The three tokens, or None when no `--where` was given.

    Returns:
        The filter, or None.

    Raises:
        InvalidFilterError: If the operator or field is invalid.
    """
    if tokens is None:
        return None
    field, op, raw = tokens
    if parse_operator(op) is Operator.IN:
        return where(field, op, [parse_scalar(part.strip()) for part in raw.split(",")])
    return where(field, op, parse_scalar(raw))


def format_documents(documents: List[Document]) -> str:
    """
    Render documents as a table with one column per field.

    Args:
        documents: The documents to render.

    Returns:
        The table.
    """
    return tabulate([document.to_dict() for document in documents], headers="keys")


def run_with_app(args: Namespace, action: Callable[[FireliteApp], Awaitable[T]]) -> T:
    """
    Open an app built from the parsed configuration, run `action` on it and close it.

    Args:
        args: Parsed CLI arguments carrying the loaded `firelite_config`.
        action: A coroutine function taking the opened app.

    Returns:
        Whatever `action` returns.
    """

    async def runner() -> T:
        async with FireliteApp.from_config(args.firelite_config) as app:
            return await action(app)

    return asyncio.run(runner())
