##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Publish/subscribe channel for sign-in and sign-out events.

Listeners register with `AuthEventChannel.subscribe` and get back a
`Subscription` whose `unsubscribe()` removes exactly that listener. Listeners
may be plain functions or coroutine functions.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Union


LOG = logging.getLogger(__name__)


class AuthEventType(Enum):
    """Kinds of auth state changes."""

    SIGNED_IN = "login"
    SIGNED_OUT = "logout"


@dataclass(frozen=True)
class AuthEvent:
    """
    A change in a session's auth state.

    Attributes:
        type: Whether the user signed in or out.
        user: The user the event concerns.
        occurred_at: When the event happened (UTC).
    """

    type: AuthEventType
    user: Any
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[AuthEvent], Union[None, Awaitable[None]]]


class Subscription:
    """
    Handle for one registered listener.

    Methods:
        unsubscribe: Stop delivering events to the listener. Safe to call more than once.
    """

    def __init__(self, channel: "AuthEventChannel", token: int):
        self._channel = channel
        self._token = token

    @property
    def active(self) -> bool:
        return self._channel._has(self._token)  # pylint: disable=protected-access

    def unsubscribe(self):
        self._channel._remove(self._token)  # pylint: disable=protected-access


class AuthEventChannel:
    """
    Delivers auth events to listeners in the order they subscribed.

    Methods:
        subscribe: Register a listener.
        publish: Deliver an event to every current listener.
    """

    def __init__(self):
        self._listeners: Dict[int, Listener] = {}
        self._next_token = 0

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        """
        Register a listener.

        Args:
            listener: Called with each `AuthEvent`. May be a coroutine function.

        Returns:
            A `Subscription` that removes the listener when unsubscribed.
        """
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(self, token)

    async def publish(self, event: AuthEvent):
        """
        Deliver an event to every listener registered at the time of the call.

        An exception raised by a listener propagates to the caller and stops
        delivery to the remaining listeners.

        Args:
            event: The event to deliver.
        """
        LOG.debug(f"Publishing {event.type.name} to {len(self._listeners)} listener(s).")
        for listener in list(self._listeners.values()):
            result = listener(event)
            if inspect.isawaitable(result):
                await result

    def _has(self, token: int) -> bool:
        return token in self._listeners

    def _remove(self, token: int):
        self._listeners.pop(token, None)
