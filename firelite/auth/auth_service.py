##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Email/password accounts stored as documents.

Users live in a regular collection (`users` by default) and only the bcrypt
hash of a password is ever written. Signing in or up returns an explicit
`Session` object for the caller to carry around; there is no module-level
"current user". Sign-in and sign-out are announced on an `AuthEventChannel`,
and `AuthLogRecorder` is a ready-made listener that keeps an audit trail in
the `authlogs` collection.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from firelite.auth.events import AuthEvent, AuthEventChannel, AuthEventType, Listener, Subscription
from firelite.auth.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from firelite.backends.sqlite.sqlite_document_store import SQLiteDocumentStore
from firelite.data_models import Document
from firelite.exceptions import EmailAlreadyInUseError, InvalidPasswordError, UserNotFoundError
from firelite.filters import where


LOG = logging.getLogger(__name__)

USER_COLUMNS = ["displayName", "email", "password", "role", "displayImage"]


@dataclass(frozen=True)
class User:
    """
    A registered account.

    Attributes:
        id: The identity of the user's document.
        email: The email the user signs in with.
        password_hash: The bcrypt hash of the user's password.
        display_name: The name shown for the user.
        role: The user's role.
        display_image: A path or URL for the user's picture.
    """

    id: int  # pylint: disable=invalid-name
    email: str
    password_hash: str = field(repr=False)
    display_name: str = ""
    role: str = ""
    display_image: str = ""

    @classmethod
    def from_document(cls, document: Document) -> "User":
        """
        Build a user from a document of the users collection.

        Args:
            document: The stored user document.

        Returns:
            The user.
        """
        return cls(
            id=document.id,
            email=document.get("email"),
            password_hash=document.get("password"),
            display_name=document.get("displayName") or "",
            role=document.get("role") or "",
            display_image=document.get("displayImage") or "",
        )


@dataclass
class Session:
    """
    The context of a signed-in caller.

    Attributes:
        user: The signed-in user.
        signed_in_at: When the session started (UTC).
        active: False once the session has been signed out.
    """

    user: User
    signed_in_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    active: bool = True


class AuthService:
    """
    Sign-up, sign-in and sign-out against a users collection.

    Attributes:
        store (SQLiteDocumentStore): The store holding the users collection.
        events (AuthEventChannel): Where sign-in and sign-out events are published.
        rounds (int): The bcrypt cost factor for new password hashes.
        users_collection (str): The collection users are stored in.

    Methods:
        ensure_users_table: Create the users collection if it doesn't exist.
        get_user_by_email: Look a user up by email.
        create_user_with_email_and_password: Register a user and sign them in.
        sign_in_with_email_and_password: Check a user's password and start a session.
        sign_out: End a session.
        on_auth_state_changed: Subscribe to sign-in and sign-out events.
    """

    def __init__(
        self,
        store: SQLiteDocumentStore,
        events: Optional[AuthEventChannel] = None,
        rounds: int = DEFAULT_ROUNDS,
        users_collection: str = "users",
    ):
        self.store = store
        self.events = events or AuthEventChannel()
        self.rounds = rounds
        self.users_collection = users_collection

    async def ensure_users_table(self):
        """
        Create the users collection with its standard columns if it doesn't exist.
        """
        columns = list(USER_COLUMNS)
        if self.store.timestamp_field is not None:
            columns.append(self.store.timestamp_field)
        await self.store.synthesizer.ensure_table(self.store.provider.connection, self.users_collection, columns)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Look a user up by email.

        Args:
            email: The email to look for.

        Returns:
            The user, or None if nobody registered with that email.
        """
        await self.ensure_users_table()
        document = await self.store.get_doc(self.users_collection, where("email", "==", email))
        return User.from_document(document) if document is not None else None

    async def create_user_with_email_and_password(self, email: str, password: str, display_name: str = "") -> Session:
        """
        Register a user and sign them in.

        Args:
            email: The email the user will sign in with.
            password: The plaintext password; only its hash is stored.
            display_name: The name shown for the user.

        Returns:
            A session for the new user.

        Raises:
            EmailAlreadyInUseError: If a user with this email already exists.
        """
        if await self.get_user_by_email(email) is not None:
            raise EmailAlreadyInUseError(f"A user with email '{email}' already exists.")

        hashed = await asyncio.to_thread(hash_password, password, self.rounds)
        document = await self.store.add_doc(
            self.users_collection,
            {"displayName": display_name, "email": email, "password": hashed, "role": "", "displayImage": ""},
        )
        user = User.from_document(document)
        LOG.info(f"Created user {user.id} ({email}).")
        return await self._start_session(user)

    async def sign_in_with_email_and_password(self, email: str, password: str) -> Session:
        """
        Check a user's password and start a session.

        Args:
            email: The user's email.
            password: The plaintext password to check.

        Returns:
            A session for the user.

        Raises:
            UserNotFoundError: If nobody registered with this email.
            InvalidPasswordError: If the password doesn't match.
        """
        user = await self.get_user_by_email(email)
        if user is None:
            raise UserNotFoundError(f"No user with email '{email}'.")

        matches = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not matches:
            raise InvalidPasswordError(f"Incorrect password for '{email}'.")

        LOG.info(f"User {user.id} signed in.")
        return await self._start_session(user)

    async def sign_out(self, session: Session):
        """
        End a session. Signing out a session that already ended does nothing.

        Args:
            session: The session to end.
        """
        if not session.active:
            return
        session.active = False
        LOG.info(f"User {session.user.id} signed out.")
        await self.events.publish(AuthEvent(AuthEventType.SIGNED_OUT, session.user))

    def on_auth_state_changed(self, listener: Listener) -> Subscription:
        """
        Subscribe to sign-in and sign-out events.

        Args:
            listener: Called with each `AuthEvent`. May be a coroutine function.

        Returns:
            A `Subscription`; call `unsubscribe()` to stop receiving events.
        """
        return self.events.subscribe(listener)

    async def _start_session(self, user: User) -> Session:
        session = Session(user)
        await self.events.publish(AuthEvent(AuthEventType.SIGNED_IN, user))
        return session


class AuthLogRecorder:
    """
    Listener that appends a `{user_id, event_type, timestamp}` document to a
    log collection for every auth event.

    Attributes:
        store (SQLiteDocumentStore): The store to write to.
        collection_name (str): The log collection.
    """

    def __init__(self, store: SQLiteDocumentStore, collection_name: str = "authlogs"):
        self.store = store
        self.collection_name = collection_name

    async def __call__(self, event: AuthEvent):
        await self.store.add_doc(
            self.collection_name,
            {
                "user_id": event.user.id,
                "event_type": event.type.value,
                "timestamp": event.occurred_at.isoformat(),
            },
        )
