##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module hashes and checks user passwords with bcrypt.

Bcrypt only looks at the first 72 bytes of its input, so two long passwords
sharing a prefix would hash the same. To avoid that, every password is first
reduced to the base64 form of its SHA-256 digest, a fixed 44 bytes, and that
is what bcrypt sees. The stored value is still an ordinary bcrypt string
(`$2b$<cost>$...`) carrying its own salt and cost.
"""

import base64
import hashlib

import bcrypt


DEFAULT_ROUNDS = 12
ENCODING = "utf-8"


def _digest_for_bcrypt(password: str) -> bytes:
    """
    Reduce a password of any length to the fixed-size value handed to bcrypt.

    Args:
        password: The plaintext password.

    Returns:
        The base64-encoded SHA-256 digest of `password`.
    """
    digest = hashlib.sha256(password.encode(ENCODING)).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password for storage.

    Each call draws a fresh salt, so hashing the same password twice gives
    two different strings that both verify.

    Args:
        password: The plaintext password.
        rounds: The bcrypt cost factor. Lower values are only meant for tests.

    Returns:
        The bcrypt hash as text.
    """
    hashed = bcrypt.hashpw(_digest_for_bcrypt(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode(ENCODING)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plaintext password against a stored hash.

    Args:
        plain_password: The password a user supplied.
        hashed_password: A value previously returned by `hash_password`.

    Returns:
        True if the password matches. A stored value that isn't a usable
        bcrypt hash never matches.
    """
    try:
        return bcrypt.checkpw(_digest_for_bcrypt(plain_password), hashed_password.encode(ENCODING))
    except (TypeError, ValueError):
        # Not a bcrypt hash
        return False
