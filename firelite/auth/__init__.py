##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
The `auth` package provides email/password accounts on top of the document store.

Modules:
    passwords.py: bcrypt hashing and verification.
    events.py: The publish/subscribe channel for sign-in and sign-out events.
    auth_service.py: The `AuthService`, `Session` and `AuthLogRecorder`.
"""
