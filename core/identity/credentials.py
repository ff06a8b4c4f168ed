"""
EastGate Identity — Credentials
=================================
bcrypt hashing plus the input rules for emails and credentials.

Plain credentials are never stored and never logged.
"""

from __future__ import annotations

import re
from typing import Optional

import bcrypt

MIN_CREDENTIAL_LENGTH = 6
# bcrypt only looks at the first 72 bytes.
MAX_CREDENTIAL_BYTES = 72
DEFAULT_BCRYPT_ROUNDS = 12

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def email_problem(email: str) -> Optional[str]:
    """None when `email` (already normalized) is acceptable."""
    if not email:
        return "email is required."
    if not _EMAIL_PATTERN.match(email):
        return "email must look like name@domain.tld."
    return None


def credential_problem(credential: str) -> Optional[str]:
    if not isinstance(credential, str) or len(credential) < MIN_CREDENTIAL_LENGTH:
        return f"credential must be at least {MIN_CREDENTIAL_LENGTH} characters."
    if len(credential.encode("utf-8")) > MAX_CREDENTIAL_BYTES:
        return f"credential must be at most {MAX_CREDENTIAL_BYTES} bytes."
    return None


class CredentialHasher:
    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31.")
        self._rounds = rounds

    def hash(self, credential: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(credential.encode("utf-8"), salt).decode("utf-8")

    def verify(self, credential: str, credential_hash: str) -> bool:
        if not isinstance(credential, str) or not credential:
            return False
        encoded = credential.encode("utf-8")
        if len(encoded) > MAX_CREDENTIAL_BYTES:
            return False
        return bcrypt.checkpw(encoded, credential_hash.encode("utf-8"))
