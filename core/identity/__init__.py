"""
EastGate Identity - Public API
==============================
Identity namespaces, credential hashing and the identity manager.
"""

from core.identity.credentials import (
    MIN_CREDENTIAL_LENGTH,
    CredentialHasher,
    normalize_email,
)
from core.identity.models import (
    AUTHENTICATION_ORDER,
    Identity,
    IdentityView,
    Namespace,
)
from core.identity.service import IdentityManager

__all__ = [
    "AUTHENTICATION_ORDER",
    "CredentialHasher",
    "Identity",
    "IdentityManager",
    "IdentityView",
    "MIN_CREDENTIAL_LENGTH",
    "Namespace",
    "normalize_email",
]
