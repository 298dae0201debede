"""
Credential hashing and request identifiers
"""

import secrets
from passlib.context import CryptContext
from carebridge.config import settings
from carebridge.core.logging import get_logger

logger = get_logger(__name__)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hasht ein Passwort"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifiziert ein Passwort gegen seinen Hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash
        logger.warning("Password verification against malformed hash")
        return False


def generate_request_id() -> str:
    """Generiert eine eindeutige Request-ID"""
    return secrets.token_urlsafe(16)
