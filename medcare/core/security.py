"""
Core security utilities for authentication and password handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import secrets
import string

from ..config import settings

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

KEY_ALPHABET = string.ascii_letters + string.digits

def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)

def check_password_length(password: Optional[str]) -> bool:
    """
    Check a password against the configured length bounds (inclusive).

    Args:
        password: Candidate password, may be None

    Returns:
        bool: True if the password is non-empty and within bounds
    """
    return bool(password) and settings.password_min_length <= len(password) <= settings.password_max_length

def generate_key(length: Optional[int] = None) -> str:
    """
    Generate an opaque alphanumeric key for activation or password reset.

    Args:
        length: Number of characters (default: settings.activation_key_length)

    Returns:
        str: Random key drawn from a cryptographically secure source
    """
    size = length or settings.activation_key_length
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(size))

def generate_activation_key() -> str:
    return generate_key()

def generate_reset_key() -> str:
    return generate_key()

def generate_password() -> str:
    """Random password for accounts created by an administrator."""
    return generate_key(max(settings.password_min_length, 20))

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in the token
        expires_delta: Token expiration time

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode, settings.secret_key, algorithm=settings.algorithm
    )

    return encoded_jwt

def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string

    Returns:
        Dict containing token payload if valid, None if invalid
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload
    except JWTError:
        return None

def is_key_expired(issued_at: Optional[datetime], validity: timedelta) -> bool:
    """
    Check whether a key issued at `issued_at` is older than `validity`.

    Naive timestamps (SQLite drops tzinfo) are read as UTC.
    """
    if issued_at is None:
        return True
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc) > issued_at + validity
