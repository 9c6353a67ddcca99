"""
Account lifecycle service layer.

Owns the account state machine: registration, key-based activation,
password reset, password change and self-service account updates. The
caller's identity is always passed in explicitly as a login.

Registration runs persist -> re-fetch -> activate -> provision profile ->
notify as sequential steps without a spanning transaction. A provisioning
failure leaves the persisted account in place without a profile; the error
is logged and re-raised, the account is not rolled back.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..core.security import (
    hash_password,
    verify_password,
    check_password_length,
    create_access_token,
    generate_activation_key,
    generate_reset_key,
    is_key_expired,
)
from .exceptions import (
    InvalidCredentialError,
    LoginAlreadyUsedError,
    EmailAlreadyUsedError,
    ActivationKeyNotFoundError,
    ResetKeyNotFoundError,
    ResetKeyExpiredError,
    EmailNotFoundError,
    AccountNotFoundError,
    AuthenticationFailedError,
    AccountNotActivatedError,
)
from .models import User
from .notifications import NotificationDispatcher, dispatch
from .provisioning import provision_profile
from .schemas import AccountRegistration

# Set up logging
logger = logging.getLogger(__name__)

# ============================================================================
# IDENTITY STORE QUERIES
# ============================================================================

def find_by_login(db: Session, login: str) -> Optional[User]:
    return db.query(User).filter(User.login == login.lower()).first()

def find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()

def find_by_activation_key(db: Session, key: str) -> Optional[User]:
    return db.query(User).filter(User.activation_key == key).first()

def find_by_reset_key(db: Session, key: str) -> Optional[User]:
    return db.query(User).filter(User.reset_key == key).first()

def get_account(db: Session, login: str) -> User:
    """
    Resolve a login to its account.

    Raises:
        AccountNotFoundError: If the login does not resolve
    """
    user = find_by_login(db, login)
    if not user:
        raise AccountNotFoundError()
    return user

def ensure_unique(db: Session, login: str, email: str, user_id: Optional[int] = None) -> None:
    """
    Reject a login or email already held by an account other than `user_id`.

    This is a fast-path check only; the unique constraints on the users
    table remain the actual guard.
    """
    existing = find_by_login(db, login)
    if existing and existing.id != user_id:
        raise LoginAlreadyUsedError()
    existing = find_by_email(db, email)
    if existing and existing.id != user_id:
        raise EmailAlreadyUsedError()

def commit_unique(db: Session, user: User) -> None:
    """
    Commit a new or changed account, translating unique constraint
    violations into the matching conflict error.
    """
    login, email, user_id = user.login, user.email, user.id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Unique constraint rejected account '{login}'")
        ensure_unique(db, login, email, user_id)
        raise LoginAlreadyUsedError()

# ============================================================================
# LIFECYCLE OPERATIONS
# ============================================================================

def register_account(
    db: Session,
    registration: AccountRegistration,
    password: Optional[str],
    notifier: NotificationDispatcher,
    background_tasks: Optional[BackgroundTasks] = None
) -> User:
    """
    Register a new account and provision its role-specific profile.

    Args:
        db: Database session
        registration: Candidate account data, authorities in declared order
        password: Plain text password
        notifier: Dispatcher used for the activation email
        background_tasks: Optional FastAPI BackgroundTasks for email sending

    Returns:
        User: The persisted account

    Raises:
        InvalidCredentialError: If the password is outside the length bounds
        LoginAlreadyUsedError: If the login is taken (case-insensitive)
        EmailAlreadyUsedError: If the email is taken (case-insensitive)
    """
    if not check_password_length(password):
        logger.warning(f"Registration rejected for '{registration.login}': invalid password length")
        raise InvalidCredentialError()

    ensure_unique(db, registration.login, registration.email)

    user_obj = User(
        login=registration.login.lower(),
        email=registration.email.lower(),
        password_hash=hash_password(password),
        first_name=registration.first_name,
        last_name=registration.last_name,
        lang_key=registration.lang_key,
        image_url=registration.image_url,
        activated=False,
        activation_key=generate_activation_key(),
        authorities=list(registration.authorities),
    )
    db.add(user_obj)
    commit_unique(db, user_obj)
    logger.info(f"Created account {user_obj.id} for login '{user_obj.login}'")

    user = find_by_login(db, user_obj.login)
    if settings.auto_activate_on_register:
        user.activated = True
        user.activation_key = None
        db.commit()
        logger.info(f"Activated user '{user.login}' on registration")

    try:
        provision_profile(db, user, user.primary_role)
    except Exception as e:
        db.rollback()
        logger.error(f"Profile provisioning failed for user {user.id}, account left without profile: {str(e)}")
        raise

    db.refresh(user)
    dispatch(notifier.send_activation, user, background_tasks=background_tasks)
    return user

def activate_registration(db: Session, key: str) -> User:
    """
    Activate the account holding `key`.

    Raises:
        ActivationKeyNotFoundError: If no account holds the key
    """
    user = find_by_activation_key(db, key)
    if not user:
        logger.warning("Activation failed: unknown activation key")
        raise ActivationKeyNotFoundError()

    user.activated = True
    user.activation_key = None
    db.commit()
    db.refresh(user)
    logger.info(f"Activated user '{user.login}'")
    return user

def request_password_reset(
    db: Session,
    email: str,
    notifier: Optional[NotificationDispatcher] = None,
    background_tasks: Optional[BackgroundTasks] = None
) -> str:
    """
    Issue a fresh reset key for the activated account registered under `email`.

    Args:
        db: Database session
        email: Account email (case-insensitive)
        notifier: When given, the reset email is dispatched
        background_tasks: Optional FastAPI BackgroundTasks for email sending

    Returns:
        str: The new reset key

    Raises:
        EmailNotFoundError: If no activated account has this email
    """
    user = find_by_email(db, email)
    if not user or not user.activated:
        logger.warning(f"Password reset requested for unknown email '{email}'")
        raise EmailNotFoundError()

    key = generate_reset_key()
    user.reset_key = key
    user.reset_date = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info(f"Issued reset key for user '{user.login}'")

    if notifier is not None:
        dispatch(notifier.send_reset, user, key, background_tasks=background_tasks)
    return key

def complete_password_reset(db: Session, new_password: Optional[str], key: str) -> User:
    """
    Set a new password using a reset key.

    Raises:
        InvalidCredentialError: If the new password is outside the length bounds
        ResetKeyNotFoundError: If no account holds the key
        ResetKeyExpiredError: If the key is older than the validity window
    """
    if not check_password_length(new_password):
        raise InvalidCredentialError()

    user = find_by_reset_key(db, key)
    if not user:
        logger.warning("Password reset failed: unknown reset key")
        raise ResetKeyNotFoundError()
    if is_key_expired(user.reset_date, timedelta(hours=settings.reset_key_validity_hours)):
        logger.warning(f"Password reset failed: expired key for user '{user.login}'")
        raise ResetKeyExpiredError()

    user.password_hash = hash_password(new_password)
    user.reset_key = None
    user.reset_date = None
    db.commit()
    db.refresh(user)
    logger.info(f"Password reset completed for user '{user.login}'")
    return user

def change_password(db: Session, login: str, current_password: str, new_password: Optional[str]) -> None:
    """
    Change the password of the authenticated account `login`.

    Raises:
        InvalidCredentialError: If the new password is outside the length
            bounds or the current password does not match
        AccountNotFoundError: If the login does not resolve
    """
    if not check_password_length(new_password):
        raise InvalidCredentialError()

    user = get_account(db, login)
    if not verify_password(current_password, user.password_hash):
        logger.warning(f"Password change rejected for '{login}': current password mismatch")
        raise InvalidCredentialError("Incorrect current password")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"Changed password for user '{user.login}'")

def update_account(
    db: Session,
    login: str,
    email: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    lang_key: Optional[str] = None,
    image_url: Optional[str] = None
) -> User:
    """
    Update the current user's own account details.

    Raises:
        EmailAlreadyUsedError: If the email belongs to a different account
        AccountNotFoundError: If the login does not resolve
    """
    existing = find_by_email(db, email)
    if existing and existing.login != login.lower():
        raise EmailAlreadyUsedError()

    user = get_account(db, login)
    user.first_name = first_name
    user.last_name = last_name
    user.email = email.lower()
    user.lang_key = lang_key
    user.image_url = image_url
    commit_unique(db, user)
    db.refresh(user)
    logger.info(f"Updated account details for user '{user.login}'")
    return user

def authenticate(db: Session, login: str, password: str) -> str:
    """
    Verify credentials and issue an access token bound to the login.

    Raises:
        AuthenticationFailedError: If the login is unknown or the password is wrong
        AccountNotActivatedError: If the account has not been activated
    """
    user = find_by_login(db, login)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Authentication failed for '{login}'")
        raise AuthenticationFailedError()
    if not user.activated:
        raise AccountNotActivatedError(user.login)

    logger.info(f"User '{user.login}' authenticated")
    return create_access_token({"sub": user.login, "auth": list(user.authorities)})
