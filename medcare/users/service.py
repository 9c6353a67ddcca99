"""
User management service - administrator operations on accounts.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ..auth.exceptions import AccountNotFoundError, UnsupportedRoleError
from ..auth.models import User, UserRole
from ..auth.notifications import NotificationDispatcher, dispatch
from ..auth.schemas import ManagedUser, UserResponse
from ..auth.service import commit_unique, ensure_unique, get_account
from ..core.pagination import PageParams, PageResponse, paginate
from ..core.security import generate_password, generate_reset_key, hash_password
from ..exceptions import BadRequestAlertException

# Set up logging
logger = logging.getLogger(__name__)

def get_authorities() -> List[str]:
    """All role tags an account may hold."""
    return [role.value for role in UserRole]

def validate_authorities(authorities: List[str]) -> List[str]:
    """
    Reject role tags outside the known set.

    Raises:
        UnsupportedRoleError: For the first unknown tag
    """
    known = get_authorities()
    for authority in authorities:
        if authority not in known:
            raise UnsupportedRoleError(authority)
    return list(authorities)

def create_user(
    db: Session,
    user_data: ManagedUser,
    notifier: NotificationDispatcher,
    background_tasks: Optional[BackgroundTasks] = None
) -> User:
    """
    Create an activated account on behalf of an administrator.

    The account gets a random password and a reset key; the creation email
    carries the reset link the user follows to choose a password.

    Raises:
        BadRequestAlertException: If an id is supplied
        UnsupportedRoleError: If a role tag is unknown
        LoginAlreadyUsedError / EmailAlreadyUsedError: On collisions
    """
    if user_data.id is not None:
        raise BadRequestAlertException("A new user cannot already have an ID")
    authorities = validate_authorities(user_data.authorities)
    ensure_unique(db, user_data.login, user_data.email)

    user = User(
        login=user_data.login.lower(),
        email=user_data.email.lower(),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        lang_key=user_data.lang_key,
        image_url=user_data.image_url,
        password_hash=hash_password(generate_password()),
        reset_key=generate_reset_key(),
        reset_date=datetime.now(timezone.utc),
        activated=True,
        authorities=authorities,
    )
    db.add(user)
    commit_unique(db, user)
    db.refresh(user)
    logger.info(f"Created user '{user.login}' by administrator")

    dispatch(notifier.send_creation, user, background_tasks=background_tasks)
    return user

def update_user(db: Session, user_data: ManagedUser) -> User:
    """
    Update any account as an administrator.

    Raises:
        AccountNotFoundError: If the id does not resolve
        UnsupportedRoleError: If a role tag is unknown
        LoginAlreadyUsedError / EmailAlreadyUsedError: On collisions with another account
    """
    user = db.query(User).filter(User.id == user_data.id).first() if user_data.id is not None else None
    if not user:
        raise AccountNotFoundError()
    authorities = validate_authorities(user_data.authorities)
    ensure_unique(db, user_data.login, user_data.email, user.id)

    user.login = user_data.login.lower()
    user.email = user_data.email.lower()
    user.first_name = user_data.first_name
    user.last_name = user_data.last_name
    user.lang_key = user_data.lang_key
    user.image_url = user_data.image_url
    user.activated = user_data.activated
    user.authorities = authorities
    commit_unique(db, user)
    db.refresh(user)
    logger.info(f"Updated user '{user.login}'")
    return user

def get_all_users(db: Session, page_params: PageParams) -> PageResponse:
    query = db.query(User).order_by(User.id)
    return paginate(query, page_params, UserResponse)

def get_user(db: Session, login: str) -> User:
    return get_account(db, login)

def delete_user(db: Session, login: str) -> None:
    """
    Delete the account `login`. Provisioned profiles are kept.

    Raises:
        AccountNotFoundError: If the login does not resolve
    """
    user = get_account(db, login)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user '{login}'")
