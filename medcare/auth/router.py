"""
Account routes: registration, activation, authentication and password flows.
"""
from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Dict, Optional
import logging

from ..database import get_db
from .dependencies import get_current_login, get_optional_current_login
from .notifications import NotificationDispatcher, get_notifier
from .schemas import (
    AccountRegistration, AccountUpdate, LoginRequest, TokenResponse,
    PasswordChange, KeyAndPassword, UserResponse
)
from .service import (
    register_account, activate_registration, authenticate, get_account,
    update_account, change_password, request_password_reset, complete_password_reset
)

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api", tags=["Account"])

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def register_account_route(
    registration: AccountRegistration,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """
    Register a new account; the first authority decides which profile is created.
    """
    return register_account(db, registration, registration.password, notifier, background_tasks)

@router.get("/activate", response_model=UserResponse)
def activate_account_route(key: str = Query(...), db: Session = Depends(get_db)):
    """
    Activate the account holding the activation key.
    """
    return activate_registration(db, key)

@router.post("/authenticate", response_model=TokenResponse)
def authenticate_route(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange login and password for a bearer token.
    """
    return TokenResponse(id_token=authenticate(db, credentials.username, credentials.password))

@router.get("/authenticate")
def is_authenticated_route(login: Optional[str] = Depends(get_optional_current_login)) -> Optional[str]:
    """
    Return the login of the authenticated caller, or null.
    """
    logger.debug("REST request to check if the current user is authenticated")
    return login

@router.get("/account", response_model=UserResponse)
def get_account_route(login: str = Depends(get_current_login), db: Session = Depends(get_db)):
    return get_account(db, login)

@router.post("/account", response_model=UserResponse)
def save_account_route(
    account: AccountUpdate,
    login: str = Depends(get_current_login),
    db: Session = Depends(get_db)
):
    """
    Update the current user's email and profile details.
    """
    return update_account(
        db, login, account.email,
        first_name=account.first_name,
        last_name=account.last_name,
        lang_key=account.lang_key,
        image_url=account.image_url
    )

@router.post("/account/change-password")
def change_password_route(
    password_change: PasswordChange,
    login: str = Depends(get_current_login),
    db: Session = Depends(get_db)
) -> Dict[str, str]:
    change_password(db, login, password_change.current_password, password_change.new_password)
    return {"message": "Password changed successfully"}

@router.post("/account/reset-password/init")
def request_password_reset_route(
    background_tasks: BackgroundTasks,
    email: str = Body(..., embed=True),
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
) -> Dict[str, str]:
    """
    Email a password reset link to the account registered under `email`.
    """
    request_password_reset(db, email, notifier, background_tasks)
    return {"message": "Password reset instructions sent to your email"}

@router.post("/account/reset-password/finish")
def finish_password_reset_route(key_and_password: KeyAndPassword, db: Session = Depends(get_db)) -> Dict[str, str]:
    complete_password_reset(db, key_and_password.new_password, key_and_password.key)
    return {"message": "Password reset successful"}
