"""
FastAPI dependencies supplying the caller's identity.

Core services never look up the current user themselves; routers resolve the
login here and pass it on.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ..core.security import verify_token
from ..database import get_db
from .models import User, UserRole
from .service import find_by_login

# OAuth2 scheme for JWT token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/authenticate", auto_error=False)

def get_optional_current_login(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    """
    Login carried by a valid bearer token, or None for anonymous callers.
    """
    if not token:
        return None
    payload = verify_token(token)
    if not payload:
        return None
    return payload.get("sub")

def get_current_login(login: Optional[str] = Depends(get_optional_current_login)) -> str:
    """
    Login of the authenticated caller.

    Raises:
        HTTPException: 401 if no valid token was supplied
    """
    if not login:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return login

def require_admin(login: str = Depends(get_current_login), db: Session = Depends(get_db)) -> User:
    """
    Authenticated caller holding ROLE_ADMIN.

    Raises:
        HTTPException: 403 if the caller is not an administrator
    """
    user = find_by_login(db, login)
    if not user or UserRole.ADMIN.value not in (user.authorities or []):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. Required roles: ['{UserRole.ADMIN.value}']",
        )
    return user
