"""
User routes: administrator user management and the current user's
doctors and appointments.
"""
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from ..appointments.schemas import AppointmentResponse
from ..appointments.service import (
    get_doctors_for_user, get_appointments_for_user, get_appointment_doctors_for_user
)
from ..auth.dependencies import get_current_login, require_admin
from ..auth.models import User
from ..auth.notifications import NotificationDispatcher, get_notifier
from ..auth.schemas import ManagedUser, UserResponse
from ..auth.service import get_account
from ..core.pagination import PageParams, PageResponse, pagination_headers
from ..database import get_db
from ..doctors.schemas import DoctorResponse
from .service import (
    create_user, update_user, get_all_users, get_authorities, get_user, delete_user
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])

# ============================================================================
# USER MANAGEMENT
# ============================================================================

@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def create_user_route(
    user_data: ManagedUser,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    logger.debug(f"REST request to save User : {user_data.login}")
    return create_user(db, user_data, notifier, background_tasks)

@router.put("/users", response_model=UserResponse)
def update_user_route(
    user_data: ManagedUser,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    logger.debug(f"REST request to update User : {user_data.login}")
    return update_user(db, user_data)

@router.get("/users", response_model=PageResponse[UserResponse])
def list_users_route(
    response: Response,
    page_params: PageParams = Depends(),
    db: Session = Depends(get_db),
    login: str = Depends(get_current_login)
):
    page = get_all_users(db, page_params)
    response.headers.update(pagination_headers(page, "/api/users"))
    return page

@router.get("/users/authorities", response_model=List[str])
def list_authorities_route(admin: User = Depends(require_admin)):
    return get_authorities()

@router.get("/users/{login}", response_model=UserResponse)
def get_user_route(login: str, db: Session = Depends(get_db), caller: str = Depends(get_current_login)):
    logger.debug(f"REST request to get User : {login}")
    return get_user(db, login)

@router.delete("/users/{login}")
def delete_user_route(login: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    logger.debug(f"REST request to delete User: {login}")
    delete_user(db, login)
    return {"message": f"User {login} deleted"}

# ============================================================================
# CURRENT USER RELATIONSHIPS
# ============================================================================

@router.get("/user/my-doctors", response_model=List[DoctorResponse])
def my_doctors_route(login: str = Depends(get_current_login), db: Session = Depends(get_db)):
    return get_doctors_for_user(db, login)

@router.get("/user/my-appointments", response_model=List[AppointmentResponse])
def my_appointments_route(login: str = Depends(get_current_login), db: Session = Depends(get_db)):
    return get_appointments_for_user(db, login)

@router.get("/user/my-appointment-doctors", response_model=List[DoctorResponse])
def my_appointment_doctors_route(login: str = Depends(get_current_login), db: Session = Depends(get_db)):
    return get_appointment_doctors_for_user(db, login)

@router.get("/user/current", response_model=UserResponse)
def current_user_route(login: str = Depends(get_current_login), db: Session = Depends(get_db)):
    return get_account(db, login)
