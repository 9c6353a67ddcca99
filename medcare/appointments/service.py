"""
Relationship resolution between an account and its requests, appointments
and doctors.

A patient profile belongs to the account whose id equals the profile's cin.
Filters run in the database over indexed foreign keys and return rows in id
order, the order a full scan would produce. Results are lists and are not
deduplicated: a doctor reached through two requests appears twice.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..auth.models import User
from ..auth.provisioning import ProfileKind, classify_role
from ..auth.service import get_account
from ..doctors.models import Doctor
from ..patients.models import Patient
from .models import Appointment, Request

# Set up logging
logger = logging.getLogger(__name__)

def find_all_requests(db: Session) -> List[Request]:
    return db.query(Request).order_by(Request.id).all()

def find_all_appointments(db: Session) -> List[Appointment]:
    return db.query(Appointment).order_by(Appointment.id).all()

def _requests_of(db: Session, user: User) -> List[Request]:
    return (
        db.query(Request)
        .join(Patient, Request.patient_id == Patient.id)
        .filter(Patient.cin == user.id)
        .order_by(Request.id)
        .all()
    )

def _appointments_of(db: Session, user: User) -> List[Appointment]:
    return (
        db.query(Appointment)
        .join(Request, Appointment.request_id == Request.id)
        .join(Patient, Request.patient_id == Patient.id)
        .filter(Patient.cin == user.id)
        .order_by(Appointment.id)
        .all()
    )

def get_doctors_for_user(db: Session, login: str) -> List[Doctor]:
    """
    Doctors the user has sent a request to, one entry per matching request.

    Args:
        db: Database session
        login: Login of the calling user

    Raises:
        AccountNotFoundError: If the login does not resolve
    """
    user = get_account(db, login)
    doctors = [request.doctor for request in _requests_of(db, user)]
    logger.debug(f"Resolved {len(doctors)} doctors for user '{user.login}'")
    return doctors

def get_appointments_for_user(db: Session, login: str) -> List[Appointment]:
    """
    Appointments visible to the user.

    A caller whose primary role is PATIENT sees the appointments of their own
    requests; every other role sees all appointments.

    Raises:
        AccountNotFoundError: If the login does not resolve
    """
    user = get_account(db, login)
    if classify_role(user.primary_role) is ProfileKind.PATIENT:
        appointments = _appointments_of(db, user)
    else:
        appointments = find_all_appointments(db)
    logger.debug(f"Resolved {len(appointments)} appointments for user '{user.login}'")
    return appointments

def get_appointment_doctors_for_user(db: Session, login: str) -> List[Doctor]:
    """
    Doctor of each appointment booked from one of the user's requests,
    one entry per appointment.

    Raises:
        AccountNotFoundError: If the login does not resolve
    """
    user = get_account(db, login)
    return [appointment.request.doctor for appointment in _appointments_of(db, user)]
