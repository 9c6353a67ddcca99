"""
Profile provisioning - derives the role-specific profile of a new account.

The primary role is classified into one of three kinds. PATIENT and DOCTOR
each create exactly one profile; every other role tag is the OTHER kind and
provisions nothing.
"""
import enum
import logging
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..config import settings
from ..doctors.models import Doctor
from ..patients.models import Patient
from .models import User, UserRole

# Set up logging
logger = logging.getLogger(__name__)

class ProfileKind(str, enum.Enum):
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    OTHER = "OTHER"

def classify_role(role: Optional[str]) -> ProfileKind:
    """
    Map a role tag to the profile it provisions.

    Matching is exact: "ROLE_PATIENT" and "ROLE_DOCTOR" only.
    """
    if role == UserRole.PATIENT.value:
        return ProfileKind.PATIENT
    if role == UserRole.DOCTOR.value:
        return ProfileKind.DOCTOR
    return ProfileKind.OTHER

def build_patient_profile(user: User) -> Patient:
    return Patient(
        cin=user.id,
        name=user.login,
        email=user.email,
        phone_number=settings.default_patient_phone,
    )

def build_doctor_profile(user: User) -> Doctor:
    return Doctor(
        cin=Decimal(user.id),
        name=user.login,
        email=user.email,
        phone_number=Decimal(settings.default_doctor_phone),
        address=settings.default_doctor_address,
        speciality=settings.default_doctor_speciality,
    )

def provision_profile(db: Session, user: User, primary_role: Optional[str]) -> Union[Patient, Doctor, None]:
    """
    Create the profile matching the account's primary role.

    No duplicate guard is applied here: an account is registered once, so
    provisioning runs once per account.

    Args:
        db: Database session
        user: Persisted account (its id keys the profile)
        primary_role: First role tag declared at registration

    Returns:
        The created Patient or Doctor, or None for any other role
    """
    kind = classify_role(primary_role)
    if kind is ProfileKind.PATIENT:
        profile = build_patient_profile(user)
    elif kind is ProfileKind.DOCTOR:
        profile = build_doctor_profile(user)
    else:
        logger.info(f"No profile provisioned for user {user.id} with role {primary_role}")
        return None

    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"Provisioned {kind.value.lower()} profile {profile.id} for user {user.id}")
    return profile
