"""
User Model - Stores account identity and lifecycle state.

The account carries the activation and reset keys that drive the lifecycle
state machine, and an ordered list of role tags whose first element is the
primary role used for profile provisioning.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, func
import enum
from ..database import Base

class UserRole(str, enum.Enum):
    """
    Enumeration for role tags in the medical appointment system.

    Roles:
    - USER: Plain authenticated user
    - ADMIN: System administrator with user management access
    - PATIENT: Patient who requests care from doctors
    - DOCTOR: Medical practitioner who receives requests
    """
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"
    PATIENT = "ROLE_PATIENT"
    DOCTOR = "ROLE_DOCTOR"

class User(Base):
    """
    User Model - Stores all account information in the system

    Fields:
    - id: Primary key, also the external identifier of provisioned profiles
    - login: Unique login, stored lower-cased
    - email: Unique email address, compared case-insensitively
    - password_hash: Securely hashed password (never store raw passwords)
    - first_name / last_name: Optional display names
    - lang_key: Preferred language
    - image_url: Optional avatar URL
    - activated: Whether the account has been activated
    - activation_key: Key mailed for activation, cleared once activated
    - reset_key: Key mailed for password reset, cleared once used
    - reset_date: When the current reset key was issued
    - authorities: Ordered role tags, first one is the primary role
    - created_at / updated_at: Audit timestamps
    """
    __tablename__ = "users"
    # ids key the profiles, so sqlite must never reuse the id of a deleted account
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(254), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    lang_key = Column(String(6), nullable=True)
    image_url = Column(String(256), nullable=True)
    activated = Column(Boolean, nullable=False, default=False)
    activation_key = Column(String(64), nullable=True, index=True)
    reset_key = Column(String(64), nullable=True, index=True)
    reset_date = Column(DateTime(timezone=True), nullable=True)
    authorities = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, login='{self.login}', activated={self.activated})>"

    @property
    def primary_role(self):
        """First declared role tag, or None for an account without roles"""
        return self.authorities[0] if self.authorities else None
