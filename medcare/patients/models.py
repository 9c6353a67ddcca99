"""
Patient Model - Stores the patient profile provisioned at registration.

The profile's external identifier (cin) is the numeric id of the owning
account.
"""
from sqlalchemy import Column, Integer, String, BigInteger, DateTime, func
from ..database import Base

class Patient(Base):
    """
    Patient Model - Stores patient-specific information

    Fields:
    - id: Primary key for patient profile
    - cin: Identifier bound to the owning account's id
    - name: Display name, copied from the account login
    - email: Contact email, copied from the account
    - phone_number: Phone number (placeholder until the patient supplies one)
    - created_at: When the patient profile was created
    """
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    cin = Column(BigInteger, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone_number = Column(BigInteger, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, cin={self.cin})>"
