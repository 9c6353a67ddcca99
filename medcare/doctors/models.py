"""
Doctor Model - Stores the doctor profile provisioned at registration.

The doctor's cin holds the owning account's id in a large-integer
(decimal) representation.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, func
from ..database import Base

class Doctor(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - cin: Identifier bound to the owning account's id
    - name: Display name, copied from the account login
    - email: Contact email, copied from the account
    - phone_number: Phone number (placeholder)
    - address: Practice address (placeholder requiring later input)
    - speciality: Medical speciality (placeholder requiring later input)
    - created_at: When the doctor profile was created
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    cin = Column(Numeric(20, 0), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone_number = Column(Numeric(20, 0), nullable=True)
    address = Column(String, nullable=True)
    speciality = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, cin={self.cin}, speciality='{self.speciality}')>"
