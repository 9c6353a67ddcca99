"""
Request and Appointment Models.

A Request links a patient to a doctor; an Appointment is scheduled from a
Request and therefore involves the same patient and doctor.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base
from ..patients.models import Patient
from ..doctors.models import Doctor

class AppointmentStatus(str, enum.Enum):
    """Enum for appointment status"""
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

class Request(Base):
    """
    Request Model - A patient's request for care from a doctor

    Fields:
    - id: Primary key for request
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - description: Free text supplied by the patient
    - created_at: When the request was created
    """
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    patient = relationship(Patient)
    doctor = relationship(Doctor)
    appointments = relationship("Appointment", back_populates="request")

    def __repr__(self):
        """String representation of the Request model"""
        return f"<Request(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id})>"

class Appointment(Base):
    """
    Appointment Model - A scheduled encounter derived from a Request

    Fields:
    - id: Primary key for appointment
    - request_id: Foreign key to Request model
    - appointment_date: Date and time of the appointment
    - status: Current status of the appointment
    - created_at: When the appointment was created
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("requests.id", ondelete="CASCADE"), nullable=False, index=True)
    appointment_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(AppointmentStatus, name="appointment_status"), default=AppointmentStatus.SCHEDULED)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    request = relationship("Request", back_populates="appointments")

    def __repr__(self):
        """String representation of the Appointment model"""
        return f"<Appointment(id={self.id}, request_id={self.request_id}, date='{self.appointment_date}')>"
