"""
Request and Appointment Schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from .models import AppointmentStatus

class RequestResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    description: Optional[str] = None

    class Config:
        from_attributes = True

class AppointmentResponse(BaseModel):
    """
    Appointment as returned to clients, with the request it was booked from
    """
    id: int
    appointment_date: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    request: RequestResponse

    class Config:
        from_attributes = True
