"""
Doctor Schemas - Pydantic models for doctor profile serialization.
"""
from typing import Optional
from pydantic import BaseModel

class DoctorResponse(BaseModel):
    """
    Doctor profile as returned to clients

    Fields:
    - id: Profile id
    - cin: Id of the owning account
    - name / email / phone_number / address / speciality: Profile details
    """
    id: int
    cin: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[int] = None
    address: Optional[str] = None
    speciality: Optional[str] = None

    class Config:
        from_attributes = True
