"""
Account Schemas - Pydantic models for account data validation and serialization.
"""
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

class UserBase(BaseModel):
    """
    Base User Schema - Contains fields common to all user-related schemas

    Fields:
    - login: Account login (compared case-insensitively)
    - email: Account email address
    - first_name / last_name: Optional display names
    - lang_key: Preferred language
    - image_url: Optional avatar URL
    """
    login: str = Field(..., min_length=1, max_length=50, pattern=r"^[_.@A-Za-z0-9-]*$")
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    lang_key: Optional[str] = Field("en", max_length=6)
    image_url: Optional[str] = Field(None, max_length=256)

class AccountRegistration(UserBase):
    """
    Registration Schema - Used for self-registration

    Extends UserBase with:
    - password: Plain text password (length policy is checked by the service)
    - authorities: Ordered role tags, the first drives profile provisioning
    """
    password: Optional[str] = None
    authorities: List[str] = Field(..., min_length=1)

class AccountUpdate(BaseModel):
    """
    Account Update Schema - Used by the current user to edit their own account
    """
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    lang_key: Optional[str] = Field(None, max_length=6)
    image_url: Optional[str] = Field(None, max_length=256)

class ManagedUser(UserBase):
    """
    Managed User Schema - Used by administrators to create and update accounts

    Fields beyond UserBase:
    - id: Must be absent on create and present on update
    - activated: Activation flag (update only)
    - authorities: Role tags, at least one
    """
    id: Optional[int] = None
    activated: bool = True
    authorities: List[str] = Field(..., min_length=1)

class LoginRequest(BaseModel):
    """Credentials posted to /api/authenticate"""
    username: str
    password: str

class TokenResponse(BaseModel):
    id_token: str
    token_type: str = "bearer"

class PasswordChange(BaseModel):
    """
    Password Change Schema - Used by an authenticated user

    Fields:
    - current_password: The password currently set
    - new_password: Replacement password
    """
    current_password: str
    new_password: Optional[str] = None

class KeyAndPassword(BaseModel):
    """
    Reset Completion Schema - Finishes the password reset flow

    Fields:
    - key: Reset key received by email
    - new_password: Replacement password
    """
    key: str
    new_password: Optional[str] = None

class UserResponse(BaseModel):
    """Account representation returned to clients; never carries credentials."""
    id: int
    login: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    lang_key: Optional[str] = None
    image_url: Optional[str] = None
    activated: bool
    authorities: List[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
