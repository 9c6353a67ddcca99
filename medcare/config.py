"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token expiration time in minutes

        # Account lifecycle settings
        password_min_length: Shortest accepted password (inclusive)
        password_max_length: Longest accepted password (inclusive)
        activation_key_length: Length of generated activation and reset keys
        reset_key_validity_hours: Hours before a reset key expires
        auto_activate_on_register: Activate accounts as part of registration

        # Profile placeholders
        default_patient_phone: Phone number given to new patient profiles
        default_doctor_phone: Phone number given to new doctor profiles
        default_doctor_address: Address given to new doctor profiles
        default_doctor_speciality: Speciality given to new doctor profiles

        # Email settings
        mail_server: SMTP server hostname (unset disables sending)
        mail_port: SMTP server port
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_starttls: Whether to use STARTTLS
        base_url: Public URL used in activation and reset links
    """
    # Database settings
    database_url: str = "sqlite:///./medcare.db"

    # JWT settings
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Account lifecycle settings
    password_min_length: int = 4
    password_max_length: int = 100
    activation_key_length: int = 20
    reset_key_validity_hours: int = 24
    auto_activate_on_register: bool = True

    # Profile placeholders
    default_patient_phone: int = 216000000
    default_doctor_phone: int = 2160000
    default_doctor_address: str = "please provide your address"
    default_doctor_speciality: str = "please provide your speciality"

    # Email settings
    mail_server: Optional[str] = None
    mail_port: int = 587
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: str = "noreply@medcare.local"
    mail_starttls: bool = True
    base_url: str = "http://localhost:8080"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
