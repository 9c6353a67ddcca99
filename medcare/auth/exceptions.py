"""
Account lifecycle exceptions.

Status codes separate bad input (400) from conflicts (409), missing records
(404) and failed authentication (401).
"""
from fastapi import HTTPException, status

class AccountException(HTTPException):
    """Base class for account lifecycle exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class InvalidCredentialError(AccountException):
    """Exception raised when a password violates the length policy."""
    def __init__(self, detail: str = "Incorrect password"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class UnsupportedRoleError(AccountException):
    """Exception raised when a role tag is not one of the known roles."""
    def __init__(self, role: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported role: {role}")

class LoginAlreadyUsedError(AccountException):
    """Exception raised when login already exists."""
    def __init__(self, detail: str = "Login name already used"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class EmailAlreadyUsedError(AccountException):
    """Exception raised when email already exists."""
    def __init__(self, detail: str = "Email is already in use"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class ActivationKeyNotFoundError(AccountException):
    """Exception raised when no account holds the activation key."""
    def __init__(self, detail: str = "No user was found for this activation key"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ResetKeyNotFoundError(AccountException):
    """Exception raised when no account holds the reset key."""
    def __init__(self, detail: str = "No user was found for this reset key"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ResetKeyExpiredError(ResetKeyNotFoundError):
    """Exception raised when the reset key exists but is too old."""
    def __init__(self, detail: str = "Reset key has expired"):
        super().__init__(detail=detail)

class EmailNotFoundError(AccountException):
    """Exception raised when no activated account has the email."""
    def __init__(self, detail: str = "Email address not registered"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class AccountNotFoundError(AccountException):
    """Exception raised when a login does not resolve to an account."""
    def __init__(self, detail: str = "User could not be found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class AuthenticationFailedError(AccountException):
    """Exception raised when login and password do not match."""
    def __init__(self, detail: str = "Invalid login or password"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class AccountNotActivatedError(AccountException):
    """Exception raised when an inactive account tries to authenticate."""
    def __init__(self, login: str):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"User {login} was not activated")
