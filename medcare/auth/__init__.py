"""
Account module for the MedCare system.

This module provides the account lifecycle:
- Registration with role-based profile provisioning
- Key-based activation
- Password reset and password change
- JWT token authentication
"""
